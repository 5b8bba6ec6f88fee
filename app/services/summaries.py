"""
Vues par pilote: liste de statuts et résumé financier personnel.
"""

from typing import Iterable, List, Optional

from app.models.payment import PaymentBucket
from app.models.registration import RegistrationPaymentStatus
from app.schemas.financial import (
    PilotStatus,
    RegistrationPaymentDetails,
    UserFinancialRegistration,
    UserFinancialSummary,
)
from app.schemas.registration import Registration
from app.services.filters import ALL_STATUSES, filter_pilots
from app.services.installments import track_installments
from app.services.payment_items import format_name
from app.services.status_classifier import classify_payment, classify_registration


# Repli sur le statut administratif quand aucun paiement n'est connu
FALLBACK_PAID = {
    RegistrationPaymentStatus.PAID.value,
    RegistrationPaymentStatus.EXEMPT.value,
    RegistrationPaymentStatus.DIRECT_PAYMENT.value,
}
FALLBACK_PENDING = {
    RegistrationPaymentStatus.PENDING.value,
    RegistrationPaymentStatus.PROCESSING.value,
}
FALLBACK_OVERDUE = {
    RegistrationPaymentStatus.FAILED.value,
    RegistrationPaymentStatus.OVERDUE.value,
}


def pilot_statuses(
    registrations: Iterable[Registration],
    status_filter: Optional[str] = ALL_STATUSES,
    search_text: Optional[str] = "",
) -> List[PilotStatus]:
    """Statut canonique de chaque pilote, trié par nom puis filtré."""
    ordered = sorted(registrations, key=lambda r: r.pilot_name.lower())
    return [
        PilotStatus(
            registration_id=registration.id,
            user_name=format_name(registration.pilot_name),
            user_email=registration.user.email if registration.user else None,
            inscription_type=registration.inscription_type,
            status=classify_registration(registration),
            installments=track_installments(registration),
        )
        for registration in filter_pilots(ordered, status_filter, search_text)
    ]


def registration_payment_details(registration: Registration) -> RegistrationPaymentDetails:
    """
    Détail des paiements d'une inscription pour le résumé du pilote.
    Les paiements en analyse comptent comme en attente.
    """
    payments = registration.payment_list
    progress = track_installments(registration)

    if not payments:
        status = registration.payment_status
        amount = registration.amount
        return RegistrationPaymentDetails(
            total_installments=progress.total,
            paid_installments=1 if status in FALLBACK_PAID else 0,
            paid_amount=amount if status in FALLBACK_PAID else 0.0,
            pending_amount=amount if status in FALLBACK_PENDING else 0.0,
            overdue_amount=amount if status in FALLBACK_OVERDUE else 0.0,
            payments=[],
        )

    details = RegistrationPaymentDetails(
        total_installments=progress.total,
        paid_installments=progress.paid,
        payments=payments,
    )
    for payment in payments:
        bucket = classify_payment(payment.status)
        if bucket == PaymentBucket.PAID:
            details.paid_amount += payment.value
        elif bucket in (PaymentBucket.PENDING, PaymentBucket.PROCESSING):
            details.pending_amount += payment.value
        elif bucket == PaymentBucket.OVERDUE:
            details.overdue_amount += payment.value
    return details


def user_financial_summary(
    registrations: Iterable[Registration],
    syncing: bool = False,
) -> UserFinancialSummary:
    """Résumé financier d'un pilote sur l'ensemble de ses inscriptions."""
    summary = UserFinancialSummary(syncing=syncing)
    for registration in registrations:
        details = registration_payment_details(registration)
        summary.registrations.append(
            UserFinancialRegistration(
                registration=registration,
                status=classify_registration(registration),
                payment_details=details,
            )
        )
        summary.total_paid += details.paid_amount
        summary.total_pending += details.pending_amount
        summary.total_overdue += details.overdue_amount
    return summary
