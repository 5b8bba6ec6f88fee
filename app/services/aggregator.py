"""
Agrégation monétaire d'un ensemble d'inscriptions.
"""

from typing import Callable, Dict, Iterable

from app.models.payment import PaymentBucket
from app.models.registration import CanonicalStatus
from app.schemas.financial import AggregateResult, RegistrationBreakdown
from app.schemas.registration import Registration
from app.services.proration import proration_share
from app.services.status_classifier import classify_for_count, classify_payment


ShareFn = Callable[[Registration], float]


def breakdown(
    registration: Registration,
    share_fn: ShareFn = proration_share,
) -> RegistrationBreakdown:
    """
    Répartit les montants d'une inscription entre les six catégories.

    Chaque paiement contribue `value * part` à sa catégorie; un statut inconnu
    ne contribue à rien. Sans paiement, une inscription exonérée ou réglée
    directement compte son montant entier (réparti) comme payé.

    Args:
        registration: Inscription à analyser
        share_fn: Part attribuée au regroupement courant

    Returns:
        Montants par catégorie et montant nominal réparti
    """
    share = share_fn(registration)
    amounts: Dict[PaymentBucket, float] = {bucket: 0.0 for bucket in PaymentBucket}

    payments = registration.payment_list
    if payments:
        for payment in payments:
            bucket = classify_payment(payment.status)
            if bucket is None:
                continue
            amounts[bucket] += payment.value * share
    elif registration.is_admin_paid:
        amounts[PaymentBucket.PAID] += registration.amount * share

    return RegistrationBreakdown(
        total_amount=registration.amount * share,
        paid_amount=amounts[PaymentBucket.PAID],
        pending_amount=amounts[PaymentBucket.PENDING],
        overdue_amount=amounts[PaymentBucket.OVERDUE],
        refunded_amount=amounts[PaymentBucket.REFUNDED],
        cancelled_amount=amounts[PaymentBucket.CANCELLED],
        processing_amount=amounts[PaymentBucket.PROCESSING],
    )


def aggregate(
    registrations: Iterable[Registration],
    share_fn: ShareFn = proration_share,
) -> AggregateResult:
    """
    Totaux d'un regroupement d'inscriptions (carte de saison ou d'étape).

    Seules les catégories payé / en attente / en retard alimentent les
    totaux; remboursé, annulé et en analyse restent disponibles via
    `breakdown` pour les écrans qui en ont besoin.
    """
    result = AggregateResult()

    for registration in registrations:
        parts = breakdown(registration, share_fn)
        result.total_amount += parts.total_amount
        result.paid_amount += parts.paid_amount
        result.pending_amount += parts.pending_amount
        result.overdue_amount += parts.overdue_amount
        result.total_registrations += 1

        status = classify_for_count(
            parts.paid_amount,
            parts.pending_amount,
            parts.overdue_amount,
            registration.payment_status,
        )
        if status == CanonicalStatus.OVERDUE:
            result.overdue_count += 1
        elif status == CanonicalStatus.PAID:
            result.paid_count += 1
        else:
            result.pending_count += 1

    return result
