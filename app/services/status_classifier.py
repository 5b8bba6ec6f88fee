"""
Classification des statuts de paiement.

Deux ordres de priorité coexistent volontairement:
- classify_registration: badge unique affiché pour une inscription;
- classify_for_count: répartition des compteurs payés / en attente / en retard.
"""

from functools import lru_cache
from typing import Iterable, Optional, Set

from app.core.logging import log_unclassified_status
from app.models.payment import GatewayStatus, PaymentBucket
from app.models.registration import CanonicalStatus, RegistrationPaymentStatus
from app.schemas.registration import Payment, Registration


STATUS_BUCKETS = {
    GatewayStatus.RECEIVED.value: PaymentBucket.PAID,
    GatewayStatus.CONFIRMED.value: PaymentBucket.PAID,
    GatewayStatus.RECEIVED_IN_CASH.value: PaymentBucket.PAID,
    GatewayStatus.OVERDUE.value: PaymentBucket.OVERDUE,
    GatewayStatus.PENDING.value: PaymentBucket.PENDING,
    GatewayStatus.AWAITING_PAYMENT.value: PaymentBucket.PENDING,
    GatewayStatus.AWAITING_RISK_ANALYSIS.value: PaymentBucket.PROCESSING,
    GatewayStatus.REFUNDED.value: PaymentBucket.REFUNDED,
    GatewayStatus.CANCELLED.value: PaymentBucket.CANCELLED,
}


@lru_cache(maxsize=128)
def _report_unclassified(status: str) -> None:
    # Un avertissement par statut inconnu distinct
    log_unclassified_status(status)


def normalize_status(raw_status: Optional[str]) -> str:
    return str(raw_status or "").strip().upper()


def classify_payment(raw_status: Optional[str]) -> Optional[PaymentBucket]:
    """
    Associe un statut brut de la passerelle à sa catégorie canonique.

    Args:
        raw_status: Statut tel que renvoyé par la passerelle (casse indifférente)

    Returns:
        La catégorie, ou None si le statut est inconnu (le paiement est alors
        ignoré par tous les totaux)
    """
    status = normalize_status(raw_status)
    bucket = STATUS_BUCKETS.get(status)
    if bucket is None:
        _report_unclassified(status)
    return bucket


def payment_buckets(payments: Iterable[Payment]) -> Set[PaymentBucket]:
    """Ensemble des catégories présentes dans une liste de paiements."""
    buckets = set()
    for payment in payments:
        bucket = classify_payment(payment.status)
        if bucket is not None:
            buckets.add(bucket)
    return buckets


def classify_registration(registration: Registration) -> CanonicalStatus:
    """
    Statut canonique unique d'une inscription (premier cas applicable):

    1. remboursé ou annulé -> refunded (les deux sont confondus à l'affichage)
    2. en retard -> overdue
    3. en attente ou en analyse -> pending
    4. paiement direct -> direct
    5. exonéré -> exempt
    6. payé -> paid
    7. sinon -> pending
    """
    buckets = payment_buckets(registration.payment_list)

    if PaymentBucket.REFUNDED in buckets or PaymentBucket.CANCELLED in buckets:
        return CanonicalStatus.REFUNDED
    if PaymentBucket.OVERDUE in buckets:
        return CanonicalStatus.OVERDUE
    if PaymentBucket.PENDING in buckets or PaymentBucket.PROCESSING in buckets:
        return CanonicalStatus.PENDING
    if registration.payment_status == RegistrationPaymentStatus.DIRECT_PAYMENT.value:
        return CanonicalStatus.DIRECT
    if registration.payment_status == RegistrationPaymentStatus.EXEMPT.value:
        return CanonicalStatus.EXEMPT
    if PaymentBucket.PAID in buckets:
        return CanonicalStatus.PAID
    return CanonicalStatus.PENDING


def classify_for_count(
    paid_amount: float,
    pending_amount: float,
    overdue_amount: float,
    payment_status: Optional[str] = None,
) -> CanonicalStatus:
    """
    Catégorie d'une inscription pour les compteurs d'un regroupement.
    Se base sur les montants déjà répartis, pas sur les statuts bruts.
    """
    if overdue_amount > 0:
        return CanonicalStatus.OVERDUE
    if pending_amount > 0:
        return CanonicalStatus.PENDING
    if paid_amount > 0 or payment_status == RegistrationPaymentStatus.PAID.value:
        return CanonicalStatus.PAID
    return CanonicalStatus.PENDING
