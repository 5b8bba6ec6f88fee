"""
Énumérations du domaine financier de Paddock.
"""

from .registration import (
    InscriptionType,
    RegistrationPaymentStatus,
    CanonicalStatus,
    ADMIN_PAID_STATUSES,
    INSCRIPTION_TYPE_ALIASES,
)
from .payment import GatewayStatus, PaymentBucket, PaymentItemStatus, IN_FLIGHT_BUCKETS

__all__ = [
    # Registration
    "InscriptionType",
    "RegistrationPaymentStatus",
    "CanonicalStatus",
    "ADMIN_PAID_STATUSES",
    "INSCRIPTION_TYPE_ALIASES",
    # Payment
    "GatewayStatus",
    "PaymentBucket",
    "PaymentItemStatus",
    "IN_FLIGHT_BUCKETS",
]
