"""
Énumérations des paiements de la passerelle.
"""

import enum


class GatewayStatus(str, enum.Enum):
    """Statuts bruts connus de la passerelle de paiement."""
    RECEIVED = "RECEIVED"
    CONFIRMED = "CONFIRMED"
    RECEIVED_IN_CASH = "RECEIVED_IN_CASH"
    PENDING = "PENDING"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    AWAITING_RISK_ANALYSIS = "AWAITING_RISK_ANALYSIS"
    OVERDUE = "OVERDUE"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class PaymentBucket(str, enum.Enum):
    """Catégorie canonique d'un paiement individuel."""
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"
    PROCESSING = "processing"


# Catégories « en vol » qui justifient une synchronisation avec la passerelle
IN_FLIGHT_BUCKETS = frozenset({PaymentBucket.PENDING, PaymentBucket.PROCESSING})


class PaymentItemStatus(str, enum.Enum):
    """Statut d'une ligne de paiement dans l'onglet financier."""
    PAID = "PAID"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    PROCESSING = "PROCESSING"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"
    EXEMPT = "EXEMPT"
