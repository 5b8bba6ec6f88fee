"""
Énumérations liées aux inscriptions de pilotes.
"""

import enum


class InscriptionType(str, enum.Enum):
    """Mode d'inscription d'un pilote dans une saison."""
    BY_SEASON = "by_season"     # Montant dû pour toute la saison
    BY_STAGE = "by_stage"       # Montant réparti entre les étapes choisies


# Valeurs renvoyées par le backend du championnat
INSCRIPTION_TYPE_ALIASES = {
    "por_temporada": InscriptionType.BY_SEASON,
    "por_etapa": InscriptionType.BY_STAGE,
}


class RegistrationPaymentStatus(str, enum.Enum):
    """
    Statut administratif grossier porté par l'inscription.
    Utilisé seulement quand la liste détaillée des paiements est absente.
    """
    EXEMPT = "exempt"                   # Exonéré par l'organisation
    DIRECT_PAYMENT = "direct_payment"   # Réglé directement à l'organisation
    PAID = "paid"
    PENDING = "pending"
    PROCESSING = "processing"
    OVERDUE = "overdue"
    FAILED = "failed"


# Statuts administratifs considérés comme intégralement payés
ADMIN_PAID_STATUSES = frozenset({
    RegistrationPaymentStatus.EXEMPT.value,
    RegistrationPaymentStatus.DIRECT_PAYMENT.value,
})


class CanonicalStatus(str, enum.Enum):
    """Statut unique affiché pour une inscription (badge)."""
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"
    PROCESSING = "processing"
    EXEMPT = "exempt"
    DIRECT = "direct"
