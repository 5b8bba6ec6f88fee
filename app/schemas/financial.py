"""
Schémas Pydantic des vues financières produites par le moteur.
Recalculés à chaque requête, jamais persistés.
"""

from datetime import date
from typing import List, Optional, Set

from pydantic import Field

from app.models.payment import PaymentItemStatus
from app.models.registration import CanonicalStatus, InscriptionType
from app.schemas.registration import Payment, Registration, SnapshotModel


class AggregateResult(SnapshotModel):
    """Totaux monétaires et compteurs d'un regroupement (saison ou étape)."""
    paid_amount: float = 0.0
    pending_amount: float = 0.0
    overdue_amount: float = 0.0
    total_amount: float = 0.0
    total_registrations: int = 0
    paid_count: int = 0
    pending_count: int = 0
    overdue_count: int = 0


class RegistrationBreakdown(SnapshotModel):
    """Répartition des montants d'une inscription entre les six catégories."""
    total_amount: float = 0.0
    paid_amount: float = 0.0
    pending_amount: float = 0.0
    overdue_amount: float = 0.0
    refunded_amount: float = 0.0
    cancelled_amount: float = 0.0
    processing_amount: float = 0.0


class InstallmentProgress(SnapshotModel):
    """Progression des échéances: payées / total."""
    paid: int = 0
    total: int = 1


class StageSummary(SnapshotModel):
    stage_id: str
    stage_name: Optional[str] = None
    stage_date: Optional[date] = None
    aggregate: AggregateResult


class SeasonSummary(SnapshotModel):
    """Carte de saison: inscriptions par saison + détail par étape."""
    season_id: str
    season_name: Optional[str] = None
    aggregate: AggregateResult
    stages: List[StageSummary] = Field(default_factory=list)


class CommissionPolicy(SnapshotModel):
    """Paramètres de commission de la plateforme pour un championnat."""
    commission_absorbed_by_championship: bool = False
    platform_commission_percentage: Optional[float] = None


class FinancialFilters(SnapshotModel):
    """
    Filtres de l'onglet financier.
    Un ensemble vide signifie « pas de filtre ».
    """
    inscription_types: Set[InscriptionType] = Field(default_factory=set)
    stage_ids: Set[str] = Field(default_factory=set)
    statuses: Set[str] = Field(
        default_factory=set, description="Sous-ensemble de paid, pending, overdue, exempt"
    )


class FinancialTotals(SnapshotModel):
    """Totaux affichés en tête de l'onglet financier."""
    paid: float = 0.0
    pending: float = 0.0
    overdue: float = 0.0


class PaymentItem(SnapshotModel):
    """Ligne de paiement affichée dans l'onglet financier."""
    id: str
    registration_id: Optional[str] = None
    user_name: str
    user_email: Optional[str] = None
    value: float
    status: PaymentItemStatus
    due_date: Optional[date] = None
    inscription_type: Optional[InscriptionType] = None
    stage_id: Optional[str] = None
    stage_name: Optional[str] = None
    season_installments: Optional[InstallmentProgress] = None
    is_direct: bool = False
    raw_status: Optional[str] = None
    pix_copy_paste: Optional[str] = None


class PilotStatus(SnapshotModel):
    """Statut canonique d'un pilote pour la liste filtrable."""
    registration_id: str
    user_name: str
    user_email: Optional[str] = None
    inscription_type: InscriptionType
    status: CanonicalStatus
    installments: InstallmentProgress


class RegistrationPaymentDetails(SnapshotModel):
    total_installments: int
    paid_installments: int
    paid_amount: float = 0.0
    pending_amount: float = 0.0
    overdue_amount: float = 0.0
    payments: List[Payment] = Field(default_factory=list)


class UserFinancialRegistration(SnapshotModel):
    registration: Registration
    status: CanonicalStatus
    payment_details: RegistrationPaymentDetails


class UserFinancialSummary(SnapshotModel):
    """Résumé financier d'un pilote (toutes ses inscriptions)."""
    registrations: List[UserFinancialRegistration] = Field(default_factory=list)
    total_paid: float = 0.0
    total_pending: float = 0.0
    total_overdue: float = 0.0
    syncing: bool = False


class SyncStatus(SnapshotModel):
    syncing: bool
