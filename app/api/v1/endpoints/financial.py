"""
Routes des vues financières: tableau de bord des saisons, onglet
financier du championnat et résumé du pilote.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import (
    get_financial_filters,
    get_financial_service,
    get_payment_synchronizer,
    sync_state,
)
from app.core.logging import logger
from app.models.registration import CanonicalStatus
from app.schemas.financial import (
    FinancialFilters,
    FinancialTotals,
    PaymentItem,
    PilotStatus,
    SeasonSummary,
    SyncStatus,
    UserFinancialSummary,
)
from app.schemas.registration import Payment
from app.services.filters import ALL_STATUSES
from app.services.financial_service import FinancialService
from app.services.sync_service import PaymentSynchronizer


router = APIRouter()

PILOT_STATUS_FILTERS = {ALL_STATUSES} | {s.value for s in CanonicalStatus}


@router.get(
    "/championships/{championship_id}/dashboard",
    response_model=List[SeasonSummary],
    summary="Tableau de bord financier par saison",
)
async def get_season_dashboard(
    championship_id: str,
    refresh: bool = Query(False, description="Synchroniser les paiements en attente avant calcul"),
    service: FinancialService = Depends(get_financial_service),
) -> Any:
    """
    Une carte par saison (inscriptions par saison) avec le détail par
    étape (inscriptions par étape, montants proratisés).
    """
    return await service.season_dashboard(championship_id, refresh=refresh)


@router.get(
    "/championships/{championship_id}/totals",
    response_model=FinancialTotals,
    summary="Totaux de l'onglet financier",
)
async def get_championship_totals(
    championship_id: str,
    filters: FinancialFilters = Depends(get_financial_filters),
    service: FinancialService = Depends(get_financial_service),
) -> Any:
    """Totaux payé / en attente / en retard, nets de commission si applicable."""
    return await service.championship_totals(championship_id, filters)


@router.get(
    "/championships/{championship_id}/payments",
    response_model=List[PaymentItem],
    summary="Lignes de paiement de l'onglet financier",
)
async def list_payment_items(
    championship_id: str,
    filters: FinancialFilters = Depends(get_financial_filters),
    service: FinancialService = Depends(get_financial_service),
) -> Any:
    return await service.payment_items(championship_id, filters)


@router.get(
    "/championships/{championship_id}/pilots",
    response_model=List[PilotStatus],
    summary="Liste des pilotes avec leur statut",
)
async def list_pilot_statuses(
    championship_id: str,
    status_filter: str = Query(ALL_STATUSES, alias="status"),
    search: str = Query("", description="Recherche dans le nom ou l'email"),
    service: FinancialService = Depends(get_financial_service),
) -> Any:
    if status_filter not in PILOT_STATUS_FILTERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Statut inconnu: {status_filter}",
        )

    return await service.pilot_statuses(championship_id, status_filter, search)


@router.get(
    "/me",
    response_model=UserFinancialSummary,
    summary="Résumé financier du pilote connecté",
)
async def get_my_financial_summary(
    refresh: bool = Query(False),
    service: FinancialService = Depends(get_financial_service),
) -> Any:
    return await service.user_summary(refresh=refresh)


@router.post(
    "/registrations/{registration_id}/sync",
    response_model=List[Payment],
    summary="Synchroniser les paiements d'une inscription",
)
async def sync_registration_payments(
    registration_id: str,
    synchronizer: PaymentSynchronizer = Depends(get_payment_synchronizer),
) -> Any:
    """
    Interroge la passerelle pour une inscription et retourne ses paiements.
    Une erreur de la passerelle est renvoyée à l'appelant.
    """
    logger.info(f"Synchronisation manuelle de l'inscription {registration_id}")
    return await synchronizer.sync_registration(registration_id)


@router.get(
    "/sync-status",
    response_model=SyncStatus,
    summary="Synchronisation en cours",
)
async def get_sync_status() -> Any:
    return SyncStatus(syncing=sync_state.syncing)
