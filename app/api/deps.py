"""
Dépendances FastAPI pour l'injection de dépendances.
Construit la source des inscriptions et les services financiers par requête.
"""

from typing import List, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.logging import logger
from app.models.registration import InscriptionType
from app.schemas.financial import FinancialFilters
from app.services.financial_service import FinancialService
from app.services.registration_client import HttpRegistrationSource, RegistrationSource
from app.services.sync_service import PaymentSynchronizer, SyncState


# Jeton Bearer transmis tel quel au backend du championnat
security = HTTPBearer(auto_error=False)

# État partagé des lots de synchronisation (indicateur « syncing »)
sync_state = SyncState()


async def get_registration_source(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> RegistrationSource:
    """
    Source HTTP des inscriptions.

    Le jeton de l'appelant est relayé au backend s'il est présent, sinon
    le jeton de service configuré est utilisé.
    """
    token = credentials.credentials if credentials else None
    if token is None:
        logger.debug("Aucun jeton appelant, utilisation du jeton de service")
    return HttpRegistrationSource(token=token)


async def get_payment_synchronizer(
    source: RegistrationSource = Depends(get_registration_source),
) -> PaymentSynchronizer:
    return PaymentSynchronizer(source, state=sync_state)


async def get_financial_service(
    source: RegistrationSource = Depends(get_registration_source),
    synchronizer: PaymentSynchronizer = Depends(get_payment_synchronizer),
) -> FinancialService:
    return FinancialService(source, synchronizer)


async def get_financial_filters(
    inscription_type: Optional[List[InscriptionType]] = Query(None),
    stage_id: Optional[List[str]] = Query(None),
    status: Optional[List[str]] = Query(None, description="paid, pending, overdue, exempt"),
) -> FinancialFilters:
    """Filtres de l'onglet financier depuis les paramètres de requête (répétables)."""
    return FinancialFilters(
        inscription_types=set(inscription_type or []),
        stage_ids=set(stage_id or []),
        statuses=set(status or []),
    )
