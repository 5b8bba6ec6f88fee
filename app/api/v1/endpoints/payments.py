"""
Routes de gestion des factures: échéances, réactivation et listes
des paiements en attente ou en retard.
"""

from typing import Any, List

from fastapi import APIRouter, Depends

from app.api.deps import get_registration_source
from app.core.logging import logger
from app.schemas.registration import DueDateUpdate, Payment
from app.services.registration_client import RegistrationSource


router = APIRouter()


@router.put(
    "/{payment_id}/due-date",
    response_model=Payment,
    summary="Modifier l'échéance d'un paiement",
)
async def update_due_date(
    payment_id: str,
    payload: DueDateUpdate,
    source: RegistrationSource = Depends(get_registration_source),
) -> Any:
    payment = await source.update_payment_due_date(payment_id, payload.new_due_date)
    logger.info(f"Échéance du paiement {payment_id} reportée au {payload.new_due_date.isoformat()}")
    return payment


@router.post(
    "/{payment_id}/reactivate",
    response_model=Payment,
    summary="Réactiver une facture en retard",
)
async def reactivate_payment(
    payment_id: str,
    payload: DueDateUpdate,
    source: RegistrationSource = Depends(get_registration_source),
) -> Any:
    """
    Réémet une facture en retard avec une nouvelle échéance.
    """
    payment = await source.reactivate_overdue_payment(payment_id, payload.new_due_date)
    logger.info(f"Paiement {payment_id} réactivé, échéance {payload.new_due_date.isoformat()}")
    return payment


@router.get(
    "/overdue",
    response_model=List[Payment],
    summary="Paiements en retard",
)
async def list_overdue_payments(
    source: RegistrationSource = Depends(get_registration_source),
) -> Any:
    return await source.list_overdue_payments()


@router.get(
    "/pending",
    response_model=List[Payment],
    summary="Paiements en attente",
)
async def list_pending_payments(
    source: RegistrationSource = Depends(get_registration_source),
) -> Any:
    return await source.list_pending_payments()
