"""
Routeur principal de l'API v1.
Regroupe toutes les routes des différents modules.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import financial, payments

api_router = APIRouter()

# Routes des vues financières
api_router.include_router(
    financial.router,
    prefix="/financial",
    tags=["Finances"],
)

# Routes de gestion des factures
api_router.include_router(
    payments.router,
    prefix="/payments",
    tags=["Paiements"],
)
