"""
Paddock Finance - Point d'entrée principal de l'application.
Moteur financier des championnats: statuts, échéances et totaux des inscriptions.
"""

import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.config import settings
from app.core.exceptions import PaymentNotFoundError, RegistrationSourceError
from app.core.logging import setup_logging, logger, log_request
from app.api.v1.router import api_router


# Configuration du logging au démarrage
setup_logging(
    log_level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
    rotation=settings.LOG_ROTATION,
    retention=settings.LOG_RETENTION,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestionnaire de cycle de vie de l'application.
    Exécuté au démarrage et à l'arrêt.
    """
    logger.info("=" * 60)
    logger.info(f"Démarrage de {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environnement: {settings.ENVIRONMENT}")
    logger.info(f"Backend des inscriptions: {settings.BACKEND_API_URL}")
    logger.info("=" * 60)

    logger.info("Application prête à recevoir des requêtes")

    yield

    logger.info("Arrêt de l'application...")
    logger.info("Application arrêtée proprement")


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## Paddock Finance - Moteur financier des championnats

    ### Fonctionnalités principales:

    * **Tableau de bord** - Totaux par saison et par étape, montants proratisés
    * **Onglet financier** - Totaux nets de commission, lignes de paiement filtrables
    * **Pilotes** - Statut canonique et progression des échéances
    * **Synchronisation** - Rafraîchissement des paiements en attente auprès de la passerelle
    * **Factures** - Report d'échéance et réactivation des paiements en retard

    ### Documentation API:

    * Swagger UI: `/docs`
    * ReDoc: `/redoc`
    * OpenAPI JSON: `/openapi.json`
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_tags=[
        {"name": "Finances", "description": "Tableaux de bord, totaux et statuts des pilotes"},
        {"name": "Paiements", "description": "Échéances et réactivation des factures"},
    ],
)


# Configuration CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware de logging des requêtes
@app.middleware("http")
async def logging_middleware(request: Request, call_next: Callable) -> Response:
    """
    Middleware pour logger toutes les requêtes HTTP.
    """
    start_time = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        url=str(request.url.path),
        status_code=response.status_code,
        duration_ms=duration_ms,
    )

    response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"

    return response


# Gestionnaire d'erreurs de validation
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Gestionnaire personnalisé pour les erreurs de validation Pydantic.
    """
    logger.warning(f"Erreur de validation: {exc.errors()}")

    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Erreur de validation des données",
            "errors": errors,
        },
    )


# Paiement inconnu du backend
@app.exception_handler(PaymentNotFoundError)
async def payment_not_found_handler(
    request: Request,
    exc: PaymentNotFoundError
) -> JSONResponse:
    logger.warning(f"Paiement introuvable: {exc.message}")

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message},
    )


# Backend des inscriptions injoignable ou en erreur
@app.exception_handler(RegistrationSourceError)
async def registration_source_exception_handler(
    request: Request,
    exc: RegistrationSourceError
) -> JSONResponse:
    """
    Le chargement a échoué: l'interface affiche un message d'erreur
    avec une action « Réessayer ».
    """
    logger.error(f"Erreur du backend des inscriptions ({exc.status_code}): {exc.message}")

    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "detail": "Impossible de charger les données financières",
            "message": exc.message,
            "retry": True,
        },
    )


# Gestionnaire d'erreurs génériques
@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Gestionnaire pour toutes les autres exceptions.
    """
    logger.exception(f"Erreur non gérée: {exc}")

    if settings.DEBUG:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": str(exc),
                "type": type(exc).__name__,
            },
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Une erreur interne est survenue",
        },
    )


# Inclusion du routeur API v1
app.include_router(api_router, prefix="/api/v1")


@app.get(
    "/health",
    tags=["Système"],
    summary="Vérification de l'état de l'application",
)
async def health_check():
    """
    Endpoint de health check pour les load balancers et monitoring.
    Le backend des inscriptions n'est pas sondé: le moteur ne stocke rien.
    """
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/", tags=["Système"])
async def root():
    """
    Point d'entrée racine de l'API.
    """
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Moteur financier des inscriptions aux championnats",
        "docs": "/docs" if settings.DEBUG else "Documentation désactivée en production",
        "health": "/health",
        "api": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
