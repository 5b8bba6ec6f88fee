"""
Configuration du système de logging pour Paddock Finance.
Utilise Loguru pour un logging structuré et détaillé.
"""

import sys
from pathlib import Path
from typing import Optional
from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    log_file: str = "logs/paddock-finance.log",
    rotation: str = "10 MB",
    retention: str = "30 days",
) -> None:
    """
    Configure le système de logging de l'application.

    Args:
        log_level: Niveau de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Chemin du fichier de log
        rotation: Taille maximale avant rotation
        retention: Durée de rétention des logs
    """
    # Supprimer le handler par défaut
    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    # Format pour fichier (sans couleurs)
    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{level: <8} | "
        "{name}:{function}:{line} | "
        "{message}"
    )

    logger.add(
        sys.stdout,
        format=log_format,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        format=file_format,
        level=log_level,
        rotation=rotation,
        retention=retention,
        compression="zip",
        backtrace=True,
        diagnose=True,
        enqueue=True,  # Thread-safe
    )

    # Fichier séparé pour les erreurs
    error_log = str(log_path.parent / "errors.log")
    logger.add(
        error_log,
        format=file_format,
        level="ERROR",
        rotation=rotation,
        retention=retention,
        compression="zip",
        backtrace=True,
        diagnose=True,
        enqueue=True,
    )

    logger.info("Système de logging initialisé")
    logger.debug(f"Niveau de log: {log_level}")
    logger.debug(f"Fichier de log: {log_file}")


def log_request(
    method: str,
    url: str,
    status_code: int,
    duration_ms: float,
) -> None:
    """
    Log une requête HTTP avec ses détails.

    Args:
        method: Méthode HTTP (GET, POST, etc.)
        url: URL de la requête
        status_code: Code de statut HTTP
        duration_ms: Durée de la requête en millisecondes
    """
    logger.bind(
        method=method,
        url=url,
        status_code=status_code,
        duration_ms=duration_ms,
    ).info(
        f"{method} {url} - {status_code} ({duration_ms:.2f}ms)"
    )


def log_sync_event(
    registration_id: str,
    outcome: str,
    payment_count: Optional[int] = None,
    error: Optional[str] = None,
) -> None:
    """
    Log une tentative de synchronisation des paiements d'une inscription.

    Args:
        registration_id: ID de l'inscription
        outcome: Résultat (synced, skipped, failed)
        payment_count: Nombre de paiements après synchronisation
        error: Message d'erreur en cas d'échec
    """
    bound = logger.bind(
        registration_id=registration_id,
        outcome=outcome,
        payment_count=payment_count,
    )
    if outcome == "failed":
        bound.warning(f"Sync paiements {registration_id}: échec - {error}")
    else:
        bound.info(
            f"Sync paiements {registration_id}: {outcome}"
            + (f" ({payment_count} paiements)" if payment_count is not None else "")
        )


def log_unclassified_status(raw_status: Optional[str]) -> None:
    """
    Signale un statut de passerelle inconnu.
    Le paiement est ignoré dans les totaux, ce qui peut les sous-estimer.
    """
    logger.bind(raw_status=raw_status).warning(
        f"Statut de paiement non reconnu ignoré: {raw_status!r}"
    )


__all__ = [
    "logger",
    "setup_logging",
    "log_request",
    "log_sync_event",
    "log_unclassified_status",
]
