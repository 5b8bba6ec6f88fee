"""
Configuration du moteur financier Paddock.
Gestion centralisée de toutes les variables d'environnement.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Configuration principale de l'application.
    Les valeurs sont chargées depuis les variables d'environnement ou le fichier .env
    """

    # Configuration de l'application
    APP_NAME: str = "Paddock Finance"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"

    # Backend du championnat (inscriptions, paiements, passerelle)
    BACKEND_API_URL: str = "http://localhost:3000"
    BACKEND_API_TOKEN: Optional[str] = None
    BACKEND_TIMEOUT_SECONDS: float = 15.0

    # Synchronisation des statuts de paiement
    SYNC_MAX_CONCURRENCY: int = 1  # 1 = séquentiel, la passerelle est sensible au débit

    # Commission de la plateforme (%) quand le championnat ne l'absorbe pas
    DEFAULT_PLATFORM_COMMISSION_PERCENTAGE: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/paddock-finance.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "30 days"

    # URLs
    FRONTEND_URL: str = "http://localhost:5173"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Retourne une instance unique des paramètres.
    Utilise le cache LRU pour éviter de recharger les variables à chaque appel.
    """
    return Settings()


# Instance globale des paramètres
settings = get_settings()
