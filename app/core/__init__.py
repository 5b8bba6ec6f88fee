"""
Module core - Fonctionnalités centrales de l'application.
Contient le logging et les exceptions de base.
"""

from .logging import setup_logging, logger
from .exceptions import FinancialError, RegistrationSourceError, PaymentNotFoundError

__all__ = [
    "setup_logging",
    "logger",
    "FinancialError",
    "RegistrationSourceError",
    "PaymentNotFoundError",
]
