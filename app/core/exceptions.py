"""
Exceptions métier du moteur financier.
"""

from typing import Optional


class FinancialError(Exception):
    """Erreur de base du moteur financier."""


class RegistrationSourceError(FinancialError):
    """
    Le backend du championnat est injoignable ou a répondu en erreur.

    Attributes:
        message: Message renvoyé par le backend ou message générique
        status_code: Code HTTP du backend (None si la requête n'a pas abouti)
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PaymentNotFoundError(RegistrationSourceError):
    """Paiement inconnu du backend (404)."""
