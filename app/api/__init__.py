"""
Module API - Points d'entrée RESTful de l'application.
"""

from .deps import get_registration_source, get_financial_service, get_payment_synchronizer

__all__ = [
    "get_registration_source",
    "get_financial_service",
    "get_payment_synchronizer",
]
