"""
Module des services métier de Paddock Finance.
"""

from .registration_client import RegistrationSource, HttpRegistrationSource, RegistrationScope
from .sync_service import PaymentSynchronizer, SyncState
from .financial_service import FinancialService

__all__ = [
    "RegistrationSource",
    "HttpRegistrationSource",
    "RegistrationScope",
    "PaymentSynchronizer",
    "SyncState",
    "FinancialService",
]
