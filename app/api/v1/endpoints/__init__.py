"""
Endpoints de l'API v1.
"""

from . import financial, payments

__all__ = [
    "financial",
    "payments",
]
