"""
Répartition du montant d'une inscription par étape.
"""

from app.schemas.registration import Registration


def proration_share(registration: Registration) -> float:
    """
    Part du montant (et de chaque paiement) attribuée à une étape.

    Une inscription par saison n'est pas répartie (part = 1). Une inscription
    par étape est répartie à parts égales entre ses étapes distinctes; sans étape
    associée, le dénominateur vaut 1.
    """
    if not registration.is_by_stage:
        return 1.0
    return 1.0 / max(1, len(registration.distinct_stages))


def full_share(registration: Registration) -> float:
    """Part unitaire, pour les totaux qui ne répartissent pas."""
    return 1.0
