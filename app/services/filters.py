"""
Filtrage de la liste des pilotes par statut et par recherche textuelle.
"""

from typing import Iterable, List, Optional

from app.schemas.registration import Registration
from app.services.status_classifier import classify_registration


ALL_STATUSES = "all"


def filter_pilots(
    registrations: Iterable[Registration],
    status_filter: Optional[str] = ALL_STATUSES,
    search_text: Optional[str] = "",
) -> List[Registration]:
    """
    Filtre les inscriptions sans changer leur ordre.

    Args:
        registrations: Inscriptions déjà triées par l'appelant
        status_filter: Statut canonique attendu, ou "all"
        search_text: Sous-chaîne cherchée dans le nom ou l'email (casse ignorée)
    """
    status_filter = status_filter or ALL_STATUSES
    needle = (search_text or "").strip().lower()

    result = []
    for registration in registrations:
        if status_filter != ALL_STATUSES and classify_registration(registration).value != status_filter:
            continue
        if needle and needle not in registration.pilot_name.lower() and needle not in registration.pilot_email.lower():
            continue
        result.append(registration)
    return result
