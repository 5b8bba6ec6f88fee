"""
Regroupement des inscriptions par saison et par étape.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from app.models.registration import InscriptionType
from app.schemas.financial import SeasonSummary, StageSummary
from app.schemas.registration import Registration, RegistrationStage
from app.services.aggregator import aggregate
from app.services.proration import full_share, proration_share


def group_by_season(registrations: Iterable[Registration]) -> Dict[str, List[Registration]]:
    """
    Inscriptions par saison, limitées aux inscriptions par saison.
    Les inscriptions par étape sont comptées dans le regroupement par étape.
    """
    groups: Dict[str, List[Registration]] = {}
    for registration in registrations:
        if registration.inscription_type != InscriptionType.BY_SEASON:
            continue
        groups.setdefault(registration.season_id, []).append(registration)
    return groups


def _collect_stages(registrations: Iterable[Registration]) -> Dict[str, RegistrationStage]:
    stages: Dict[str, RegistrationStage] = {}
    for registration in registrations:
        for association in registration.distinct_stages:
            stage_id = association.resolved_id
            if stage_id not in stages:
                stages[stage_id] = association
    return stages


def _stage_sort_key(stage_date: Optional[date]):
    # Plus récente d'abord, étapes sans date en dernier
    if stage_date is None:
        return (1, 0)
    return (0, -stage_date.toordinal())


def group_by_stage(
    registrations: Iterable[Registration],
) -> Dict[str, Dict[str, List[Registration]]]:
    """
    Inscriptions par saison puis par étape, limitées aux inscriptions par étape.

    Une inscription apparaît sous chacune de ses étapes. Les étapes d'une
    saison sont triées par date décroissante; une étape sans inscription
    n'apparaît pas.
    """
    registrations = [r for r in registrations if r.inscription_type == InscriptionType.BY_STAGE]
    stages = _collect_stages(registrations)

    raw: Dict[str, Dict[str, List[Registration]]] = {}
    for registration in registrations:
        for association in registration.distinct_stages:
            stage_id = association.resolved_id
            season_groups = raw.setdefault(registration.season_id, {})
            season_groups.setdefault(stage_id, []).append(registration)

    groups: Dict[str, Dict[str, List[Registration]]] = {}
    for season_id, season_groups in raw.items():
        ordered = sorted(
            season_groups,
            key=lambda stage_id: _stage_sort_key(stages[stage_id].stage_date),
        )
        groups[season_id] = {stage_id: season_groups[stage_id] for stage_id in ordered}
    return groups


def season_dashboard(registrations: Iterable[Registration]) -> List[SeasonSummary]:
    """
    Cartes du tableau de bord financier: une par saison, avec le détail
    des étapes pour les inscriptions par étape.
    """
    registrations = list(registrations)
    by_season = group_by_season(registrations)
    by_stage = group_by_stage(registrations)
    stages = _collect_stages(registrations)

    season_names: Dict[str, Optional[str]] = {}
    for registration in registrations:
        if registration.season_id not in season_names:
            season_names[registration.season_id] = (
                registration.season.name if registration.season else None
            )

    summaries = []
    for season_id, season_name in season_names.items():
        stage_summaries = [
            StageSummary(
                stage_id=stage_id,
                stage_name=stages[stage_id].name,
                stage_date=stages[stage_id].stage_date,
                aggregate=aggregate(stage_registrations, proration_share),
            )
            for stage_id, stage_registrations in by_stage.get(season_id, {}).items()
        ]
        summaries.append(
            SeasonSummary(
                season_id=season_id,
                season_name=season_name,
                aggregate=aggregate(by_season.get(season_id, []), full_share),
                stages=stage_summaries,
            )
        )
    return summaries
