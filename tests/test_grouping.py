"""
tests/test_grouping.py

Tests du regroupement par saison et par étape et des cartes du tableau de bord.
"""

import pytest

from app.services.aggregator import aggregate
from app.services.grouping import group_by_season, group_by_stage, season_dashboard
from app.services.proration import proration_share
from tests.factories import make_payment, make_registration, make_stage


def test_group_by_season_keeps_season_registrations_only():
    registrations = [
        make_registration("r1", season_id="a"),
        make_registration("r2", season_id="b"),
        make_registration("r3", season_id="a", inscription_type="por_etapa", stages=[make_stage("s1")]),
    ]

    groups = group_by_season(registrations)

    assert {k: [r.id for r in v] for k, v in groups.items()} == {"a": ["r1"], "b": ["r2"]}


def test_group_by_stage_fans_out_registrations():
    reg = make_registration(
        "r1",
        inscription_type="por_etapa",
        stages=[make_stage("s1"), make_stage("s2"), make_stage("s1")],
    )

    groups = group_by_stage([reg, make_registration("r2")])

    assert set(groups["season-1"]) == {"s1", "s2"}
    assert [r.id for r in groups["season-1"]["s1"]] == ["r1"]
    assert [r.id for r in groups["season-1"]["s2"]] == ["r1"]


def test_group_by_stage_orders_by_date_descending():
    reg = make_registration(
        inscription_type="por_etapa",
        stages=[
            make_stage("march", stage_date="2025-03-01"),
            make_stage("undated"),
            make_stage("may", stage_date="2025-05-10T14:00:00Z"),
        ],
    )

    groups = group_by_stage([reg])

    assert list(groups["season-1"]) == ["may", "march", "undated"]


def test_group_by_stage_separates_seasons():
    registrations = [
        make_registration("r1", season_id="a", inscription_type="por_etapa", stages=[make_stage("s1")]),
        make_registration("r2", season_id="b", inscription_type="por_etapa", stages=[make_stage("s2")]),
    ]

    groups = group_by_stage(registrations)

    assert list(groups["a"]) == ["s1"]
    assert list(groups["b"]) == ["s2"]


def test_prorated_stage_totals_sum_to_amount():
    reg = make_registration(
        inscription_type="por_etapa",
        amount=1000,
        stages=[make_stage("s1"), make_stage("s2"), make_stage("s3")],
        payments=[make_payment("RECEIVED", 1000)],
    )

    stage_groups = group_by_stage([reg])["season-1"]
    totals = [aggregate(group, proration_share).total_amount for group in stage_groups.values()]

    assert len(totals) == 3
    assert sum(totals) == pytest.approx(1000)


def test_repeated_and_unidentified_stages_keep_the_total():
    reg = make_registration(
        inscription_type="por_etapa",
        amount=300,
        stages=[make_stage("a"), make_stage("a"), make_stage("b"), {"stage": {"name": "Sem id"}}],
        payments=[make_payment("RECEIVED", 300)],
    )

    stage_groups = group_by_stage([reg])["season-1"]
    totals = {stage_id: aggregate(group, proration_share).paid_amount for stage_id, group in stage_groups.items()}

    assert totals == {"a": pytest.approx(150), "b": pytest.approx(150)}


def test_dashboard_end_to_end():
    r1 = make_registration("r1", amount=500, payments=[make_payment("RECEIVED", 500)])
    r2 = make_registration(
        "r2",
        inscription_type="por_etapa",
        amount=300,
        stages=[make_stage("s1", stage_date="2025-04-01"), make_stage("s2", stage_date="2025-06-01")],
        payments=[make_payment("OVERDUE", 150), make_payment("PENDING", 150)],
    )

    [season] = season_dashboard([r1, r2])

    assert season.season_id == "season-1"
    assert season.season_name == "Temporada 2025"
    assert season.aggregate.paid_amount == 500
    assert season.aggregate.total_registrations == 1
    assert [stage.stage_id for stage in season.stages] == ["s2", "s1"]
    for stage in season.stages:
        assert stage.aggregate.overdue_amount == pytest.approx(75)
        assert stage.aggregate.pending_amount == pytest.approx(75)
        assert stage.aggregate.total_amount == pytest.approx(150)
        assert stage.aggregate.overdue_count == 1


def test_dashboard_season_with_stage_registrations_only():
    reg = make_registration("r1", inscription_type="por_etapa", stages=[make_stage("s1", name="Interlagos")])

    [season] = season_dashboard([reg])

    assert season.aggregate.total_registrations == 0
    assert season.stages[0].stage_name == "Interlagos"
    assert season.stages[0].aggregate.total_registrations == 1


def test_dashboard_keeps_first_appearance_order():
    registrations = [
        make_registration("r1", season_id="b", season_name="B"),
        make_registration("r2", season_id="a", season_name="A"),
        make_registration("r3", season_id="b", season_name="B"),
    ]

    seasons = season_dashboard(registrations)

    assert [s.season_id for s in seasons] == ["b", "a"]
    assert seasons[0].aggregate.total_registrations == 2
