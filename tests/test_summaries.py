"""
tests/test_summaries.py

Tests des vues par pilote.
"""

import pytest

from app.models.registration import CanonicalStatus
from app.services.summaries import (
    pilot_statuses,
    registration_payment_details,
    user_financial_summary,
)
from tests.factories import make_payment, make_registration


def test_pilot_statuses_sorted_then_filtered():
    registrations = [
        make_registration("r1", name="carla dias", payments=[make_payment("OVERDUE")]),
        make_registration("r2", name="Ana Silva", payments=[make_payment("RECEIVED", installment_count=2)]),
        make_registration("r3", name="bruno costa", payments=[make_payment("OVERDUE")]),
    ]

    everyone = pilot_statuses(registrations)
    overdue = pilot_statuses(registrations, "overdue", "")

    assert [p.user_name for p in everyone] == ["Ana Silva", "Bruno Costa", "Carla Dias"]
    assert everyone[0].status == CanonicalStatus.PAID
    assert (everyone[0].installments.paid, everyone[0].installments.total) == (1, 2)
    assert [p.registration_id for p in overdue] == ["r3", "r1"]


def test_pilot_statuses_search():
    registrations = [
        make_registration("r1", name="Ana Silva", email="ana@pista.com"),
        make_registration("r2", name="Bruno Costa", email="bruno@example.com"),
    ]
    assert [p.registration_id for p in pilot_statuses(registrations, "all", "PISTA")] == ["r1"]


def test_details_count_processing_as_pending():
    reg = make_registration(payments=[
        make_payment("RECEIVED", 100),
        make_payment("AWAITING_RISK_ANALYSIS", 40),
        make_payment("AWAITING_PAYMENT", 60),
        make_payment("OVERDUE", 25),
        make_payment("CANCELLED", 500),
    ])

    details = registration_payment_details(reg)

    assert details.paid_amount == 100
    assert details.pending_amount == 100
    assert details.overdue_amount == 25
    assert (details.paid_installments, details.total_installments) == (1, 5)
    assert len(details.payments) == 5


@pytest.mark.parametrize(
    "payment_status, paid, pending, overdue, paid_installments",
    [
        ("paid", 200, 0, 0, 1),
        ("exempt", 200, 0, 0, 1),
        ("direct_payment", 200, 0, 0, 1),
        ("processing", 0, 200, 0, 0),
        ("failed", 0, 0, 200, 0),
        (None, 0, 0, 0, 0),
    ],
)
def test_details_fall_back_to_registration_status(payment_status, paid, pending, overdue, paid_installments):
    reg = make_registration(payment_status=payment_status, amount=200)

    details = registration_payment_details(reg)

    assert (details.paid_amount, details.pending_amount, details.overdue_amount) == (paid, pending, overdue)
    assert details.paid_installments == paid_installments
    assert details.total_installments == 1


def test_user_summary_totals():
    registrations = [
        make_registration("r1", payments=[make_payment("RECEIVED", 100), make_payment("PENDING", 100)]),
        make_registration("r2", payment_status="exempt", amount=50),
        make_registration("r3", payments=[make_payment("OVERDUE", 80)]),
    ]

    summary = user_financial_summary(registrations, syncing=True)

    assert summary.total_paid == 150
    assert summary.total_pending == 100
    assert summary.total_overdue == 80
    assert summary.syncing is True
    assert [r.status for r in summary.registrations] == [
        CanonicalStatus.PENDING,
        CanonicalStatus.EXEMPT,
        CanonicalStatus.OVERDUE,
    ]
