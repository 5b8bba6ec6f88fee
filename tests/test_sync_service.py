"""
tests/test_sync_service.py

Tests du rafraîchissement des paiements en vol.
"""

import asyncio

import pytest

from app.core.exceptions import RegistrationSourceError
from app.services.sync_service import PaymentSynchronizer, SyncState, has_in_flight_payment
from tests.factories import FakeRegistrationSource, make_payment, make_registration


class RecordingSource(FakeRegistrationSource):
    """Enregistre l'indicateur de synchronisation et le parallélisme observés."""

    def __init__(self, registrations, state: SyncState):
        super().__init__(registrations)
        self.state = state
        self.syncing_seen = []
        self.running = 0
        self.peak = 0

    async def sync_payment_status(self, registration_id: str) -> None:
        self.syncing_seen.append(self.state.syncing)
        self.running += 1
        self.peak = max(self.peak, self.running)
        await asyncio.sleep(0)
        self.running -= 1
        await super().sync_payment_status(registration_id)


def _pending(reg_id: str):
    return make_registration(reg_id, payments=[make_payment("PENDING", 100, id=f"{reg_id}-p1")])


def test_has_in_flight_payment():
    assert has_in_flight_payment([make_payment("RECEIVED"), make_payment("AWAITING_RISK_ANALYSIS")])
    assert not has_in_flight_payment([make_payment("RECEIVED"), make_payment("OVERDUE")])
    assert not has_in_flight_payment([])


@pytest.mark.asyncio
async def test_refresh_replaces_in_flight_payments():
    stale = _pending("r1")
    settled = make_registration("r2", payments=[make_payment("RECEIVED", 100)])
    source = FakeRegistrationSource([stale, settled])
    source.fresh_payments["r1"] = [make_payment("RECEIVED", 100, id="r1-p1")]

    refreshed = await PaymentSynchronizer(source).refresh_stale([stale, settled])

    assert source.sync_calls == ["r1"]
    assert [r.id for r in refreshed] == ["r1", "r2"]
    assert refreshed[0].payments[0].status == "RECEIVED"
    assert refreshed[1] is settled
    # L'instantané d'origine n'est pas modifié
    assert stale.payments[0].status == "PENDING"


@pytest.mark.asyncio
async def test_failed_sync_keeps_previous_snapshot_and_continues():
    first, second = _pending("r1"), _pending("r2")
    source = FakeRegistrationSource([first, second])
    source.failing.add("r1")
    source.fresh_payments["r2"] = [make_payment("CONFIRMED", 100)]

    refreshed = await PaymentSynchronizer(source).refresh_stale([first, second])

    assert source.sync_calls == ["r1", "r2"]
    assert refreshed[0] is first
    assert refreshed[1].payments[0].status == "CONFIRMED"


@pytest.mark.asyncio
async def test_missing_payment_list_is_fetched():
    reg = make_registration("r1", payments=None)
    source = FakeRegistrationSource([reg])
    source.fresh_payments["r1"] = [make_payment("RECEIVED", 300)]

    [refreshed] = await PaymentSynchronizer(source).refresh_stale([reg])

    assert source.sync_calls == []
    assert refreshed.payments[0].value == 300
    assert reg.payments is None


@pytest.mark.asyncio
async def test_syncing_flag_is_set_during_batch_only():
    state = SyncState()
    registrations = [_pending("r1"), _pending("r2")]
    source = RecordingSource(registrations, state)
    source.failing.add("r2")
    synchronizer = PaymentSynchronizer(source, state=state)

    assert synchronizer.syncing is False
    await synchronizer.refresh_stale(registrations)

    assert source.syncing_seen == [True, True]
    assert synchronizer.syncing is False
    assert state.active_batches == 0


@pytest.mark.asyncio
async def test_default_is_sequential():
    state = SyncState()
    registrations = [_pending(f"r{i}") for i in range(4)]
    source = RecordingSource(registrations, state)

    synchronizer = PaymentSynchronizer(source, state=state)
    await synchronizer.refresh_stale(registrations)

    assert synchronizer.max_concurrency == 1
    assert source.peak == 1
    assert source.sync_calls == ["r0", "r1", "r2", "r3"]


@pytest.mark.asyncio
async def test_concurrency_cap_is_respected():
    state = SyncState()
    registrations = [_pending(f"r{i}") for i in range(6)]
    source = RecordingSource(registrations, state)

    refreshed = await PaymentSynchronizer(source, max_concurrency=2, state=state).refresh_stale(registrations)

    assert 1 <= source.peak <= 2
    assert [r.id for r in refreshed] == [f"r{i}" for i in range(6)]
    assert sorted(source.sync_calls) == [f"r{i}" for i in range(6)]


@pytest.mark.asyncio
async def test_sync_registration_propagates_errors():
    source = FakeRegistrationSource([_pending("r1")])
    source.failing.add("r1")

    with pytest.raises(RegistrationSourceError):
        await PaymentSynchronizer(source).sync_registration("r1")


@pytest.mark.asyncio
async def test_sync_registration_returns_fresh_payments():
    source = FakeRegistrationSource([_pending("r1")])
    source.fresh_payments["r1"] = [make_payment("RECEIVED", 100)]

    payments = await PaymentSynchronizer(source).sync_registration("r1")

    assert [p.status for p in payments] == ["RECEIVED"]
