"""
tests/test_registration_client.py

Tests du client HTTP du backend des inscriptions (httpx.MockTransport).
"""

import json
from datetime import date

import httpx
import pytest

from app.config import settings
from app.core.exceptions import PaymentNotFoundError, RegistrationSourceError
from app.models.registration import InscriptionType
from app.services.registration_client import HttpRegistrationSource, RegistrationScope


BASE_URL = "http://backend.test/api"


def _source(handler, token="tok-123") -> HttpRegistrationSource:
    return HttpRegistrationSource(
        base_url=BASE_URL,
        token=token,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


REGISTRATION_PAYLOAD = {
    "id": "reg-1",
    "userId": "user-1",
    "seasonId": "season-1",
    "paymentStatus": "pending",
    "amount": "300.00",
    "inscriptionType": "por_etapa",
    "categories": [{"category": {"id": "cat-1", "name": "Sênior"}}],
    "stages": [{"stageId": "st-1", "stage": {"id": "st-1", "name": "Etapa 1", "date": "2025-04-12T13:00:00.000Z"}}],
    "payments": [{"id": "pay-1", "status": "PENDING", "value": 300, "dueDate": "2025-04-01"}],
    "user": {"id": "user-1", "name": "Ana Silva", "email": "ana@example.com"},
    "createdAt": "2025-01-01T00:00:00Z",
}


@pytest.mark.asyncio
async def test_list_registrations_for_championship():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"message": "ok", "data": [REGISTRATION_PAYLOAD]})

    [registration] = await _source(handler).list_registrations(RegistrationScope.CHAMPIONSHIP, "champ-1")

    assert seen == {"path": "/api/season-registrations/championship/champ-1", "auth": "Bearer tok-123"}
    assert registration.inscription_type == InscriptionType.BY_STAGE
    assert registration.amount == 300.0
    assert registration.category_ids == ["cat-1"]
    assert registration.stages[0].resolved_id == "st-1"
    assert registration.stages[0].stage_date == date(2025, 4, 12)
    assert registration.payments[0].due_date == date(2025, 4, 1)


@pytest.mark.asyncio
async def test_list_registrations_for_current_user():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"data": []})

    assert await _source(handler).list_registrations(RegistrationScope.USER) == []
    assert paths == ["/api/season-registrations/my"]


@pytest.mark.asyncio
async def test_list_registrations_requires_scope_id():
    with pytest.raises(ValueError):
        await _source(lambda request: httpx.Response(200)).list_registrations(RegistrationScope.SEASON)


@pytest.mark.asyncio
async def test_payments_without_embedded_list_stay_unloaded():
    payload = {key: value for key, value in REGISTRATION_PAYLOAD.items() if key != "payments"}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [payload]})

    [registration] = await _source(handler).list_registrations(RegistrationScope.SEASON, "season-1")

    assert registration.payments is None
    assert registration.payment_list == []


@pytest.mark.asyncio
async def test_sync_then_get_payment_data():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        if request.method == "POST":
            return httpx.Response(200, json={"message": "Status sincronizado"})
        return httpx.Response(200, json={"data": [
            {"id": "pay-1", "status": "RECEIVED", "value": "150.5", "installmentCount": 2},
        ]})

    source = _source(handler)
    await source.sync_payment_status("reg-1")
    payments = await source.get_payment_data("reg-1")

    assert calls == [
        ("POST", "/api/season-registrations/reg-1/sync-payment"),
        ("GET", "/api/season-registrations/reg-1/payment"),
    ]
    assert payments[0].value == 150.5
    assert payments[0].installment_count == 2


@pytest.mark.asyncio
async def test_commission_policy():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/championships/champ-1"
        return httpx.Response(200, json={"data": {
            "id": "champ-1",
            "commissionAbsorbedByChampionship": False,
            "platformCommissionPercentage": "8.5",
        }})

    policy = await _source(handler).get_commission_policy("champ-1")

    assert policy.commission_absorbed_by_championship is False
    assert policy.platform_commission_percentage == 8.5


@pytest.mark.asyncio
async def test_update_due_date_sends_iso_date():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"id": "pay-1", "status": "PENDING", "dueDate": "2025-06-01"}})

    payment = await _source(handler).update_payment_due_date("pay-1", date(2025, 6, 1))

    assert seen == {
        "method": "PUT",
        "path": "/api/payment-management/update-due-date/pay-1",
        "body": {"newDueDate": "2025-06-01"},
    }
    assert payment.due_date == date(2025, 6, 1)


@pytest.mark.asyncio
async def test_reactivate_unknown_payment_raises_not_found():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/payment-management/reactivate-payment/nope"
        return httpx.Response(404, json={"message": "Pagamento não encontrado"})

    with pytest.raises(PaymentNotFoundError) as exc_info:
        await _source(handler).reactivate_overdue_payment("nope", date(2025, 6, 1))

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Pagamento não encontrado"


@pytest.mark.asyncio
async def test_backend_error_uses_backend_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "Erro interno"})

    with pytest.raises(RegistrationSourceError) as exc_info:
        await _source(handler).list_registrations(RegistrationScope.CHAMPIONSHIP, "champ-1")

    assert not isinstance(exc_info.value, PaymentNotFoundError)
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Erro interno"


@pytest.mark.asyncio
async def test_backend_error_without_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(RegistrationSourceError) as exc_info:
        await _source(handler).list_overdue_payments()

    assert exc_info.value.message == "Erreur lors de la récupération des paiements en retard"


@pytest.mark.asyncio
async def test_unreachable_backend():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connexion refusée", request=request)

    with pytest.raises(RegistrationSourceError) as exc_info:
        await _source(handler).get_payment_data("reg-1")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_no_authorization_header_without_token(monkeypatch):
    monkeypatch.setattr(settings, "BACKEND_API_TOKEN", None)
    headers = []

    def handler(request: httpx.Request) -> httpx.Response:
        headers.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"data": []})

    await _source(handler, token=None).list_pending_payments()

    assert headers == [None]


@pytest.mark.asyncio
async def test_success_with_unreadable_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>ok</html>")

    with pytest.raises(RegistrationSourceError) as exc_info:
        await _source(handler).list_registrations(RegistrationScope.CHAMPIONSHIP, "champ-1")

    assert exc_info.value.status_code == 200
    assert exc_info.value.message == "Erreur lors de la récupération des inscriptions"
