"""
Accès aux inscriptions et paiements via l'API du backend du championnat.
Le backend relaie lui-même la passerelle de paiement.
"""

import enum
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.core.exceptions import PaymentNotFoundError, RegistrationSourceError
from app.core.logging import logger
from app.schemas.financial import CommissionPolicy
from app.schemas.registration import Payment, Registration


class RegistrationScope(str, enum.Enum):
    """Périmètre d'une liste d'inscriptions."""
    CHAMPIONSHIP = "championship"
    SEASON = "season"
    USER = "user"   # Inscriptions de l'utilisateur authentifié


class RegistrationSource(ABC):
    """Interface abstraite de la source des inscriptions et paiements."""

    @abstractmethod
    async def list_registrations(
        self,
        scope: RegistrationScope,
        scope_id: Optional[str] = None,
    ) -> List[Registration]:
        """Liste les inscriptions d'un championnat, d'une saison ou de l'utilisateur."""
        pass

    @abstractmethod
    async def get_payment_data(self, registration_id: str) -> List[Payment]:
        """Retourne la liste à jour des paiements d'une inscription."""
        pass

    @abstractmethod
    async def sync_payment_status(self, registration_id: str) -> None:
        """Demande à la passerelle de rafraîchir les statuts d'une inscription."""
        pass

    @abstractmethod
    async def get_commission_policy(self, championship_id: str) -> CommissionPolicy:
        """Paramètres de commission du championnat."""
        pass

    @abstractmethod
    async def update_payment_due_date(self, payment_id: str, new_due_date: date) -> Payment:
        """Modifie l'échéance d'un paiement en attente."""
        pass

    @abstractmethod
    async def reactivate_overdue_payment(self, payment_id: str, new_due_date: date) -> Payment:
        """Réactive une facture en retard avec une nouvelle échéance."""
        pass

    @abstractmethod
    async def list_overdue_payments(self) -> List[Payment]:
        pass

    @abstractmethod
    async def list_pending_payments(self) -> List[Payment]:
        pass


class HttpRegistrationSource(RegistrationSource):
    """
    Implémentation HTTP (httpx) de la source des inscriptions.

    Les réponses du backend sont de la forme {"message": ..., "data": ...}.
    """

    REGISTRATIONS_URL = "/season-registrations"
    PAYMENT_MANAGEMENT_URL = "/payment-management"

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip("/")
        self.token = token or settings.BACKEND_API_TOKEN
        self.timeout = timeout or settings.BACKEND_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        error_message: str,
        json: Optional[Dict[str, Any]] = None,
        not_found_error: bool = False,
    ) -> Any:
        """
        Exécute une requête et retourne le champ `data` de la réponse.

        Raises:
            RegistrationSourceError: Backend injoignable ou réponse en erreur
            PaymentNotFoundError: 404 sur une ressource de paiement
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Backend injoignable ({method} {path}): {e}")
            raise RegistrationSourceError(error_message) from e

        if response.status_code >= 400:
            message = error_message
            try:
                body = response.json()
                if isinstance(body, dict):
                    message = body.get("message") or error_message
            except ValueError:
                pass
            logger.error(f"Erreur backend {response.status_code} sur {method} {path}: {message}")
            if not_found_error and response.status_code == 404:
                raise PaymentNotFoundError(message, response.status_code)
            raise RegistrationSourceError(message, response.status_code)

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Réponse illisible du backend sur {method} {path}: {e}")
            raise RegistrationSourceError(error_message, response.status_code) from e
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def list_registrations(
        self,
        scope: RegistrationScope,
        scope_id: Optional[str] = None,
    ) -> List[Registration]:
        if scope == RegistrationScope.USER:
            path = f"{self.REGISTRATIONS_URL}/my"
        else:
            if not scope_id:
                raise ValueError(f"Identifiant requis pour le périmètre {scope.value}")
            path = f"{self.REGISTRATIONS_URL}/{scope.value}/{scope_id}"

        data = await self._request("GET", path, "Erreur lors de la récupération des inscriptions")
        registrations = [Registration.model_validate(item) for item in data or []]
        logger.debug(f"{len(registrations)} inscriptions chargées ({scope.value} {scope_id or ''})")
        return registrations

    async def get_payment_data(self, registration_id: str) -> List[Payment]:
        data = await self._request(
            "GET",
            f"{self.REGISTRATIONS_URL}/{registration_id}/payment",
            "Erreur lors de la récupération des paiements",
        )
        return [Payment.model_validate(item) for item in data or []]

    async def sync_payment_status(self, registration_id: str) -> None:
        await self._request(
            "POST",
            f"{self.REGISTRATIONS_URL}/{registration_id}/sync-payment",
            "Erreur lors de la synchronisation du statut de paiement",
        )

    async def get_commission_policy(self, championship_id: str) -> CommissionPolicy:
        data = await self._request(
            "GET",
            f"/championships/{championship_id}",
            "Erreur lors de la récupération du championnat",
        )
        return CommissionPolicy.model_validate(data or {})

    async def update_payment_due_date(self, payment_id: str, new_due_date: date) -> Payment:
        data = await self._request(
            "PUT",
            f"{self.PAYMENT_MANAGEMENT_URL}/update-due-date/{payment_id}",
            "Erreur lors de la mise à jour de l'échéance",
            json={"newDueDate": new_due_date.isoformat()},
            not_found_error=True,
        )
        return Payment.model_validate(data or {"id": payment_id})

    async def reactivate_overdue_payment(self, payment_id: str, new_due_date: date) -> Payment:
        data = await self._request(
            "POST",
            f"{self.PAYMENT_MANAGEMENT_URL}/reactivate-payment/{payment_id}",
            "Erreur lors de la réactivation de la facture",
            json={"newDueDate": new_due_date.isoformat()},
            not_found_error=True,
        )
        return Payment.model_validate(data or {"id": payment_id})

    async def list_overdue_payments(self) -> List[Payment]:
        data = await self._request(
            "GET",
            f"{self.PAYMENT_MANAGEMENT_URL}/overdue-payments",
            "Erreur lors de la récupération des paiements en retard",
        )
        return [Payment.model_validate(item) for item in data or []]

    async def list_pending_payments(self) -> List[Payment]:
        data = await self._request(
            "GET",
            f"{self.PAYMENT_MANAGEMENT_URL}/pending-payments",
            "Erreur lors de la récupération des paiements en attente",
        )
        return [Payment.model_validate(item) for item in data or []]
