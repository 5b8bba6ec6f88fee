"""
Rafraîchissement des statuts de paiement « en vol » auprès de la passerelle.
"""

import asyncio
from typing import Iterable, List, Optional

from app.config import settings
from app.core.logging import logger, log_sync_event
from app.models.payment import IN_FLIGHT_BUCKETS
from app.schemas.registration import Payment, Registration
from app.services.registration_client import RegistrationSource
from app.services.status_classifier import classify_payment


def has_in_flight_payment(payments: Iterable[Payment]) -> bool:
    """Vrai si au moins un paiement est en attente ou en analyse."""
    return any(classify_payment(p.status) in IN_FLIGHT_BUCKETS for p in payments)


class SyncState:
    """Compteur des lots de synchronisation en cours, partageable entre requêtes."""

    def __init__(self):
        self.active_batches = 0

    @property
    def syncing(self) -> bool:
        return self.active_batches > 0


class PaymentSynchronizer:
    """
    Synchronise les paiements en attente avant recalcul des totaux.

    Un appel à la passerelle par inscription concernée, avec au plus
    `max_concurrency` appels simultanés (1 par défaut: séquentiel).
    Les échecs sont journalisés et n'interrompent jamais le lot.
    """

    def __init__(
        self,
        source: RegistrationSource,
        max_concurrency: Optional[int] = None,
        state: Optional[SyncState] = None,
    ):
        self.source = source
        self.max_concurrency = max(1, max_concurrency or settings.SYNC_MAX_CONCURRENCY)
        self.state = state or SyncState()

    @property
    def syncing(self) -> bool:
        """Vrai pendant l'exécution d'un lot de synchronisation."""
        return self.state.syncing

    async def refresh_stale(self, registrations: Iterable[Registration]) -> List[Registration]:
        """
        Rafraîchit les paiements en vol et retourne de nouveaux instantanés.

        Les inscriptions d'entrée ne sont pas modifiées; une synchronisation
        en échec laisse l'instantané précédent en place.

        Args:
            registrations: Inscriptions à vérifier

        Returns:
            Les inscriptions, dans le même ordre, avec leurs paiements à jour
        """
        registrations = list(registrations)
        self.state.active_batches += 1
        logger.info(f"Synchronisation des paiements: {len(registrations)} inscriptions")
        try:
            if self.max_concurrency == 1:
                refreshed = []
                for registration in registrations:
                    refreshed.append(await self._refresh_one(registration))
            else:
                semaphore = asyncio.Semaphore(self.max_concurrency)

                async def bounded(registration: Registration) -> Registration:
                    async with semaphore:
                        return await self._refresh_one(registration)

                refreshed = list(await asyncio.gather(*(bounded(r) for r in registrations)))
        finally:
            self.state.active_batches -= 1

        logger.info("Synchronisation des paiements terminée")
        return refreshed

    async def sync_registration(self, registration_id: str) -> List[Payment]:
        """
        Synchronise une inscription et retourne ses paiements à jour.
        Contrairement au lot, les erreurs sont propagées à l'appelant.
        """
        await self.source.sync_payment_status(registration_id)
        payments = await self.source.get_payment_data(registration_id)
        log_sync_event(registration_id, "synced", payment_count=len(payments))
        return payments

    async def _refresh_one(self, registration: Registration) -> Registration:
        payments = registration.payments
        if payments is None:
            try:
                payments = await self.source.get_payment_data(registration.id)
            except Exception as e:
                log_sync_event(registration.id, "failed", error=str(e))
                return registration
            registration = registration.model_copy(update={"payments": payments})

        if not has_in_flight_payment(payments):
            return registration

        try:
            await self.source.sync_payment_status(registration.id)
            fresh = await self.source.get_payment_data(registration.id)
        except Exception as e:
            log_sync_event(registration.id, "failed", error=str(e))
            return registration

        log_sync_event(registration.id, "synced", payment_count=len(fresh))
        return registration.model_copy(update={"payments": fresh})
