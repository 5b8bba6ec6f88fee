"""
Service principal des vues financières.
Orchestre la source des inscriptions, la synchronisation et les calculs.
"""

from typing import List, Optional

from app.core.exceptions import RegistrationSourceError
from app.core.logging import logger
from app.schemas.financial import (
    CommissionPolicy,
    FinancialFilters,
    FinancialTotals,
    PaymentItem,
    PilotStatus,
    SeasonSummary,
    UserFinancialSummary,
)
from app.schemas.registration import Registration
from app.services.grouping import season_dashboard
from app.services.payment_items import build_payment_items, championship_totals
from app.services.registration_client import RegistrationScope, RegistrationSource
from app.services.summaries import pilot_statuses, user_financial_summary
from app.services.sync_service import PaymentSynchronizer


class FinancialService:
    """
    Point d'entrée des écrans financiers (tableau de bord, onglet
    financier du championnat, résumé du pilote).
    """

    def __init__(self, source: RegistrationSource, synchronizer: Optional[PaymentSynchronizer] = None):
        self.source = source
        self.synchronizer = synchronizer or PaymentSynchronizer(source)

    async def load_registrations(
        self,
        scope: RegistrationScope,
        scope_id: Optional[str] = None,
        refresh: bool = False,
    ) -> List[Registration]:
        """
        Charge les inscriptions et complète les listes de paiements absentes,
        avec rafraîchissement optionnel des paiements en vol.
        """
        registrations = await self.source.list_registrations(scope, scope_id)
        registrations = await self._with_payment_lists(registrations)
        if refresh:
            registrations = await self.synchronizer.refresh_stale(registrations)
        return registrations

    async def _commission_policy(self, championship_id: str) -> Optional[CommissionPolicy]:
        try:
            return await self.source.get_commission_policy(championship_id)
        except RegistrationSourceError as e:
            # Sans paramètres de commission, les valeurs sont affichées brutes
            logger.warning(f"Commission du championnat {championship_id} indisponible: {e}")
            return None

    async def _with_payment_lists(self, registrations: List[Registration]) -> List[Registration]:
        loaded = []
        for registration in registrations:
            if registration.payments is not None:
                loaded.append(registration)
                continue
            try:
                payments = await self.source.get_payment_data(registration.id)
            except RegistrationSourceError as e:
                logger.warning(f"Paiements de l'inscription {registration.id} indisponibles: {e}")
                loaded.append(registration)
                continue
            loaded.append(registration.model_copy(update={"payments": payments}))
        return loaded

    async def season_dashboard(self, championship_id: str, refresh: bool = False) -> List[SeasonSummary]:
        registrations = await self.load_registrations(
            RegistrationScope.CHAMPIONSHIP, championship_id, refresh
        )
        return season_dashboard(registrations)

    async def championship_totals(
        self,
        championship_id: str,
        filters: Optional[FinancialFilters] = None,
    ) -> FinancialTotals:
        registrations = await self.load_registrations(RegistrationScope.CHAMPIONSHIP, championship_id)
        policy = await self._commission_policy(championship_id)
        return championship_totals(registrations, policy, filters)

    async def payment_items(
        self,
        championship_id: str,
        filters: Optional[FinancialFilters] = None,
    ) -> List[PaymentItem]:
        registrations = await self.load_registrations(RegistrationScope.CHAMPIONSHIP, championship_id)
        policy = await self._commission_policy(championship_id)
        return build_payment_items(registrations, policy, filters)

    async def pilot_statuses(
        self,
        championship_id: str,
        status_filter: str = "all",
        search_text: str = "",
    ) -> List[PilotStatus]:
        registrations = await self.load_registrations(RegistrationScope.CHAMPIONSHIP, championship_id)
        return pilot_statuses(registrations, status_filter, search_text)

    async def user_summary(self, refresh: bool = False) -> UserFinancialSummary:
        """Résumé financier de l'utilisateur authentifié auprès du backend."""
        registrations = await self.load_registrations(RegistrationScope.USER, refresh=refresh)
        return user_financial_summary(registrations, syncing=self.synchronizer.syncing)
