"""
Onglet financier d'un championnat: totaux nets de commission et lignes
de paiement par pilote.
"""

from typing import Dict, Iterable, List, Optional

from app.config import settings
from app.models.payment import PaymentBucket, PaymentItemStatus
from app.models.registration import InscriptionType, RegistrationPaymentStatus
from app.schemas.financial import (
    CommissionPolicy,
    FinancialFilters,
    FinancialTotals,
    PaymentItem,
)
from app.schemas.registration import Registration, RegistrationStage
from app.services.installments import track_installments
from app.services.proration import proration_share
from app.services.status_classifier import classify_payment, normalize_status


DEFAULT_PILOT_NAME = "Pilote"

ITEM_STATUS_BY_BUCKET = {
    PaymentBucket.PAID: PaymentItemStatus.PAID,
    PaymentBucket.OVERDUE: PaymentItemStatus.OVERDUE,
    PaymentBucket.PROCESSING: PaymentItemStatus.PROCESSING,
    PaymentBucket.PENDING: PaymentItemStatus.PENDING,
    PaymentBucket.REFUNDED: PaymentItemStatus.REFUNDED,
    PaymentBucket.CANCELLED: PaymentItemStatus.CANCELLED,
}

# Statuts dont la valeur est affichée nette de commission
NET_ITEM_STATUSES = frozenset({
    PaymentItemStatus.PAID,
    PaymentItemStatus.PENDING,
    PaymentItemStatus.PROCESSING,
})

# Priorité du statut d'une ligne fusionnée (double manche)
SEVERITY = {
    PaymentItemStatus.OVERDUE: 6,
    PaymentItemStatus.PENDING: 5,
    PaymentItemStatus.PROCESSING: 4,
    PaymentItemStatus.CANCELLED: 3,
    PaymentItemStatus.REFUNDED: 3,
    PaymentItemStatus.PAID: 2,
    PaymentItemStatus.EXEMPT: 1,
}

# Clés de filtre de statut -> statuts de ligne
STATUS_FILTER_ITEMS = {
    "paid": {PaymentItemStatus.PAID},
    "pending": {PaymentItemStatus.PENDING, PaymentItemStatus.PROCESSING},
    "overdue": {PaymentItemStatus.OVERDUE},
    "exempt": {PaymentItemStatus.EXEMPT},
}


def format_name(name: Optional[str]) -> str:
    """Met une majuscule à chaque mot: "joão  SILVA" -> "João Silva"."""
    if not name:
        return ""
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())


def net_value(
    value: float,
    registration: Registration,
    policy: Optional[CommissionPolicy],
) -> float:
    """
    Valeur nette de la commission de la plateforme.

    Inchangée si le championnat absorbe la commission ou si l'inscription
    est administrative (exonérée / paiement direct).
    """
    if policy is None or registration.is_admin_paid:
        return value
    if policy.commission_absorbed_by_championship:
        return value
    percentage = policy.platform_commission_percentage or settings.DEFAULT_PLATFORM_COMMISSION_PERCENTAGE
    return value / (1 + percentage / 100)


def _matches_type(registration: Registration, filters: FinancialFilters) -> bool:
    if not filters.inscription_types:
        return True
    return registration.inscription_type in filters.inscription_types


def _matches_stages(registration: Registration, filters: FinancialFilters) -> bool:
    # Les inscriptions par saison restent visibles quel que soit le filtre d'étape
    if not filters.stage_ids or not registration.is_by_stage:
        return True
    return any(s.resolved_id in filters.stage_ids for s in registration.stages)


def _status_selected(filters: FinancialFilters, key: str) -> bool:
    return not filters.statuses or key in filters.statuses


def championship_totals(
    registrations: Iterable[Registration],
    policy: Optional[CommissionPolicy] = None,
    filters: Optional[FinancialFilters] = None,
) -> FinancialTotals:
    """
    Totaux payé / en attente / en retard de l'onglet financier.

    Les paiements en analyse comptent comme en attente. Les montants payés
    et en attente sont nets de commission, les montants en retard bruts.
    """
    filters = filters or FinancialFilters()
    totals = FinancialTotals()

    for registration in registrations:
        if not _matches_type(registration, filters) or not _matches_stages(registration, filters):
            continue

        payments = registration.payment_list
        if not payments:
            if registration.is_admin_paid and _status_selected(filters, "exempt"):
                totals.paid += registration.amount
            continue

        for payment in payments:
            bucket = classify_payment(payment.status)
            if bucket == PaymentBucket.PAID and _status_selected(filters, "paid"):
                totals.paid += net_value(payment.value, registration, policy)
            elif bucket in (PaymentBucket.PENDING, PaymentBucket.PROCESSING) and _status_selected(filters, "pending"):
                totals.pending += net_value(payment.value, registration, policy)
            elif bucket == PaymentBucket.OVERDUE and _status_selected(filters, "overdue"):
                totals.overdue += payment.value

    return totals


def _synthetic_items(registration: Registration) -> List[PaymentItem]:
    """Lignes d'une inscription sans paiement (exonérée, directe ou payée)."""
    if registration.payment_status == RegistrationPaymentStatus.EXEMPT.value:
        status, suffix = PaymentItemStatus.EXEMPT, "EXEMPT"
    elif registration.payment_status in (
        RegistrationPaymentStatus.DIRECT_PAYMENT.value,
        RegistrationPaymentStatus.PAID.value,
    ):
        status, suffix = PaymentItemStatus.PAID, "DIRECTPAID"
    else:
        return []

    base = dict(
        registration_id=registration.id,
        user_name=format_name(registration.pilot_name or DEFAULT_PILOT_NAME),
        user_email=registration.user.email if registration.user else None,
        status=status,
        inscription_type=registration.inscription_type,
        season_installments=(
            None if registration.is_by_stage else track_installments(registration)
        ),
        is_direct=registration.payment_status == RegistrationPaymentStatus.DIRECT_PAYMENT.value,
    )

    stages = registration.distinct_stages
    if registration.is_by_stage and stages:
        value = registration.amount * proration_share(registration)
        return [
            PaymentItem(
                id=f"{registration.id}-{suffix}-{stage.resolved_id}",
                value=value,
                stage_id=stage.resolved_id,
                stage_name=stage.name,
                **base,
            )
            for stage in stages
        ]
    return [PaymentItem(id=f"{registration.id}-{suffix}", value=registration.amount, **base)]


def _payment_line_items(
    registration: Registration,
    policy: Optional[CommissionPolicy],
    filters: FinancialFilters,
) -> List[PaymentItem]:
    items = []
    stages = registration.distinct_stages if registration.is_by_stage else []
    season_installments = None if registration.is_by_stage else track_installments(registration)

    for index, payment in enumerate(registration.payment_list):
        bucket = classify_payment(payment.status)
        if bucket is None:
            continue
        status = ITEM_STATUS_BY_BUCKET[bucket]
        value = payment.value
        if status in NET_ITEM_STATUSES:
            value = net_value(value, registration, policy)

        stage_id = stage_name = None
        if stages:
            # Paiements répartis tour à tour sur les étapes de l'inscription
            stage = stages[index % len(stages)]
            stage_id = stage.resolved_id
            stage_name = stage.name
            if filters.stage_ids and stage_id not in filters.stage_ids:
                continue

        raw_status = normalize_status(payment.status)
        items.append(
            PaymentItem(
                id=payment.id or f"{registration.id}-{payment.value}-{raw_status}-{stage_id or 'all'}",
                registration_id=registration.id,
                user_name=format_name(registration.pilot_name or DEFAULT_PILOT_NAME),
                user_email=registration.user.email if registration.user else None,
                value=value,
                status=status,
                due_date=payment.due_date,
                inscription_type=registration.inscription_type,
                stage_id=stage_id,
                stage_name=stage_name,
                season_installments=season_installments,
                is_direct=False,
                raw_status=raw_status,
                pix_copy_paste=payment.pix_copy_paste,
            )
        )
    return items


def merge_double_rounds(
    items: List[PaymentItem],
    stage_by_id: Dict[str, RegistrationStage],
) -> List[PaymentItem]:
    """
    Fusionne les lignes d'une même inscription portant sur les deux étapes
    d'une double manche.
    """
    groups: Dict[str, List[PaymentItem]] = {}
    for item in items:
        if item.inscription_type != InscriptionType.BY_STAGE or not item.stage_id or not item.registration_id:
            continue
        association = stage_by_id.get(item.stage_id)
        stage = association.stage if association else None
        if stage is None or not stage.double_round or not stage.double_round_pair_id:
            continue
        pair_key = "+".join(sorted([item.stage_id, stage.double_round_pair_id]))
        groups.setdefault(f"{item.registration_id}|{pair_key}", []).append(item)

    removed = set()
    merged = []
    for key, group in groups.items():
        stage_ids = list(dict.fromkeys(item.stage_id for item in group))
        if len(stage_ids) < 2:
            continue

        names = [stage_by_id[sid].name for sid in stage_ids if stage_by_id[sid].name]
        due_dates = sorted(item.due_date for item in group if item.due_date)
        status = group[0].status
        for item in group[1:]:
            if SEVERITY[item.status] > SEVERITY[status]:
                status = item.status

        base = group[0]
        merged.append(
            PaymentItem(
                id=f"group-{key}",
                registration_id=base.registration_id,
                user_name=base.user_name,
                user_email=base.user_email,
                value=sum(item.value for item in group),
                status=status,
                due_date=due_dates[0] if due_dates else None,
                inscription_type=InscriptionType.BY_STAGE,
                stage_id="+".join(stage_ids),
                stage_name=" + ".join(names),
                season_installments=None,
                is_direct=False,
                raw_status=None,
                pix_copy_paste=base.pix_copy_paste,
            )
        )
        removed.update(id(item) for item in group)

    return [item for item in items if id(item) not in removed] + merged


def build_payment_items(
    registrations: Iterable[Registration],
    policy: Optional[CommissionPolicy] = None,
    filters: Optional[FinancialFilters] = None,
) -> List[PaymentItem]:
    """
    Lignes de paiement de l'onglet financier, triées par nom de pilote.

    Args:
        registrations: Inscriptions du championnat
        policy: Commission de la plateforme (None: valeurs brutes)
        filters: Types d'inscription, étapes et statuts sélectionnés
    """
    filters = filters or FinancialFilters()
    registrations = list(registrations)

    stage_by_id: Dict[str, RegistrationStage] = {}
    items: List[PaymentItem] = []
    for registration in registrations:
        for association in registration.stages:
            if association.resolved_id and association.resolved_id not in stage_by_id:
                stage_by_id[association.resolved_id] = association

        if not _matches_type(registration, filters) or not _matches_stages(registration, filters):
            continue
        if registration.payment_list:
            items.extend(_payment_line_items(registration, policy, filters))
        else:
            items.extend(_synthetic_items(registration))

    items = merge_double_rounds(items, stage_by_id)

    if filters.statuses:
        wanted = set()
        for key in filters.statuses:
            wanted.update(STATUS_FILTER_ITEMS.get(key, set()))
        items = [item for item in items if item.status in wanted]

    return sorted(items, key=lambda item: item.user_name.lower())
