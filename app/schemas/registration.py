"""
Schémas Pydantic des instantanés d'inscriptions et de paiements.
Reflètent les données renvoyées par le backend du championnat (camelCase).
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.registration import (
    ADMIN_PAID_STATUSES,
    INSCRIPTION_TYPE_ALIASES,
    InscriptionType,
)


def parse_date(value: Any) -> Optional[date]:
    """Convertit une date ISO (avec ou sans heure) en date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.isoparse(str(value)).date()


class SnapshotModel(BaseModel):
    """Base commune: accepte camelCase et snake_case, ignore les champs inconnus."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True
        extra = "ignore"


class Payment(SnapshotModel):
    """Une échéance facturée par la passerelle pour une inscription."""
    id: Optional[str] = None
    registration_id: Optional[str] = None
    billing_type: Optional[str] = None
    status: Optional[str] = Field(None, description="Statut brut de la passerelle")
    value: float = Field(0.0, description="Montant de l'échéance")
    due_date: Optional[date] = None
    installment_number: Optional[int] = None
    installment_count: Optional[int] = Field(
        None, description="Nombre total d'échéances du plan de paiement"
    )
    pix_copy_paste: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = Field(
        None, description="Réponse brute de la passerelle"
    )

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> float:
        if v is None or v == "":
            return 0.0
        return float(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def coerce_due_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)

    @property
    def installment_hint(self) -> Optional[int]:
        """Nombre d'échéances annoncé, ou à défaut celui de la réponse brute."""
        if self.installment_count is not None:
            return self.installment_count
        hinted = (self.raw_response or {}).get("installmentCount")
        if isinstance(hinted, (int, float)) and not isinstance(hinted, bool):
            return int(hinted)
        return None


class StageInfo(SnapshotModel):
    """Étape (course) du calendrier."""
    id: Optional[str] = None
    name: Optional[str] = None
    stage_date: Optional[date] = Field(None, alias="date")
    double_round: Optional[bool] = False
    double_round_pair_id: Optional[str] = None

    @field_validator("stage_date", mode="before")
    @classmethod
    def coerce_stage_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)


class RegistrationStage(SnapshotModel):
    """Association entre une inscription par étape et une étape."""
    stage_id: Optional[str] = None
    stage: Optional[StageInfo] = None

    @property
    def resolved_id(self) -> Optional[str]:
        if self.stage and self.stage.id:
            return self.stage.id
        return self.stage_id

    @property
    def name(self) -> Optional[str]:
        return self.stage.name if self.stage else None

    @property
    def stage_date(self) -> Optional[date]:
        return self.stage.stage_date if self.stage else None


class PilotInfo(SnapshotModel):
    """Pilote titulaire de l'inscription."""
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class SeasonInfo(SnapshotModel):
    id: Optional[str] = None
    name: Optional[str] = None
    championship_id: Optional[str] = None


class Registration(SnapshotModel):
    """
    Inscription d'un pilote dans une saison.

    Attributes:
        amount: Montant total dû pour l'inscription (non réparti)
        inscription_type: Par saison ou par étape
        payment_status: Statut administratif (exempt, direct_payment, paid...)
        payments: Liste des paiements; None si non embarquée dans la réponse
        stages: Étapes associées (inscriptions par étape)
    """
    id: str
    user_id: Optional[str] = None
    season_id: str
    status: Optional[str] = None
    payment_status: Optional[str] = None
    amount: float = 0.0
    inscription_type: InscriptionType = InscriptionType.BY_SEASON
    category_ids: List[str] = Field(default_factory=list)
    stages: List[RegistrationStage] = Field(default_factory=list)
    payments: Optional[List[Payment]] = None
    user: Optional[PilotInfo] = None
    season: Optional[SeasonInfo] = None

    @model_validator(mode="before")
    @classmethod
    def extract_category_ids(cls, data: Any) -> Any:
        # Le backend renvoie les catégories imbriquées: [{"category": {"id": ...}}]
        if isinstance(data, dict) and not data.get("categoryIds") and not data.get("category_ids"):
            categories = data.get("categories") or []
            ids = []
            for item in categories:
                if not isinstance(item, dict):
                    continue
                category = item.get("category") or {}
                category_id = category.get("id") or item.get("categoryId") or item.get("id")
                if category_id:
                    ids.append(str(category_id))
            if ids:
                data = {**data, "categoryIds": ids}
        return data

    @field_validator("inscription_type", mode="before")
    @classmethod
    def normalize_inscription_type(cls, v: Any) -> Any:
        if v is None:
            return InscriptionType.BY_SEASON
        if isinstance(v, str) and v in INSCRIPTION_TYPE_ALIASES:
            return INSCRIPTION_TYPE_ALIASES[v]
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        if v is None or v == "":
            return 0.0
        return float(v)

    @property
    def payment_list(self) -> List[Payment]:
        """Paiements connus (liste vide si non chargés)."""
        return self.payments or []

    @property
    def distinct_stages(self) -> List[RegistrationStage]:
        """Étapes identifiées, sans doublon, dans l'ordre d'origine."""
        seen = set()
        stages = []
        for association in self.stages:
            stage_id = association.resolved_id
            if not stage_id or stage_id in seen:
                continue
            seen.add(stage_id)
            stages.append(association)
        return stages

    @property
    def is_by_stage(self) -> bool:
        return self.inscription_type == InscriptionType.BY_STAGE

    @property
    def is_admin_paid(self) -> bool:
        """Exonéré ou réglé directement: considéré comme intégralement payé."""
        return self.payment_status in ADMIN_PAID_STATUSES

    @property
    def pilot_name(self) -> str:
        return (self.user.name if self.user and self.user.name else "") or ""

    @property
    def pilot_email(self) -> str:
        return (self.user.email if self.user and self.user.email else "") or ""


class DueDateUpdate(SnapshotModel):
    """Nouvelle date d'échéance pour un paiement."""
    new_due_date: date = Field(..., description="Nouvelle date d'échéance")

    @field_validator("new_due_date", mode="before")
    @classmethod
    def coerce_new_due_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)
