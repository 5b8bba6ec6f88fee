"""
Module des schémas Pydantic de Paddock Finance.
Instantanés reçus du backend et vues financières produites.
"""

from .registration import (
    SnapshotModel,
    Payment,
    StageInfo,
    RegistrationStage,
    PilotInfo,
    SeasonInfo,
    Registration,
    DueDateUpdate,
)
from .financial import (
    AggregateResult,
    RegistrationBreakdown,
    InstallmentProgress,
    StageSummary,
    SeasonSummary,
    CommissionPolicy,
    FinancialFilters,
    FinancialTotals,
    PaymentItem,
    PilotStatus,
    RegistrationPaymentDetails,
    UserFinancialRegistration,
    UserFinancialSummary,
    SyncStatus,
)

__all__ = [
    # Registration
    "SnapshotModel",
    "Payment",
    "StageInfo",
    "RegistrationStage",
    "PilotInfo",
    "SeasonInfo",
    "Registration",
    "DueDateUpdate",
    # Financial
    "AggregateResult",
    "RegistrationBreakdown",
    "InstallmentProgress",
    "StageSummary",
    "SeasonSummary",
    "CommissionPolicy",
    "FinancialFilters",
    "FinancialTotals",
    "PaymentItem",
    "PilotStatus",
    "RegistrationPaymentDetails",
    "UserFinancialRegistration",
    "UserFinancialSummary",
    "SyncStatus",
]
