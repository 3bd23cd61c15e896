"""
Domain models for usage counters, transactions, and quota decisions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from common.utils.clock import as_utc
from packages.billing.models.domain.enums import (
    EntitlementErrorCode,
    PlanName,
    TransactionStatus,
    TransactionType,
)


class QuotaDecision(BaseModel):
    """
    Outcome of a quota gate check.

    Rejections are ordinary results carrying a discriminating ``reason``;
    only storage failures are raised.
    """

    allowed: bool
    reason: Optional[EntitlementErrorCode] = None
    identity_id: Optional[int] = None
    plan_name: Optional[PlanName] = None

    # Query gate
    used: Optional[int] = None
    limit: Optional[int] = None

    # Transaction gate
    current_volume: Optional[Decimal] = None
    proposed_amount: Optional[Decimal] = None
    txn_limit: Optional[Decimal] = None

    @classmethod
    def allow(cls, **kwargs) -> "QuotaDecision":
        return cls(allowed=True, **kwargs)

    @classmethod
    def deny(cls, reason: EntitlementErrorCode, **kwargs) -> "QuotaDecision":
        return cls(allowed=False, reason=reason, **kwargs)

    @property
    def remaining(self) -> Optional[int]:
        if self.used is None or self.limit is None:
            return None
        return max(0, self.limit - self.used)

    def get_user_message(self) -> Optional[str]:
        if self.allowed:
            return None
        return self.reason.default_message()


class QueryUsage(BaseModel):
    """Monthly query counter row."""

    id: int
    identity_id: int
    month: int
    year: int
    used: int

    class Config:
        from_attributes = True


class Transaction(BaseModel):
    """A recorded transaction. Successful ones count towards monthly volume."""

    id: int
    identity_id: int
    linked_identity_id: Optional[int] = None
    amount: Decimal
    status: TransactionStatus
    tx_type: TransactionType
    tx_hash: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at", mode="after")
    @classmethod
    def _to_utc(cls, v):
        return as_utc(v)


class TransactionCreateModel(BaseModel):
    """Model for recording a transaction."""

    class Config:
        use_enum_values = True
        validate_default = True

    identity_id: int
    linked_identity_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    status: TransactionStatus = TransactionStatus.SUCCESS
    tx_type: TransactionType = TransactionType.INVOICE
    tx_hash: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class UsageStats(BaseModel):
    """
    Current-period usage for an identity.

    Aggregates query and transaction usage alongside the plan and trial
    state for dashboards.
    """

    identity_id: int
    plan_name: PlanName
    month: int
    year: int

    queries_used: int
    query_limit: int

    transaction_volume: Decimal
    txn_limit: Optional[Decimal] = None
    transaction_count: int = 0

    wallets_used: int
    max_wallets: int

    trial_active: bool
    trial_days_remaining: int

    @property
    def queries_remaining(self) -> int:
        return max(0, self.query_limit - self.queries_used)

    @property
    def query_percentage(self) -> float:
        if not self.query_limit:
            return 0.0
        return round(self.queries_used / self.query_limit * 100, 2)
