"""
API schemas for billing operations.

Request and response models for entitlement, usage, quota, and transaction
endpoints.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from packages.billing.models.domain.enums import (
    EntitlementErrorCode,
    PlanName,
    TransactionStatus,
    TransactionType,
)
from packages.billing.models.domain.entitlement import Entitlement
from packages.billing.models.domain.usage import QuotaDecision, Transaction, UsageStats


# ============================================================================
# Entitlement Schemas
# ============================================================================


class EntitlementResponse(BaseModel):
    """Effective plan, limits, and trial state."""

    identity_id: int = Field(..., description="Billing (primary) identity")
    plan_name: PlanName
    query_limit: int
    txn_limit: Optional[Decimal] = Field(None, description="None means unlimited")
    max_wallets: int
    trial_active: bool
    trial_days_remaining: int

    @classmethod
    def from_domain(cls, entitlement: Entitlement) -> "EntitlementResponse":
        return cls(**entitlement.model_dump(exclude={"trial_expired"}))


# ============================================================================
# Usage Schemas
# ============================================================================


class UsageStatsResponse(BaseModel):
    """Current-period usage."""

    identity_id: int
    plan_name: PlanName
    month: int
    year: int
    queries_used: int
    query_limit: int
    queries_remaining: int
    query_percentage: float
    transaction_volume: Decimal
    txn_limit: Optional[Decimal] = None
    transaction_count: int
    wallets_used: int
    max_wallets: int
    trial_active: bool
    trial_days_remaining: int

    @classmethod
    def from_domain(cls, stats: UsageStats) -> "UsageStatsResponse":
        return cls(
            **stats.model_dump(),
            queries_remaining=stats.queries_remaining,
            query_percentage=stats.query_percentage,
        )


# ============================================================================
# Quota Schemas
# ============================================================================


class QuotaDecisionResponse(BaseModel):
    """Gate decision without side effects."""

    allowed: bool
    reason: Optional[EntitlementErrorCode] = None
    message: Optional[str] = None
    identity_id: Optional[int] = None
    plan_name: Optional[PlanName] = None
    used: Optional[int] = None
    limit: Optional[int] = None
    remaining: Optional[int] = None
    current_volume: Optional[Decimal] = None
    proposed_amount: Optional[Decimal] = None
    txn_limit: Optional[Decimal] = None

    @classmethod
    def from_domain(cls, decision: QuotaDecision) -> "QuotaDecisionResponse":
        return cls(
            **decision.model_dump(),
            message=decision.get_user_message(),
            remaining=decision.remaining,
        )


class TransactionQuotaRequest(BaseModel):
    """Request to check a proposed transaction against the volume limit."""

    wallet_address: str
    blockchain_id: str
    amount: Decimal = Field(..., gt=0, decimal_places=2)


# ============================================================================
# Transaction Schemas
# ============================================================================


class RecordTransactionRequest(BaseModel):
    """Request to record a transaction, gated by the monthly volume limit."""

    wallet_address: str
    blockchain_id: str
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    tx_type: TransactionType = TransactionType.INVOICE
    tx_hash: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1024)


class TransactionResponse(BaseModel):
    """A recorded transaction."""

    id: int
    identity_id: int
    linked_identity_id: Optional[int] = None
    amount: Decimal
    status: TransactionStatus
    tx_type: TransactionType
    tx_hash: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(**transaction.model_dump(exclude={"description"}))


# ============================================================================
# Webhook Schemas
# ============================================================================


class WebhookAckResponse(BaseModel):
    status: str = "success"
    subscription_id: int
    plan_name: PlanName
    is_active: bool
