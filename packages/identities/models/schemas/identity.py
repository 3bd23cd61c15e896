"""
API schemas for identity operations.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from packages.billing.models.domain.enums import PlanName
from packages.billing.models.schemas.billing import EntitlementResponse
from packages.billing.services.entitlement_service import EntitlementService
from packages.identities.models.domain.enums import IdentityKind
from packages.identities.models.domain.identity import (
    LinkedIdentity,
    PrimaryIdentity,
    ResolvedIdentity,
)


class RegisterIdentityRequest(BaseModel):
    """Request to register a wallet, signed by that wallet."""

    wallet_address: str = Field(..., description="0x-prefixed wallet address")
    blockchain_id: Optional[str] = Field(
        None, description="Chain id, defaults to the configured chain"
    )
    message: str = Field(..., min_length=1, description="Exact text that was signed")
    signature: str = Field(..., description="0x-prefixed personal-sign signature")
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    metadata_uri: Optional[str] = Field(None, max_length=2048)


class IdentityResponse(BaseModel):
    """Public view of a primary or linked identity."""

    id: int
    kind: IdentityKind
    wallet_address: str
    blockchain_id: str
    parent_id: Optional[int] = None
    name: Optional[str] = None
    credit_score: Optional[int] = None
    trial_start_date: Optional[datetime] = None
    trial_used: Optional[bool] = None
    plan_name: Optional[PlanName] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, identity) -> "IdentityResponse":
        if isinstance(identity, LinkedIdentity):
            return cls(
                id=identity.id,
                kind=identity.kind,
                wallet_address=identity.wallet_address,
                blockchain_id=identity.blockchain_id,
                parent_id=identity.parent_id,
                plan_name=identity.plan_name,
                created_at=identity.created_at,
            )

        primary: PrimaryIdentity = identity
        return cls(
            id=primary.id,
            kind=primary.kind,
            wallet_address=primary.wallet_address,
            blockchain_id=primary.blockchain_id,
            name=primary.name,
            credit_score=primary.credit_score,
            trial_start_date=primary.trial_start_date,
            trial_used=primary.trial_used,
            plan_name=EntitlementService().effective_plan(primary),
            created_at=primary.created_at,
        )


class RegisterIdentityResponse(BaseModel):
    identity: IdentityResponse
    is_existing: bool = False


class ResolvedIdentityResponse(BaseModel):
    """A resolved wallet together with the entitlement that governs it."""

    identity: IdentityResponse
    billing_identity_id: int
    entitlement: EntitlementResponse
    queries_used: int = Field(
        ..., description="Queries counted this month, including the current request"
    )

    @classmethod
    def from_domain(
        cls, resolved: ResolvedIdentity, entitlement, queries_used: int
    ) -> "ResolvedIdentityResponse":
        return cls(
            identity=IdentityResponse.from_domain(resolved.identity),
            billing_identity_id=resolved.billing_identity.id,
            entitlement=EntitlementResponse.from_domain(entitlement),
            queries_used=queries_used,
        )


class IdentityExistsResponse(BaseModel):
    exists: bool
    kind: Optional[IdentityKind] = None


class CreditScoreResponse(BaseModel):
    wallet_address: str
    blockchain_id: str
    credit_score: int
