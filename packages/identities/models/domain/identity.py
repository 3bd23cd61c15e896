"""
Domain models for wallet identities.

An identity is a tagged union: a ``PrimaryIdentity`` owns billing state and a
``LinkedIdentity`` points at exactly one primary. Linked identities never
act as parents.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator, model_validator

from common.utils.clock import as_utc, utc_now
from packages.billing.models.domain.enums import PlanName
from packages.billing.models.domain.subscription import Subscription
from packages.identities.models.domain.enums import IdentityKind


class TrialState(BaseModel):
    """Free-tier trial window of a primary identity."""

    trial_start_date: Optional[datetime] = None
    trial_used: bool = False

    def elapsed_days(self, now: Optional[datetime] = None) -> Optional[int]:
        """Whole days since the trial started, or None if it never started."""
        if self.trial_start_date is None:
            return None
        now = as_utc(now) or utc_now()
        return (now - as_utc(self.trial_start_date)).days

    def is_active(self, trial_days: int, now: Optional[datetime] = None) -> bool:
        elapsed = self.elapsed_days(now)
        if elapsed is None:
            return False
        return not self.trial_used and elapsed < trial_days

    def days_remaining(self, trial_days: int, now: Optional[datetime] = None) -> int:
        if not self.is_active(trial_days, now):
            return 0
        return max(0, trial_days - self.elapsed_days(now))

    def window_elapsed(self, trial_days: int, now: Optional[datetime] = None) -> bool:
        """True once the window has run out, regardless of the used flag."""
        elapsed = self.elapsed_days(now)
        return elapsed is not None and elapsed >= trial_days

    def has_expired(self, trial_days: int, now: Optional[datetime] = None) -> bool:
        """
        A started trial that can no longer be used.

        A trial that never started is not expired.
        """
        if self.trial_start_date is None:
            return False
        return self.trial_used or self.window_elapsed(trial_days, now)


class PrimaryIdentity(BaseModel):
    """Registered wallet that owns a subscription, usage counters, and a trial."""

    kind: Literal[IdentityKind.PRIMARY] = IdentityKind.PRIMARY

    id: int
    wallet_address: str
    blockchain_id: str

    name: Optional[str] = None
    email: Optional[str] = None
    metadata_uri: Optional[str] = None
    credit_score: int = 0

    trial_start_date: Optional[datetime] = None
    trial_used: bool = False

    transaction_count: int = 0

    subscription: Optional[Subscription] = None

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("trial_start_date", "created_at", mode="after")
    @classmethod
    def _to_utc(cls, v):
        return as_utc(v)

    @property
    def trial(self) -> TrialState:
        return TrialState(
            trial_start_date=self.trial_start_date, trial_used=self.trial_used
        )


class LinkedIdentity(BaseModel):
    """Additional wallet that inherits its parent primary's entitlement."""

    kind: Literal[IdentityKind.LINKED] = IdentityKind.LINKED

    id: int
    wallet_address: str
    blockchain_id: str
    parent_id: int

    plan_name: PlanName = PlanName.FREE  # denormalized, display only

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", mode="after")
    @classmethod
    def _to_utc(cls, v):
        return as_utc(v)


Identity = Annotated[
    Union[PrimaryIdentity, LinkedIdentity], Field(discriminator="kind")
]


class ResolvedIdentity(BaseModel):
    """
    Result of resolving a (wallet, chain) pair.

    For a linked identity ``parent`` holds its primary; for a primary it is
    None. ``billing_identity`` is always the primary whose subscription,
    trial, and counters apply.
    """

    identity: Identity
    parent: Optional[PrimaryIdentity] = None

    @model_validator(mode="after")
    def _check_parent(self):
        if isinstance(self.identity, LinkedIdentity):
            if self.parent is None or self.parent.id != self.identity.parent_id:
                raise ValueError("linked identity must be resolved with its parent")
        elif self.parent is not None:
            raise ValueError("primary identity cannot have a parent")
        return self

    @property
    def kind(self) -> IdentityKind:
        return self.identity.kind

    @property
    def is_linked(self) -> bool:
        return self.identity.kind == IdentityKind.LINKED

    @property
    def billing_identity(self) -> PrimaryIdentity:
        return self.parent if self.is_linked else self.identity


class PrimaryIdentityCreateModel(BaseModel):
    """Model for registering a primary identity."""

    wallet_address: str
    wallet_address_normalized: Optional[str] = None
    blockchain_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    metadata_uri: Optional[str] = None
    credit_score: int = 0
    trial_start_date: Optional[datetime] = None
    trial_used: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _normalize(self):
        self.wallet_address_normalized = self.wallet_address.lower()
        return self


class LinkedIdentityCreateModel(BaseModel):
    """Model for linking a wallet to a primary identity."""

    class Config:
        use_enum_values = True
        validate_default = True

    wallet_address: str
    wallet_address_normalized: Optional[str] = None
    blockchain_id: str
    parent_id: int
    plan_name: PlanName = PlanName.FREE

    @model_validator(mode="after")
    def _normalize(self):
        self.wallet_address_normalized = self.wallet_address.lower()
        return self
