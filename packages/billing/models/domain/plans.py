"""Domain models for billing plans."""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import PlanName


class Plan(BaseModel):
    """A catalogue plan and the limits it grants."""

    name: PlanName
    query_limit: int
    max_wallets: int
    txn_limit: Optional[Decimal] = None  # None = unlimited
    price_cents: int

    @classmethod
    def from_name(cls, name: PlanName) -> "Plan":
        limits = name.get_limits()
        return cls(
            name=name,
            query_limit=limits["query_limit"],
            max_wallets=limits["max_wallets"],
            txn_limit=name.get_txn_limit(),
            price_cents=name.get_price_cents(),
        )


def get_plan(name: PlanName) -> Plan:
    """Look up a plan in the static catalogue."""
    return Plan.from_name(PlanName(name))


class PlanInfo(BaseModel):
    """Plan as presented on the public pricing endpoint."""

    plan: str
    name: str
    description: str
    price_cents: int
    price_formatted: str
    billing_period: str
    query_limit: int
    max_wallets: int
    txn_limit: Optional[Decimal]
    features: list[str]


class PlansResponse(BaseModel):
    """Response model for plans endpoint."""

    plans: list[PlanInfo]
