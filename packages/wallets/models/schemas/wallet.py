"""
API schemas for wallet portfolio operations.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from packages.billing.models.domain.enums import PlanName
from packages.identities.models.domain.identity import LinkedIdentity
from packages.identities.models.schemas.identity import IdentityResponse
from packages.wallets.models.domain.portfolio import WalletPortfolio


class LinkWalletRequest(BaseModel):
    """Request to add a wallet to an owner's portfolio, signed by the new wallet."""

    owner_id: int = Field(..., description="Primary identity that will own the wallet")
    wallet_address: str
    blockchain_id: str
    message: str = Field(..., min_length=1)
    signature: str


class LinkedWalletResponse(BaseModel):
    id: int
    wallet_address: str
    blockchain_id: str
    parent_id: int
    plan_name: PlanName
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, linked: LinkedIdentity) -> "LinkedWalletResponse":
        return cls(
            id=linked.id,
            wallet_address=linked.wallet_address,
            blockchain_id=linked.blockchain_id,
            parent_id=linked.parent_id,
            plan_name=linked.plan_name,
            created_at=linked.created_at,
        )


class WalletPortfolioResponse(BaseModel):
    owner: IdentityResponse
    linked_wallets: List[LinkedWalletResponse]
    plan_name: PlanName
    max_wallets: int
    used_wallets: int
    remaining_slots: int
    can_add_wallet: bool

    @classmethod
    def from_domain(cls, portfolio: WalletPortfolio) -> "WalletPortfolioResponse":
        return cls(
            owner=IdentityResponse.from_domain(portfolio.owner),
            linked_wallets=[
                LinkedWalletResponse.from_domain(w) for w in portfolio.linked_wallets
            ],
            plan_name=portfolio.plan_name,
            max_wallets=portfolio.max_wallets,
            used_wallets=portfolio.used_wallets,
            remaining_slots=portfolio.remaining_slots,
            can_add_wallet=portfolio.can_add_wallet,
        )
