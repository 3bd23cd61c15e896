"""
Domain models for wallet portfolios.
"""

from typing import List, Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import EntitlementErrorCode, PlanName
from packages.identities.models.domain.identity import LinkedIdentity, PrimaryIdentity


class LinkWalletResult(BaseModel):
    """
    Outcome of linking a wallet.

    Conflicts and limit breaches are reported through ``rejection`` rather
    than raised.
    """

    linked_identity: Optional[LinkedIdentity] = None
    rejection: Optional[EntitlementErrorCode] = None

    @classmethod
    def rejected(cls, reason: EntitlementErrorCode) -> "LinkWalletResult":
        return cls(rejection=reason)

    @property
    def succeeded(self) -> bool:
        return self.rejection is None


class WalletPortfolio(BaseModel):
    """All wallets of an owner and how many more the plan allows."""

    owner: PrimaryIdentity
    linked_wallets: List[LinkedIdentity]
    plan_name: PlanName
    max_wallets: int

    @property
    def used_wallets(self) -> int:
        return len(self.linked_wallets) + 1

    @property
    def remaining_slots(self) -> int:
        return max(0, self.max_wallets - self.used_wallets)

    @property
    def can_add_wallet(self) -> bool:
        return self.used_wallets + 1 <= self.max_wallets
