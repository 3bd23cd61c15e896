"""
Service for linking wallets to an owner's portfolio.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from common.core.telemetry import trace_span, get_logger
from common.db.context import readonly
from common.db.scoped import transaction
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.billing.services.entitlement_service import EntitlementService
from packages.identities.models.domain.identity import (
    LinkedIdentityCreateModel,
    PrimaryIdentity,
)
from packages.identities.models.domain.wallet_key import WalletKey
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from packages.identities.repositories.linked_identity_repository import (
    LinkedIdentityRepository,
)
from packages.wallets.models.domain.portfolio import LinkWalletResult, WalletPortfolio

logger = get_logger(__name__)


class WalletPortfolioService:
    """Enforces wallet ownership and the per-plan wallet limit."""

    def __init__(self):
        self.primary_repo = PrimaryIdentityRepository()
        self.linked_repo = LinkedIdentityRepository()
        self.entitlement_service = EntitlementService()

    @trace_span
    async def link_wallet(
        self, owner_id: int, wallet_address: str, blockchain_id: str
    ) -> LinkWalletResult:
        """
        Link a wallet on a chain to a primary identity.

        Checks, in order: the owner exists, the wallet is not already an
        identity (primary or linked, discriminated by owner), and
        ``linked + primary + new <= max_wallets`` for the owner's current plan.
        Runs under the owner and wallet advisory locks so concurrent links
        cannot overshoot the limit or claim a wallet that is being registered.
        """
        key = WalletKey.parse(wallet_address, blockchain_id)

        try:
            async with transaction():
                # Owner first, then wallet; registration only takes the wallet lock
                await self.primary_repo.acquire_owner_lock(owner_id)
                await self.primary_repo.acquire_wallet_lock(key)

                owner = await self.primary_repo.get(owner_id)
                if owner is None:
                    return LinkWalletResult.rejected(
                        EntitlementErrorCode.WALLET_NOT_REGISTERED
                    )

                conflict = await self._find_conflict(owner, key)
                if conflict:
                    return self._reject(owner, key, conflict)

                entitlement = self.entitlement_service.compute_for_primary(owner)
                linked_count = await self.linked_repo.count_by_parent(owner.id)
                if linked_count + 1 + 1 > entitlement.max_wallets:
                    return self._reject(
                        owner, key, EntitlementErrorCode.WALLET_LIMIT_EXCEEDED
                    )

                linked = await self.linked_repo.create(
                    LinkedIdentityCreateModel(
                        wallet_address=key.wallet_address,
                        blockchain_id=key.blockchain_id,
                        parent_id=owner.id,
                        plan_name=entitlement.plan_name,
                    )
                )
        except IntegrityError:
            # Lost a race on the unique wallet index; report who holds it now
            owner = await self.primary_repo.get(owner_id)
            conflict = await self._find_conflict(owner, key) if owner else None
            if conflict is None:
                raise
            return self._reject(owner, key, conflict)

        logger.info(
            f"Linked wallet {linked.wallet_address} on {linked.blockchain_id} to identity {owner_id}",
            extra={
                "identity_id": owner_id,
                "linked_identity_id": linked.id,
                "plan_name": linked.plan_name.value,
            },
        )
        return LinkWalletResult(linked_identity=linked)

    async def _find_conflict(
        self, owner: PrimaryIdentity, key: WalletKey
    ) -> Optional[EntitlementErrorCode]:
        primary = await self.primary_repo.get_by_wallet(key)
        if primary is not None:
            if primary.id == owner.id:
                return EntitlementErrorCode.CANNOT_ADD_PRIMARY_WALLET
            return EntitlementErrorCode.WALLET_EXISTS_PRIMARY

        linked = await self.linked_repo.get_by_wallet(key)
        if linked is not None:
            if linked.parent_id == owner.id:
                return EntitlementErrorCode.WALLET_EXISTS_SAME_USER
            return EntitlementErrorCode.WALLET_EXISTS_OTHER_USER

        return None

    def _reject(
        self, owner: PrimaryIdentity, key: WalletKey, reason: EntitlementErrorCode
    ) -> LinkWalletResult:
        logger.warning(
            f"Rejected linking {key.wallet_address} to identity {owner.id}: {reason.value}",
            extra={"identity_id": owner.id, "reason": reason.value},
        )
        return LinkWalletResult.rejected(reason)

    @trace_span
    @readonly
    async def get_portfolio(self, owner_id: int) -> Optional[WalletPortfolio]:
        """Owner, linked wallets, and wallet allowance. None if the owner is unknown."""
        owner = await self.primary_repo.get(owner_id)
        if owner is None:
            return None

        entitlement = self.entitlement_service.compute_for_primary(owner)
        linked = await self.linked_repo.list_by_parent(owner.id)
        return WalletPortfolio(
            owner=owner,
            linked_wallets=linked,
            plan_name=entitlement.plan_name,
            max_wallets=entitlement.max_wallets,
        )
