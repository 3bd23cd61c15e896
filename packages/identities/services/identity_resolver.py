"""
Service for resolving (wallet, chain) pairs to identities.
"""

from typing import Optional

from common.core.telemetry import trace_span, get_logger
from packages.identities.models.domain.enums import IdentityKind
from packages.identities.models.domain.identity import ResolvedIdentity
from packages.identities.models.domain.wallet_key import WalletKey
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from packages.identities.repositories.linked_identity_repository import (
    LinkedIdentityRepository,
)

logger = get_logger(__name__)


class IdentityResolverService:
    """
    Maps a wallet on a chain to its Primary or Linked identity.

    Matching is case-insensitive; stored casing is returned untouched. A miss
    returns None, which callers treat as "not registered".
    """

    def __init__(self):
        self.primary_repo = PrimaryIdentityRepository()
        self.linked_repo = LinkedIdentityRepository()

    @trace_span
    async def resolve_identity(
        self, wallet_address: str, blockchain_id: str
    ) -> Optional[ResolvedIdentity]:
        """
        Resolve a wallet.

        Primary records are checked first, then linked records (returned with
        their parent). Raises ValidationError for malformed input before any
        lookup.
        """
        key = WalletKey.parse(wallet_address, blockchain_id)
        return await self.resolve_key(key)

    @trace_span
    async def resolve_key(self, key: WalletKey) -> Optional[ResolvedIdentity]:
        primary = await self.primary_repo.get_by_wallet(key)
        if primary:
            return ResolvedIdentity(identity=primary)

        linked = await self.linked_repo.get_by_wallet(key)
        if linked is None:
            logger.info(
                f"Wallet {key.wallet_address} on chain {key.blockchain_id} is not registered"
            )
            return None

        parent = await self.primary_repo.get(linked.parent_id)
        if parent is None:
            # FK cascade makes this unreachable outside a concurrent delete
            logger.error(
                f"Linked identity {linked.id} references missing parent {linked.parent_id}"
            )
            return None

        return ResolvedIdentity(identity=linked, parent=parent)

    @trace_span
    async def identity_exists(
        self, wallet_address: str, blockchain_id: str
    ) -> Optional[IdentityKind]:
        """Return which kind of identity holds the wallet, or None."""
        resolved = await self.resolve_identity(wallet_address, blockchain_id)
        return resolved.kind if resolved else None
