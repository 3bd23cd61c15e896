"""
Service for signature-verified wallet registration.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from common.core.config import settings
from common.core.exceptions import SignatureVerificationError
from common.core.telemetry import trace_span, get_logger
from common.db.scoped import transaction
from common.utils.clock import utc_now
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.identities.models.domain.identity import PrimaryIdentityCreateModel
from packages.identities.models.domain.registration import RegistrationResult
from packages.identities.models.domain.wallet_key import WalletKey
from packages.identities.providers.signature.factory import get_signature_verifier
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from packages.identities.repositories.linked_identity_repository import (
    LinkedIdentityRepository,
)

logger = get_logger(__name__)


class RegistrationService:
    """Creates primary identities for wallets that prove control by signing."""

    def __init__(self):
        self.primary_repo = PrimaryIdentityRepository()
        self.linked_repo = LinkedIdentityRepository()
        self.verifier = get_signature_verifier()

    @trace_span
    async def verify_wallet_control(
        self, key: WalletKey, message: str, signature: str
    ) -> bool:
        try:
            verified = await self.verifier.verify(key.wallet_address, message, signature)
        except SignatureVerificationError as e:
            logger.warning(
                f"Rejected signature for {key.wallet_address}: {e}",
                extra={"wallet_address": key.wallet_address},
            )
            return False

        if not verified:
            logger.warning(
                f"Signature for {key.wallet_address} was produced by another wallet",
                extra={"wallet_address": key.wallet_address},
            )
        return verified

    @trace_span
    async def register(
        self,
        wallet_address: str,
        message: str,
        signature: str,
        blockchain_id: Optional[str] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
        metadata_uri: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RegistrationResult:
        """
        Register a wallet as a primary identity on the free plan.

        The trial window starts at registration. An already-registered
        primary wallet is returned as-is; a wallet that is linked under
        another identity is rejected.
        """
        key = WalletKey.parse(
            wallet_address, blockchain_id or settings.default_blockchain_id
        )

        if not await self.verify_wallet_control(key, message, signature):
            return RegistrationResult(rejection=EntitlementErrorCode.INVALID_SIGNATURE)

        logger.info(
            f"Registering wallet {key.wallet_address} on chain {key.blockchain_id}"
        )

        try:
            async with transaction():
                await self.primary_repo.acquire_wallet_lock(key)

                existing = await self.primary_repo.get_by_wallet(key)
                if existing:
                    logger.info(
                        f"Wallet {key.wallet_address} already registered as identity {existing.id}"
                    )
                    return RegistrationResult(identity=existing, is_existing=True)

                linked = await self.linked_repo.get_by_wallet(key)
                if linked:
                    logger.info(
                        f"Wallet {key.wallet_address} is linked under identity {linked.parent_id}",
                        extra={"linked_identity_id": linked.id},
                    )
                    return RegistrationResult(
                        rejection=EntitlementErrorCode.WALLET_EXISTS_LINKED
                    )

                identity = await self.primary_repo.create(
                    PrimaryIdentityCreateModel(
                        wallet_address=key.wallet_address,
                        blockchain_id=key.blockchain_id,
                        name=name,
                        email=email,
                        metadata_uri=metadata_uri,
                        trial_start_date=now or utc_now(),
                        trial_used=False,
                    )
                )
        except IntegrityError:
            # Concurrent registration of the same wallet won the unique index
            existing = await self.primary_repo.get_by_wallet(key)
            if existing is None:
                raise
            return RegistrationResult(identity=existing, is_existing=True)

        logger.info(
            f"Registered identity {identity.id} for wallet {identity.wallet_address}",
            extra={
                "identity_id": identity.id,
                "blockchain_id": identity.blockchain_id,
            },
        )
        return RegistrationResult(identity=identity)
