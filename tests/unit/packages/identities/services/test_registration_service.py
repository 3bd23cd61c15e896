"""
Unit tests for RegistrationService.

Signatures are produced with real local accounts.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from common.core.exceptions import ValidationError
from common.utils.clock import utc_now
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.identities.services.registration_service import RegistrationService
from tests.fixtures import CHAIN_ID, LINKED_WALLET, REGISTRATION_MESSAGE, sign_message


@pytest.mark.asyncio
class TestRegistrationService:
    """Tests for signature-verified registration."""

    async def test_register_new_wallet(self, wallet_account):
        now = utc_now()

        result = await RegistrationService().register(
            wallet_address=wallet_account.address,
            message=REGISTRATION_MESSAGE,
            signature=sign_message(wallet_account, REGISTRATION_MESSAGE),
            blockchain_id=CHAIN_ID,
            email="Owner@Example.com",
            now=now,
        )

        assert result.succeeded
        assert result.is_existing is False
        identity = result.identity
        assert identity.wallet_address == wallet_account.address
        assert identity.email == "owner@example.com"
        assert identity.trial_used is False
        assert abs((identity.trial_start_date - now).total_seconds()) < 1

    async def test_register_defaults_chain(self, wallet_account):
        result = await RegistrationService().register(
            wallet_address=wallet_account.address,
            message=REGISTRATION_MESSAGE,
            signature=sign_message(wallet_account, REGISTRATION_MESSAGE),
        )

        assert result.identity.blockchain_id == CHAIN_ID

    async def test_reregistering_returns_existing(self, wallet_account):
        service = RegistrationService()
        signature = sign_message(wallet_account, REGISTRATION_MESSAGE)

        first = await service.register(
            wallet_account.address, REGISTRATION_MESSAGE, signature, CHAIN_ID,
            now=utc_now() - timedelta(days=2),
        )
        second = await service.register(
            wallet_account.address.lower(), REGISTRATION_MESSAGE, signature, CHAIN_ID
        )

        assert second.succeeded
        assert second.is_existing is True
        assert second.identity.id == first.identity.id
        # Trial start is not reset by re-registration
        assert second.identity.trial_start_date == first.identity.trial_start_date

    async def test_signature_from_other_wallet_rejected(
        self, wallet_account, second_wallet_account
    ):
        result = await RegistrationService().register(
            wallet_address=wallet_account.address,
            message=REGISTRATION_MESSAGE,
            signature=sign_message(second_wallet_account, REGISTRATION_MESSAGE),
            blockchain_id=CHAIN_ID,
        )

        assert result.rejection == EntitlementErrorCode.INVALID_SIGNATURE
        assert result.identity is None

    async def test_malformed_signature_rejected(self, wallet_account):
        result = await RegistrationService().register(
            wallet_address=wallet_account.address,
            message=REGISTRATION_MESSAGE,
            signature="0xdeadbeef",
            blockchain_id=CHAIN_ID,
        )

        assert result.rejection == EntitlementErrorCode.INVALID_SIGNATURE

    async def test_linked_wallet_cannot_register(self, sample_linked_identity):
        service = RegistrationService()
        service.verify_wallet_control = _always_verified

        result = await service.register(
            wallet_address=LINKED_WALLET,
            message=REGISTRATION_MESSAGE,
            signature="0x" + "00" * 65,
            blockchain_id=CHAIN_ID,
        )

        assert result.rejection == EntitlementErrorCode.WALLET_EXISTS_LINKED

    async def test_takes_wallet_lock(self, wallet_account):
        service = RegistrationService()
        service.primary_repo.acquire_wallet_lock = AsyncMock()

        result = await service.register(
            wallet_address=wallet_account.address,
            message=REGISTRATION_MESSAGE,
            signature=sign_message(wallet_account, REGISTRATION_MESSAGE),
            blockchain_id=CHAIN_ID,
        )

        assert result.succeeded
        key = service.primary_repo.acquire_wallet_lock.await_args.args[0]
        assert key.normalized_address == wallet_account.address.lower()
        assert key.blockchain_id == CHAIN_ID

    async def test_rejected_signature_takes_no_lock(
        self, wallet_account, second_wallet_account
    ):
        service = RegistrationService()
        service.primary_repo.acquire_wallet_lock = AsyncMock()

        await service.register(
            wallet_address=wallet_account.address,
            message=REGISTRATION_MESSAGE,
            signature=sign_message(second_wallet_account, REGISTRATION_MESSAGE),
            blockchain_id=CHAIN_ID,
        )

        service.primary_repo.acquire_wallet_lock.assert_not_awaited()

    async def test_malformed_wallet_raises(self):
        with pytest.raises(ValidationError):
            await RegistrationService().register(
                wallet_address="0x1234",
                message=REGISTRATION_MESSAGE,
                signature="0x" + "00" * 65,
            )


async def _always_verified(key, message, signature) -> bool:
    return True
