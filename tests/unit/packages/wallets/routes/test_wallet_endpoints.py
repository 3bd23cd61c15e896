"""
Unit tests for wallet portfolio API routes.
"""

import pytest
from httpx import AsyncClient

from tests.fixtures import CHAIN_ID, REGISTRATION_MESSAGE, sign_message


@pytest.mark.asyncio
class TestLinkWalletEndpoint:
    """POST /api/v1/wallets/link"""

    async def test_link_signed_wallet(
        self, client: AsyncClient, sample_primary_identity, pro_subscription, wallet_account
    ):
        response = await client.post(
            "/api/v1/wallets/link",
            json={
                "owner_id": sample_primary_identity.id,
                "wallet_address": wallet_account.address,
                "blockchain_id": CHAIN_ID,
                "message": REGISTRATION_MESSAGE,
                "signature": sign_message(wallet_account, REGISTRATION_MESSAGE),
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["parent_id"] == sample_primary_identity.id
        assert data["plan_name"] == "pro"

        resolved = await client.get(f"/api/v1/identities/{wallet_account.address}/{CHAIN_ID}/exists")
        assert resolved.json()["kind"] == "linked"

    async def test_link_requires_new_wallet_signature(
        self,
        client: AsyncClient,
        sample_primary_identity,
        pro_subscription,
        wallet_account,
        second_wallet_account,
    ):
        response = await client.post(
            "/api/v1/wallets/link",
            json={
                "owner_id": sample_primary_identity.id,
                "wallet_address": wallet_account.address,
                "blockchain_id": CHAIN_ID,
                "message": REGISTRATION_MESSAGE,
                "signature": sign_message(second_wallet_account, REGISTRATION_MESSAGE),
            },
        )

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "INVALID_SIGNATURE"

    async def test_link_over_wallet_limit(
        self, client: AsyncClient, sample_primary_identity, wallet_account
    ):
        response = await client.post(
            "/api/v1/wallets/link",
            json={
                "owner_id": sample_primary_identity.id,
                "wallet_address": wallet_account.address,
                "blockchain_id": CHAIN_ID,
                "message": REGISTRATION_MESSAGE,
                "signature": sign_message(wallet_account, REGISTRATION_MESSAGE),
            },
        )

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "WALLET_LIMIT_EXCEEDED"


@pytest.mark.asyncio
class TestPortfolioEndpoint:
    """GET /api/v1/wallets/{owner_id}"""

    async def test_get_portfolio(
        self, client: AsyncClient, sample_primary_identity, sample_linked_identity
    ):
        response = await client.get(f"/api/v1/wallets/{sample_primary_identity.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["owner"]["id"] == sample_primary_identity.id
        assert len(data["linked_wallets"]) == 1
        assert data["used_wallets"] == 2
        assert data["max_wallets"] == 1
        assert data["remaining_slots"] == 0
        assert data["can_add_wallet"] is False

    async def test_unknown_owner(self, client: AsyncClient):
        response = await client.get("/api/v1/wallets/4242")

        assert response.status_code == 404
