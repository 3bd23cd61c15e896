"""
Unit tests for the query quota guard dependency.

Drives the dependency generator the way FastAPI does.
"""

import pytest
from fastapi import HTTPException

from packages.billing.dependencies import QueryQuotaGuard, entitlement_http_error
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.billing.services.usage_service import UsageService
from tests.fixtures import CHAIN_ID, PRIMARY_WALLET, UNKNOWN_WALLET, set_query_usage


async def _usage(resolved) -> int:
    return await UsageService().get_usage_for(resolved)


@pytest.mark.asyncio
class TestQueryQuotaGuard:
    async def test_charges_after_success(self, sample_primary_identity):
        gen = QueryQuotaGuard()(PRIMARY_WALLET, CHAIN_ID)

        guarded = await gen.__anext__()
        assert guarded.decision.allowed
        assert guarded.charged is True
        assert await _usage(guarded.resolved) == 0

        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        assert await _usage(guarded.resolved) == 1

    async def test_failed_request_is_not_charged(self, sample_primary_identity):
        gen = QueryQuotaGuard()(PRIMARY_WALLET, CHAIN_ID)
        guarded = await gen.__anext__()

        with pytest.raises(RuntimeError):
            await gen.athrow(RuntimeError("endpoint failed"))

        assert await _usage(guarded.resolved) == 0

    async def test_no_charge_mode(self, sample_primary_identity):
        gen = QueryQuotaGuard(increment_usage=False)(PRIMARY_WALLET, CHAIN_ID)
        guarded = await gen.__anext__()
        assert guarded.charged is False

        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        assert await _usage(guarded.resolved) == 0

    async def test_rejects_exhausted_quota(self, test_db, sample_primary_identity):
        await set_query_usage(test_db, sample_primary_identity.id, 100)
        gen = QueryQuotaGuard()(PRIMARY_WALLET, CHAIN_ID)

        with pytest.raises(HTTPException) as exc_info:
            await gen.__anext__()

        assert exc_info.value.status_code == 429
        assert exc_info.value.detail["code"] == "QUERY_LIMIT_EXCEEDED"

    async def test_rejects_unknown_wallet(self):
        gen = QueryQuotaGuard()(UNKNOWN_WALLET, CHAIN_ID)

        with pytest.raises(HTTPException) as exc_info:
            await gen.__anext__()

        assert exc_info.value.status_code == 404


def test_entitlement_http_error_detail():
    error = entitlement_http_error(EntitlementErrorCode.WALLET_EXISTS_OTHER_USER)

    assert error.status_code == 409
    assert error.detail == {
        "code": "WALLET_EXISTS_OTHER_USER",
        "message": EntitlementErrorCode.WALLET_EXISTS_OTHER_USER.default_message(),
    }
