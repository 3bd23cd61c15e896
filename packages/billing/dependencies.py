"""
FastAPI dependencies for quota-gated endpoints.
"""

from typing import AsyncGenerator, Optional

from fastapi import HTTPException
from pydantic import BaseModel

from common.core.telemetry import get_logger
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.billing.models.domain.usage import QuotaDecision
from packages.billing.services.quota_service import QuotaService
from packages.billing.services.usage_service import UsageService
from packages.identities.models.domain.identity import ResolvedIdentity
from packages.identities.services.identity_resolver import IdentityResolverService

logger = get_logger(__name__)


def entitlement_http_error(
    code: EntitlementErrorCode, message: Optional[str] = None
) -> HTTPException:
    """HTTPException carrying a stable error code for callers to branch on."""
    return HTTPException(
        status_code=code.http_status(),
        detail={"code": code.value, "message": message or code.default_message()},
    )


class GuardedQuery(BaseModel):
    """What a query-gated endpoint receives: the caller's identity and the decision."""

    resolved: ResolvedIdentity
    decision: QuotaDecision
    # True when this request is counted once the endpoint returns
    charged: bool = True


class QueryQuotaGuard:
    """
    Dependency that gates an endpoint on the caller's monthly query quota.

    Reads ``wallet_address`` and ``blockchain_id`` from the path. The counter
    is incremented only after the endpoint body returns without raising, so
    failed work is never charged. Read-only endpoints pass
    ``increment_usage=False``.

    Usage:
        @router.get("/{wallet_address}/{blockchain_id}/credit-score")
        async def credit_score(guarded: GuardedQuery = Depends(QueryQuotaGuard(increment_usage=False))):
            ...
    """

    def __init__(self, increment_usage: bool = True):
        self.increment_usage = increment_usage

    async def __call__(
        self, wallet_address: str, blockchain_id: str
    ) -> AsyncGenerator[GuardedQuery, None]:
        resolved = await IdentityResolverService().resolve_identity(
            wallet_address, blockchain_id
        )
        if resolved is None:
            raise entitlement_http_error(EntitlementErrorCode.WALLET_NOT_REGISTERED)

        decision = await QuotaService().check_query_quota_for(resolved)
        if not decision.allowed:
            raise entitlement_http_error(decision.reason)

        yield GuardedQuery(
            resolved=resolved, decision=decision, charged=self.increment_usage
        )

        if self.increment_usage:
            await UsageService().record_query_for(resolved)
        else:
            logger.debug(
                f"Skipping usage increment for identity {decision.identity_id}"
            )


require_query_quota = QueryQuotaGuard()
require_query_quota_no_charge = QueryQuotaGuard(increment_usage=False)
