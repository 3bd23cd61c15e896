"""
Identity API routes.

Registration, resolution, and per-wallet lookups keyed by (wallet, chain).
"""

from fastapi import APIRouter, Depends, status

from common.core.telemetry import get_logger
from packages.billing.dependencies import (
    GuardedQuery,
    entitlement_http_error,
    require_query_quota,
    require_query_quota_no_charge,
)
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.usage_service import UsageService
from packages.identities.models.schemas.identity import (
    CreditScoreResponse,
    IdentityExistsResponse,
    IdentityResponse,
    RegisterIdentityRequest,
    RegisterIdentityResponse,
    ResolvedIdentityResponse,
)
from packages.identities.services.identity_resolver import IdentityResolverService
from packages.identities.services.registration_service import RegistrationService

logger = get_logger(__name__)

router = APIRouter()


# ============================================================================
# Registration
# ============================================================================


@router.post(
    "/register",
    response_model=RegisterIdentityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_identity(request: RegisterIdentityRequest):
    """
    Register a wallet as a primary identity.

    The wallet proves control by signing ``message``. New identities start on
    the free plan with the trial window opening now. Re-registering a primary
    wallet returns the stored identity.
    """
    result = await RegistrationService().register(
        wallet_address=request.wallet_address,
        message=request.message,
        signature=request.signature,
        blockchain_id=request.blockchain_id,
        name=request.name,
        email=request.email,
        metadata_uri=request.metadata_uri,
    )
    if not result.succeeded:
        raise entitlement_http_error(result.rejection)

    return RegisterIdentityResponse(
        identity=IdentityResponse.from_domain(result.identity),
        is_existing=result.is_existing,
    )


# ============================================================================
# Lookups
# ============================================================================


@router.get("/{wallet_address}/{blockchain_id}/exists", response_model=IdentityExistsResponse)
async def identity_exists(wallet_address: str, blockchain_id: str):
    """Check whether a wallet is registered. Not metered."""
    kind = await IdentityResolverService().identity_exists(wallet_address, blockchain_id)
    return IdentityExistsResponse(exists=kind is not None, kind=kind)


@router.get(
    "/{wallet_address}/{blockchain_id}/credit-score",
    response_model=CreditScoreResponse,
)
async def get_credit_score(
    guarded: GuardedQuery = Depends(require_query_quota_no_charge),
):
    """
    Get the owner's credit score.

    Gated on the query quota but does not consume it.
    """
    identity = guarded.resolved.identity
    return CreditScoreResponse(
        wallet_address=identity.wallet_address,
        blockchain_id=identity.blockchain_id,
        credit_score=guarded.resolved.billing_identity.credit_score,
    )


@router.get("/{wallet_address}/{blockchain_id}", response_model=ResolvedIdentityResponse)
async def resolve_identity(guarded: GuardedQuery = Depends(require_query_quota)):
    """
    Resolve a wallet to its identity and effective entitlement.

    Metered: counts as one query against the owner's monthly quota, and
    ``queries_used`` already includes this request.
    """
    resolved = guarded.resolved
    entitlement = await EntitlementService().get_entitlement(resolved)
    queries_used = await UsageService().get_usage_for(resolved)
    if guarded.charged:
        # The guard records this query after the response body is built
        queries_used += 1
    return ResolvedIdentityResponse.from_domain(resolved, entitlement, queries_used)
