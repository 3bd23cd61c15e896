"""
Billing API routes.

Entitlement, usage, quota-check, and transaction endpoints addressed by
(wallet, chain).
"""

from fastapi import APIRouter, HTTPException, status

from packages.billing.dependencies import entitlement_http_error
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.billing.models.schemas.billing import (
    EntitlementResponse,
    QuotaDecisionResponse,
    RecordTransactionRequest,
    TransactionQuotaRequest,
    TransactionResponse,
    UsageStatsResponse,
)
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.quota_service import QuotaService
from packages.billing.services.usage_service import UsageService
from packages.identities.models.domain.identity import ResolvedIdentity
from packages.identities.services.identity_resolver import IdentityResolverService

router = APIRouter()


async def _resolve_or_404(wallet_address: str, blockchain_id: str) -> ResolvedIdentity:
    resolved = await IdentityResolverService().resolve_identity(
        wallet_address, blockchain_id
    )
    if resolved is None:
        raise entitlement_http_error(EntitlementErrorCode.WALLET_NOT_REGISTERED)
    return resolved


# ============================================================================
# Entitlement
# ============================================================================


@router.get(
    "/entitlement/{wallet_address}/{blockchain_id}",
    response_model=EntitlementResponse,
)
async def get_entitlement(wallet_address: str, blockchain_id: str):
    """
    Get the effective entitlement of a wallet.

    Linked wallets report their owner's plan. Recomputed on every call.
    """
    resolved = await _resolve_or_404(wallet_address, blockchain_id)
    entitlement = await EntitlementService().get_entitlement(resolved)
    return EntitlementResponse.from_domain(entitlement)


# ============================================================================
# Usage Stats
# ============================================================================


@router.get("/usage/{wallet_address}/{blockchain_id}", response_model=UsageStatsResponse)
async def get_usage_stats(wallet_address: str, blockchain_id: str):
    """
    Get current-month usage for a wallet.

    Returns query usage against the plan limit, successful transaction
    volume, wallet count, and trial state.
    """
    resolved = await _resolve_or_404(wallet_address, blockchain_id)
    stats = await UsageService().get_usage_stats(resolved)
    return UsageStatsResponse.from_domain(stats)


# ============================================================================
# Quota Checks
# ============================================================================


@router.get(
    "/quota/{wallet_address}/{blockchain_id}/queries",
    response_model=QuotaDecisionResponse,
)
async def check_query_quota(wallet_address: str, blockchain_id: str):
    """
    Check whether one more metered query would be allowed.

    Pure check: no usage is recorded. Rejections come back as a 200 with
    ``allowed=false`` and a reason code.
    """
    decision = await QuotaService().check_query_quota(wallet_address, blockchain_id)
    return QuotaDecisionResponse.from_domain(decision)


@router.post("/quota/transactions", response_model=QuotaDecisionResponse)
async def check_transaction_quota(request: TransactionQuotaRequest):
    """
    Check whether a proposed transaction fits the monthly volume limit.

    The comparison uses the cumulative month total including the proposed
    amount.
    """
    decision = await QuotaService().check_transaction_quota(
        request.wallet_address, request.blockchain_id, request.amount
    )
    return QuotaDecisionResponse.from_domain(decision)


# ============================================================================
# Transactions
# ============================================================================


@router.post(
    "/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_transaction(request: RecordTransactionRequest):
    """
    Record a successful transaction for a wallet.

    Rejected with PLAN_TXN_LIMIT_EXCEEDED when it would push the month's
    volume over the plan limit.
    """
    resolved = await _resolve_or_404(request.wallet_address, request.blockchain_id)

    decision = await QuotaService().check_transaction_quota_for(
        resolved, request.amount
    )
    if not decision.allowed:
        raise entitlement_http_error(decision.reason)

    transaction = await UsageService().record_transaction(
        resolved,
        amount=request.amount,
        tx_type=request.tx_type,
        tx_hash=request.tx_hash,
        description=request.description,
    )
    return TransactionResponse.from_domain(transaction)
