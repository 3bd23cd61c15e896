"""
Wallet portfolio API routes.
"""

from fastapi import APIRouter, HTTPException, status

from common.core.exceptions import SignatureVerificationError
from common.core.telemetry import get_logger
from packages.billing.dependencies import entitlement_http_error
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.identities.providers.signature.factory import get_signature_verifier
from packages.wallets.models.schemas.wallet import (
    LinkWalletRequest,
    LinkedWalletResponse,
    WalletPortfolioResponse,
)
from packages.wallets.services.wallet_portfolio_service import WalletPortfolioService

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/link",
    response_model=LinkedWalletResponse,
    status_code=status.HTTP_201_CREATED,
)
async def link_wallet(request: LinkWalletRequest):
    """
    Link a wallet to an owner.

    The new wallet must sign ``message``. Rejected when the wallet already
    belongs to any identity or the owner's plan has no free wallet slot.
    """
    verifier = get_signature_verifier()
    try:
        verified = await verifier.verify(
            request.wallet_address, request.message, request.signature
        )
    except SignatureVerificationError as e:
        logger.warning(f"Rejected link signature for {request.wallet_address}: {e}")
        verified = False
    if not verified:
        raise entitlement_http_error(EntitlementErrorCode.INVALID_SIGNATURE)

    result = await WalletPortfolioService().link_wallet(
        request.owner_id, request.wallet_address, request.blockchain_id
    )
    if not result.succeeded:
        raise entitlement_http_error(result.rejection)

    return LinkedWalletResponse.from_domain(result.linked_identity)


@router.get("/{owner_id}", response_model=WalletPortfolioResponse)
async def get_portfolio(owner_id: int):
    """Get an owner's wallets and remaining wallet allowance."""
    portfolio = await WalletPortfolioService().get_portfolio(owner_id)
    if portfolio is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Identity {owner_id} not found",
        )
    return WalletPortfolioResponse.from_domain(portfolio)
