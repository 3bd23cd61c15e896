"""
Billing enums - plans, subscription sources, and entitlement outcome codes.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from fastapi import status


class PlanName(str, Enum):
    """
    Subscription plans, keyed by the name used in the static catalogue.

    FREE applies whenever there is no active, unexpired paid subscription.
    """

    FREE = "free"
    BASIC = "basic"  # $149/mo
    PRO = "pro"  # $699/mo
    PREMIUM = "premium"  # $3,699/mo

    def is_paid(self) -> bool:
        return self != PlanName.FREE

    def get_price_cents(self) -> int:
        """Get monthly price in cents."""
        prices = {
            PlanName.FREE: 0,
            PlanName.BASIC: 14900,
            PlanName.PRO: 69900,
            PlanName.PREMIUM: 369900,
        }
        return prices[self]

    def get_limits(self) -> dict[str, Optional[int]]:
        """
        Get plan limits.

        - query_limit: metered queries per calendar month
        - max_wallets: wallets per owner, primary included
        - txn_limit: successful transaction volume per calendar month (USD),
          None means unlimited
        """
        limits = {
            PlanName.FREE: {
                "query_limit": 100,
                "max_wallets": 1,
                "txn_limit": 1_000,
            },
            PlanName.BASIC: {
                "query_limit": 1_000,
                "max_wallets": 1,
                "txn_limit": 5_000,
            },
            PlanName.PRO: {
                "query_limit": 15_000,
                "max_wallets": 3,
                "txn_limit": 20_000,
            },
            PlanName.PREMIUM: {
                "query_limit": 1_000_000,
                "max_wallets": 5,
                "txn_limit": None,
            },
        }
        return limits[self]

    def get_txn_limit(self) -> Optional[Decimal]:
        limit = self.get_limits()["txn_limit"]
        return Decimal(limit) if limit is not None else None


class PaymentProvider(str, Enum):
    """Payment collaborators allowed to push subscription changes."""

    PAYPAL = "paypal"
    MANUAL = "manual"


class TransactionStatus(str, Enum):
    """Transaction outcome; only SUCCESS counts towards monthly volume."""

    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"


class TransactionType(str, Enum):
    INVOICE = "invoice"
    PAYMENT = "payment"
    SUBSCRIPTION = "subscription"


class EntitlementErrorCode(str, Enum):
    """
    Discriminated rejection reasons for quota, wallet, and registration checks.

    Callers branch on these codes for messaging, so values are stable API.
    """

    WALLET_NOT_REGISTERED = "WALLET_NOT_REGISTERED"
    TRIAL_EXPIRED = "TRIAL_EXPIRED"
    QUERY_LIMIT_EXCEEDED = "QUERY_LIMIT_EXCEEDED"
    WALLET_LIMIT_EXCEEDED = "WALLET_LIMIT_EXCEEDED"
    PLAN_TXN_LIMIT_EXCEEDED = "PLAN_TXN_LIMIT_EXCEEDED"
    CANNOT_ADD_PRIMARY_WALLET = "CANNOT_ADD_PRIMARY_WALLET"
    WALLET_EXISTS_PRIMARY = "WALLET_EXISTS_PRIMARY"
    WALLET_EXISTS_SAME_USER = "WALLET_EXISTS_SAME_USER"
    WALLET_EXISTS_OTHER_USER = "WALLET_EXISTS_OTHER_USER"
    WALLET_EXISTS_LINKED = "WALLET_EXISTS_LINKED"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INVALID_WALLET_INPUT = "INVALID_WALLET_INPUT"

    def http_status(self) -> int:
        """Soft 4xx status for this outcome. None of them are retryable as-is."""
        statuses = {
            EntitlementErrorCode.WALLET_NOT_REGISTERED: status.HTTP_404_NOT_FOUND,
            EntitlementErrorCode.TRIAL_EXPIRED: status.HTTP_402_PAYMENT_REQUIRED,
            EntitlementErrorCode.QUERY_LIMIT_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
            EntitlementErrorCode.WALLET_LIMIT_EXCEEDED: status.HTTP_403_FORBIDDEN,
            EntitlementErrorCode.PLAN_TXN_LIMIT_EXCEEDED: status.HTTP_403_FORBIDDEN,
            EntitlementErrorCode.INVALID_SIGNATURE: status.HTTP_401_UNAUTHORIZED,
            EntitlementErrorCode.INVALID_WALLET_INPUT: status.HTTP_400_BAD_REQUEST,
        }
        return statuses.get(self, status.HTTP_409_CONFLICT)

    def default_message(self) -> str:
        messages = {
            EntitlementErrorCode.WALLET_NOT_REGISTERED: "Wallet is not registered. Please register first.",
            EntitlementErrorCode.TRIAL_EXPIRED: "Free trial has expired. Please upgrade your plan.",
            EntitlementErrorCode.QUERY_LIMIT_EXCEEDED: "Monthly query limit reached. Upgrade or wait for the next billing period.",
            EntitlementErrorCode.WALLET_LIMIT_EXCEEDED: "Wallet limit reached for the current plan.",
            EntitlementErrorCode.PLAN_TXN_LIMIT_EXCEEDED: "Monthly transaction volume limit would be exceeded.",
            EntitlementErrorCode.CANNOT_ADD_PRIMARY_WALLET: "This wallet is already your primary wallet.",
            EntitlementErrorCode.WALLET_EXISTS_PRIMARY: "This wallet is registered as another user's primary wallet.",
            EntitlementErrorCode.WALLET_EXISTS_SAME_USER: "This wallet is already linked to your account.",
            EntitlementErrorCode.WALLET_EXISTS_OTHER_USER: "This wallet is linked to another user.",
            EntitlementErrorCode.WALLET_EXISTS_LINKED: "This wallet is already linked to an existing account.",
            EntitlementErrorCode.INVALID_SIGNATURE: "Wallet signature verification failed.",
            EntitlementErrorCode.INVALID_WALLET_INPUT: "Malformed wallet address or blockchain id.",
        }
        return messages[self]
