# Test data and helpers

from datetime import timedelta
from decimal import Decimal

from eth_account import Account
from eth_account.messages import encode_defunct
from sqlalchemy.ext.asyncio import AsyncSession

from common.utils.clock import utc_now
from packages.billing.models.database.subscription import SubscriptionEntity
from packages.billing.models.database.usage import QueryUsageEntity, TransactionEntity
from packages.billing.models.domain.enums import (
    PaymentProvider,
    PlanName,
    TransactionStatus,
    TransactionType,
)

CHAIN_ID = "1564830818"
PRIMARY_WALLET = "0xAbCdEf0123456789AbCdEf0123456789AbCdEf01"
LINKED_WALLET = "0x1111111111111111111111111111111111111111"
OTHER_WALLET = "0x2222222222222222222222222222222222222222"
UNKNOWN_WALLET = "0x9999999999999999999999999999999999999999"

REGISTRATION_MESSAGE = "Register wallet with the entitlements service"


def sign_message(account, message: str) -> str:
    """personal_sign ``message`` with a local account, 0x-prefixed."""
    signed = Account.sign_message(encode_defunct(text=message), private_key=account.key)
    return "0x" + bytes(signed.signature).hex()


async def add_subscription(
    test_db: AsyncSession,
    identity_id: int,
    plan_name: PlanName,
    period_end=None,
    is_active: bool = True,
) -> SubscriptionEntity:
    subscription = SubscriptionEntity(
        identity_id=identity_id,
        plan_name=plan_name.value,
        is_active=is_active,
        payment_provider=PaymentProvider.PAYPAL.value,
        current_period_end=period_end or (utc_now() + timedelta(days=30)),
    )
    test_db.add(subscription)
    await test_db.commit()
    await test_db.refresh(subscription)
    return subscription


async def add_transaction(
    test_db: AsyncSession,
    identity_id: int,
    amount,
    status: TransactionStatus = TransactionStatus.SUCCESS,
    created_at=None,
) -> TransactionEntity:
    transaction = TransactionEntity(
        identity_id=identity_id,
        amount=Decimal(str(amount)),
        status=status.value,
        tx_type=TransactionType.INVOICE.value,
        created_at=created_at or utc_now(),
    )
    test_db.add(transaction)
    await test_db.commit()
    await test_db.refresh(transaction)
    return transaction


async def set_query_usage(
    test_db: AsyncSession, identity_id: int, used: int, now=None
) -> QueryUsageEntity:
    now = now or utc_now()
    usage = QueryUsageEntity(
        identity_id=identity_id, month=now.month, year=now.year, used=used
    )
    test_db.add(usage)
    await test_db.commit()
    await test_db.refresh(usage)
    return usage
