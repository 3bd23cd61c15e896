"""
Database entity for subscriptions.
"""

from sqlalchemy import Boolean, Column, String, DateTime, ForeignKey, Index, true
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class SubscriptionEntity(Base):
    """
    Subscription database entity.

    One-to-one with primary_identities. Linked identities never own a
    subscription; they inherit their parent's.
    """

    __tablename__ = "subscriptions"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    identity_id = Column(
        BigIntegerType,
        ForeignKey("primary_identities.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    plan_name = Column(String(50), nullable=False, index=True)  # basic, pro, premium
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    # Payment collaborator reference
    payment_provider = Column(String(50), nullable=False, server_default="paypal")
    external_subscription_id = Column(
        String(255), nullable=True, unique=True, index=True
    )

    # Expiry is evaluated on read against this timestamp
    current_period_end = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_subscription_active_period_end", "is_active", "current_period_end"),
    )
