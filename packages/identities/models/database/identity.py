"""
Database entities for primary and linked wallet identities.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    false,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType
from packages.billing.models.database.subscription import SubscriptionEntity


class PrimaryIdentityEntity(Base):
    """
    Primary identity: a registered wallet that owns billing state.

    ``wallet_address`` keeps the casing the wallet registered with;
    ``wallet_address_normalized`` is its lowercase lookup key.
    """

    __tablename__ = "primary_identities"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    wallet_address = Column(String(64), nullable=False)
    wallet_address_normalized = Column(String(64), nullable=False, index=True)
    blockchain_id = Column(String(64), nullable=False, index=True)

    # Profile
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    metadata_uri = Column(String(1024), nullable=True)
    credit_score = Column(Integer, nullable=False, default=0, server_default="0")

    # Trial state
    trial_start_date = Column(DateTime(timezone=True), nullable=True)
    trial_used = Column(Boolean, nullable=False, default=False, server_default=false())

    # Best-effort denormalized counter, recomputable from transactions
    transaction_count = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    subscription = relationship(
        SubscriptionEntity, uselist=False, lazy="joined", viewonly=True
    )

    __table_args__ = (
        UniqueConstraint(
            "wallet_address_normalized",
            "blockchain_id",
            name="uq_primary_identities_wallet_chain",
        ),
    )


class LinkedIdentityEntity(Base):
    """
    Linked identity: an extra wallet that inherits its parent's entitlement.

    ``parent_id`` can only reference primary_identities, so inheritance is
    exactly one level deep.
    """

    __tablename__ = "linked_identities"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    wallet_address = Column(String(64), nullable=False)
    wallet_address_normalized = Column(String(64), nullable=False, index=True)
    blockchain_id = Column(String(64), nullable=False, index=True)
    parent_id = Column(
        BigIntegerType,
        ForeignKey("primary_identities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Denormalized copy of the parent's plan, refreshed on subscription changes
    plan_name = Column(String(50), nullable=False, server_default="free")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "wallet_address_normalized",
            "blockchain_id",
            name="uq_linked_identities_wallet_chain",
        ),
    )
