"""
Database entities for query usage counters and transactions.
"""

from sqlalchemy import (
    Column,
    Integer,
    Numeric,
    String,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType
from common.utils.clock import utc_now


class QueryUsageEntity(Base):
    """
    Monthly query counter.

    One row per (identity, month, year), created lazily on the first metered
    query of the period and only ever incremented in place.
    """

    __tablename__ = "query_usage"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    identity_id = Column(
        BigIntegerType,
        ForeignKey("primary_identities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    used = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "identity_id", "month", "year", name="uq_query_usage_identity_period"
        ),
    )


class TransactionEntity(Base):
    """
    Transaction record.

    ``identity_id`` is always the billing (primary) identity so monthly volume
    is shared across an owner's wallets; ``linked_identity_id`` records which
    linked wallet initiated it, if any.
    """

    __tablename__ = "transactions"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    identity_id = Column(
        BigIntegerType,
        ForeignKey("primary_identities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    linked_identity_id = Column(
        BigIntegerType,
        ForeignKey("linked_identities.id", ondelete="SET NULL"),
        nullable=True,
    )

    amount = Column(Numeric(18, 2), nullable=False)
    status = Column(String(20), nullable=False)  # success, pending, failed
    tx_type = Column(String(50), nullable=False)
    tx_hash = Column(String(255), nullable=True)
    description = Column(String(1024), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    __table_args__ = (
        # Monthly volume aggregate
        Index("idx_transactions_identity_status_created", "identity_id", "status", "created_at"),
    )
