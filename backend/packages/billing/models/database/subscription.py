"""
Database entity for subscriptions.
"""

from sqlalchemy import Boolean, Column, String, Integer, ForeignKey, Index
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType, UTCDateTime


class SubscriptionEntity(Base):
    """
    Account subscription database entity.

    One row per account (unique account_id), rewritten in place by each
    activation. Rows are never deleted.
    """

    __tablename__ = "subscriptions"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    account_id = Column(
        BigIntegerType,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    plan_id = Column(String(50), nullable=False, index=True)

    # Billing period; period_end is NULL only for the implicit trial
    period_start = Column(UTCDateTime, nullable=True)
    period_end = Column(UTCDateTime, nullable=True)

    # Frozen from the plan catalog at activation; NULL quota = unlimited
    quota = Column(Integer, nullable=True)
    extended_access = Column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    # External payment provider references
    external_customer_ref = Column(String(255), nullable=True, index=True)
    last_session_ref = Column(String(255), nullable=True)

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("idx_subscription_period_end", "period_end"),)
