"""
Database entity for the billing ledger.
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Index
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType, UTCDateTime


class LedgerEntryEntity(Base):
    """
    Billing ledger entry.

    Append-only: rows are inserted once per checkout session and only their
    status changes afterwards. The unique session_ref is what makes duplicate
    payment deliveries collide.
    """

    __tablename__ = "billing_ledger_entries"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    account_id = Column(
        BigIntegerType,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session_ref = Column(String(255), nullable=False, unique=True, index=True)
    plan_id = Column(String(50), nullable=False)

    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    description = Column(String(500), nullable=True)

    status = Column(String(50), nullable=False, index=True)
    # Set when reconciliation gets a terminal provider rejection; such
    # entries are no longer re-driven, only a fresh provider delivery completes them
    rejected_at = Column(UTCDateTime, nullable=True)
    rejection_reason = Column(String(500), nullable=True)

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_ledger_account_created", "account_id", "created_at"),
        Index("idx_ledger_status_updated", "status", "updated_at"),
    )
