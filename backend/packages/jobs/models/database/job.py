from sqlalchemy import Column, String, ForeignKey, Index
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType, UTCDateTime


class JobEntity(Base):
    """A job listing posted by an account; the metered action."""

    __tablename__ = "jobs"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    account_id = Column(
        BigIntegerType,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, index=True)

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    expires_at = Column(UTCDateTime, nullable=True)
    updated_at = Column(
        UTCDateTime, server_default=func.now(), onupdate=func.now()
    )

    # Usage count: account + created_at range, then status/expiry filter
    __table_args__ = (Index("idx_jobs_account_created", "account_id", "created_at"),)
