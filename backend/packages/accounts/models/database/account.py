from sqlalchemy import Column, String
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType, UTCDateTime


class AccountEntity(Base):
    """Billable account: an employer or a recruiting agency."""

    __tablename__ = "accounts"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    account_type = Column(String(50), nullable=False)  # employer, agency

    # Trial window is derived from this; there is no stored trial_end
    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        UTCDateTime, server_default=func.now(), onupdate=func.now()
    )
