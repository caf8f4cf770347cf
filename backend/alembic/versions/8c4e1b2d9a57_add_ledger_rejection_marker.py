"""add_ledger_rejection_marker

Revision ID: 8c4e1b2d9a57
Revises: 3f2a9c1d7b40
Create Date: 2026-10-24 14:03:17.902114

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4e1b2d9a57'
down_revision: Union[str, Sequence[str], None] = '3f2a9c1d7b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column('billing_ledger_entries', sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True))
    op.add_column('billing_ledger_entries', sa.Column('rejection_reason', sa.String(length=500), nullable=True))


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column('billing_ledger_entries', 'rejection_reason')
    op.drop_column('billing_ledger_entries', 'rejected_at')
