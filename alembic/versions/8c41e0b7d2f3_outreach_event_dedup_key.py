"""Outreach events: pending status and unique dedup_key slot

Revision ID: 8c41e0b7d2f3
Revises: 3f9a1c2d7e10
Create Date: 2026-10-17 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c41e0b7d2f3'
down_revision: Union[str, Sequence[str], None] = '3f9a1c2d7e10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column('outreach_events', sa.Column('dedup_key', sa.Text(), nullable=True))
    op.create_index('ux_outreach_events_dedup_key', 'outreach_events', ['dedup_key'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ux_outreach_events_dedup_key', table_name='outreach_events')
    with op.batch_alter_table('outreach_events') as batch_op:
        batch_op.drop_column('dedup_key')
