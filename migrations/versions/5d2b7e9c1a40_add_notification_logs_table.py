"""add_notification_logs_table

Revision ID: 5d2b7e9c1a40
Revises:
Create Date: 2026-10-12 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5d2b7e9c1a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the notification delivery log table and its indexes."""
    op.create_table('notification_logs',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('correlation_id', sa.String(length=64), nullable=False),
        sa.Column('notification_type', sa.String(length=64), nullable=False),
        sa.Column('channel', sa.String(length=16), nullable=False),
        sa.Column('audience', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('recipient', sa.String(length=255), nullable=True),
        sa.Column('center_id', sa.String(length=64), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('template', sa.String(length=255), nullable=True),
        sa.Column('locale', sa.String(length=16), nullable=True),
        sa.Column('requires_audit', sa.Boolean(), nullable=False,
                  server_default='false'),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.CheckConstraint("status IN ('sent', 'failed', 'skipped')",
                           name='ck_notification_logs_status'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notification_logs_correlation_id',
                    'notification_logs', ['correlation_id'])
    op.create_index('ix_notification_logs_user_id',
                    'notification_logs', ['user_id'])
    op.create_index('ix_notification_logs_type_created',
                    'notification_logs', ['notification_type', 'created_at'])


def downgrade() -> None:
    """Drop the notification delivery log table."""
    op.drop_index('ix_notification_logs_type_created', table_name='notification_logs')
    op.drop_index('ix_notification_logs_user_id', table_name='notification_logs')
    op.drop_index('ix_notification_logs_correlation_id', table_name='notification_logs')
    op.drop_table('notification_logs')
