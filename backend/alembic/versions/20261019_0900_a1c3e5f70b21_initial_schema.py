"""Initial schema: free-tier usage counters and user subscriptions

Revision ID: a1c3e5f70b21
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f70b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the usage and subscription tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # 1. Free-tier counters, one row per user
    op.create_table(
        'user_api_limits',
        sa.Column('id', sa.UUID(), server_default=sa.text('uuid_generate_v4()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('count', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_api_limits_id'), 'user_api_limits', ['id'])
    op.create_index(op.f('ix_user_api_limits_created_at'), 'user_api_limits', ['created_at'])
    op.create_index(op.f('ix_user_api_limits_user_id'), 'user_api_limits', ['user_id'], unique=True)

    # 2. Subscriptions, at most one row per user
    op.create_table(
        'user_subscriptions',
        sa.Column('id', sa.UUID(), server_default=sa.text('uuid_generate_v4()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('stripe_customer_id', sa.String(), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(), nullable=True),
        sa.Column('stripe_price_id', sa.String(), nullable=True),
        sa.Column('stripe_current_period_end', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_customer_id'),
        sa.UniqueConstraint('stripe_subscription_id'),
    )
    op.create_index(op.f('ix_user_subscriptions_id'), 'user_subscriptions', ['id'])
    op.create_index(op.f('ix_user_subscriptions_created_at'), 'user_subscriptions', ['created_at'])
    op.create_index(op.f('ix_user_subscriptions_user_id'), 'user_subscriptions', ['user_id'], unique=True)


def downgrade() -> None:
    """Drop the usage and subscription tables."""
    op.drop_table('user_subscriptions')
    op.drop_table('user_api_limits')
