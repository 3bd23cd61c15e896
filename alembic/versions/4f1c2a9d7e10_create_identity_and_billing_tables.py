"""create_identity_and_billing_tables

Revision ID: 4f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Primary identities
    op.create_table('primary_identities',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('wallet_address', sa.String(length=64), nullable=False),
        sa.Column('wallet_address_normalized', sa.String(length=64), nullable=False),
        sa.Column('blockchain_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('metadata_uri', sa.String(length=1024), nullable=True),
        sa.Column('credit_score', sa.Integer(), server_default='0', nullable=False),
        sa.Column('trial_start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('trial_used', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('transaction_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_primary_identities')),
        sa.UniqueConstraint('wallet_address_normalized', 'blockchain_id', name='uq_primary_identities_wallet_chain')
    )
    op.create_index(op.f('ix_primary_identities_id'), 'primary_identities', ['id'], unique=False)
    op.create_index(op.f('ix_primary_identities_wallet_address_normalized'), 'primary_identities', ['wallet_address_normalized'], unique=False)
    op.create_index(op.f('ix_primary_identities_blockchain_id'), 'primary_identities', ['blockchain_id'], unique=False)
    op.create_index(op.f('ix_primary_identities_email'), 'primary_identities', ['email'], unique=False)

    # Linked identities
    op.create_table('linked_identities',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('wallet_address', sa.String(length=64), nullable=False),
        sa.Column('wallet_address_normalized', sa.String(length=64), nullable=False),
        sa.Column('blockchain_id', sa.String(length=64), nullable=False),
        sa.Column('parent_id', sa.BigInteger(), nullable=False),
        sa.Column('plan_name', sa.String(length=50), server_default='free', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['primary_identities.id'], name=op.f('fk_linked_identities_parent_id_primary_identities'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_linked_identities')),
        sa.UniqueConstraint('wallet_address_normalized', 'blockchain_id', name='uq_linked_identities_wallet_chain')
    )
    op.create_index(op.f('ix_linked_identities_id'), 'linked_identities', ['id'], unique=False)
    op.create_index(op.f('ix_linked_identities_wallet_address_normalized'), 'linked_identities', ['wallet_address_normalized'], unique=False)
    op.create_index(op.f('ix_linked_identities_blockchain_id'), 'linked_identities', ['blockchain_id'], unique=False)
    op.create_index(op.f('ix_linked_identities_parent_id'), 'linked_identities', ['parent_id'], unique=False)

    # Subscriptions
    op.create_table('subscriptions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('identity_id', sa.BigInteger(), nullable=False),
        sa.Column('plan_name', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('payment_provider', sa.String(length=50), server_default='paypal', nullable=False),
        sa.Column('external_subscription_id', sa.String(length=255), nullable=True),
        sa.Column('current_period_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['identity_id'], ['primary_identities.id'], name=op.f('fk_subscriptions_identity_id_primary_identities'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_subscriptions'))
    )
    op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_subscriptions_identity_id'), 'subscriptions', ['identity_id'], unique=True)
    op.create_index(op.f('ix_subscriptions_plan_name'), 'subscriptions', ['plan_name'], unique=False)
    op.create_index(op.f('ix_subscriptions_external_subscription_id'), 'subscriptions', ['external_subscription_id'], unique=True)
    op.create_index('idx_subscription_active_period_end', 'subscriptions', ['is_active', 'current_period_end'], unique=False)

    # Monthly query counters
    op.create_table('query_usage',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('identity_id', sa.BigInteger(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('used', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['identity_id'], ['primary_identities.id'], name=op.f('fk_query_usage_identity_id_primary_identities'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_query_usage')),
        sa.UniqueConstraint('identity_id', 'month', 'year', name='uq_query_usage_identity_period')
    )
    op.create_index(op.f('ix_query_usage_id'), 'query_usage', ['id'], unique=False)
    op.create_index(op.f('ix_query_usage_identity_id'), 'query_usage', ['identity_id'], unique=False)

    # Transactions
    op.create_table('transactions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('identity_id', sa.BigInteger(), nullable=False),
        sa.Column('linked_identity_id', sa.BigInteger(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('tx_type', sa.String(length=50), nullable=False),
        sa.Column('tx_hash', sa.String(length=255), nullable=True),
        sa.Column('description', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['identity_id'], ['primary_identities.id'], name=op.f('fk_transactions_identity_id_primary_identities'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['linked_identity_id'], ['linked_identities.id'], name=op.f('fk_transactions_linked_identity_id_linked_identities'), ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_transactions'))
    )
    op.create_index(op.f('ix_transactions_id'), 'transactions', ['id'], unique=False)
    op.create_index(op.f('ix_transactions_identity_id'), 'transactions', ['identity_id'], unique=False)
    op.create_index('idx_transactions_identity_status_created', 'transactions', ['identity_id', 'status', 'created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_transactions_identity_status_created', table_name='transactions')
    op.drop_index(op.f('ix_transactions_identity_id'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_id'), table_name='transactions')
    op.drop_table('transactions')

    op.drop_index(op.f('ix_query_usage_identity_id'), table_name='query_usage')
    op.drop_index(op.f('ix_query_usage_id'), table_name='query_usage')
    op.drop_table('query_usage')

    op.drop_index('idx_subscription_active_period_end', table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_external_subscription_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_plan_name'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_identity_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_id'), table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index(op.f('ix_linked_identities_parent_id'), table_name='linked_identities')
    op.drop_index(op.f('ix_linked_identities_blockchain_id'), table_name='linked_identities')
    op.drop_index(op.f('ix_linked_identities_wallet_address_normalized'), table_name='linked_identities')
    op.drop_index(op.f('ix_linked_identities_id'), table_name='linked_identities')
    op.drop_table('linked_identities')

    op.drop_index(op.f('ix_primary_identities_email'), table_name='primary_identities')
    op.drop_index(op.f('ix_primary_identities_blockchain_id'), table_name='primary_identities')
    op.drop_index(op.f('ix_primary_identities_wallet_address_normalized'), table_name='primary_identities')
    op.drop_index(op.f('ix_primary_identities_id'), table_name='primary_identities')
    op.drop_table('primary_identities')
