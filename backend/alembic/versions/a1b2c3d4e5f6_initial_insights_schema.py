"""initial insights schema: tenants, stores, users, user_stores, invoices

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18
"""
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True,
                     server_default=sa.text('gen_random_uuid()'))


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _tenant_fk():
    return sa.Column('tenant_id', postgresql.UUID(as_uuid=True),
                     sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'tenants',
        _id(),
        sa.Column('name', sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'stores',
        _id(),
        _tenant_fk(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('city', sa.String(120), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('disabled_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_stores_tenant_id', 'stores', ['tenant_id'])
    op.create_index('ix_stores_name', 'stores', ['name'])

    op.create_table(
        'users',
        _id(),
        _tenant_fk(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('must_change_password', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'])

    op.create_table(
        'user_stores',
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('stores.id', ondelete='CASCADE'), primary_key=True),
        sa.UniqueConstraint('user_id', 'store_id', name='uq_user_store'),
    )
    op.create_index('ix_user_stores_store_id', 'user_stores', ['store_id'])

    op.create_table(
        'invoices',
        _id(),
        _tenant_fk(),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('patient_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('invoice_no', sa.String(64), nullable=False),
        sa.Column('totals_json', sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column('payment_status', sa.String(20), nullable=False, server_default='Unpaid'),
        *_timestamps(),
    )
    op.create_index('ix_invoices_tenant_id', 'invoices', ['tenant_id'])
    op.create_index('ix_invoices_store_id', 'invoices', ['store_id'])
    op.create_index('ix_invoices_patient_id', 'invoices', ['patient_id'])
    op.create_index('ix_invoices_invoice_no', 'invoices', ['invoice_no'])
    op.create_index('ix_invoices_tenant_store_created_at', 'invoices', ['tenant_id', 'store_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_invoices_tenant_store_created_at', table_name='invoices')
    op.drop_index('ix_invoices_invoice_no', table_name='invoices')
    op.drop_index('ix_invoices_patient_id', table_name='invoices')
    op.drop_index('ix_invoices_store_id', table_name='invoices')
    op.drop_index('ix_invoices_tenant_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_user_stores_store_id', table_name='user_stores')
    op.drop_table('user_stores')
    op.drop_index('ix_users_tenant_id', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_stores_name', table_name='stores')
    op.drop_index('ix_stores_tenant_id', table_name='stores')
    op.drop_table('stores')
    op.drop_table('tenants')
