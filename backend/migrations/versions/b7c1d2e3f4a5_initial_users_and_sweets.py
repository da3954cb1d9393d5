"""initial users and sweets

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the two independent aggregates:
- users: credential store (unique username, bcrypt hash, role)
- sweets: inventory items (unique name, non-negative price/quantity, optional image)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7c1d2e3f4a5'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # users: Actor credentials
    # ============================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('user', 'admin', name='user_role', native_enum=False), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )

    # ============================================================================
    # sweets: Inventory items
    # ============================================================================
    op.create_table(
        'sweets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_data', sa.LargeBinary(), nullable=True),
        sa.Column('image_content_type', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_sweets_name'),
        sa.CheckConstraint('quantity >= 0', name='ck_sweets_quantity_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_sweets_price_non_negative'),
    )
    op.create_index('ix_sweets_category', 'sweets', ['category'])
    op.create_index('ix_sweets_created_at', 'sweets', ['created_at'])


def downgrade():
    op.drop_index('ix_sweets_created_at', table_name='sweets')
    op.drop_index('ix_sweets_category', table_name='sweets')
    op.drop_table('sweets')
    op.drop_table('users')
