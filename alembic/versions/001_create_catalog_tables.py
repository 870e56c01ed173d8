"""Create catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create products, product_sizes, product_categories, categories and banners."""
    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(500), nullable=False, index=True),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, index=True),
        sa.Column('old_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('images', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('colors', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('is_best_seller', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_most_popular', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_listed', sa.Boolean(), nullable=False, server_default='true', index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Slugs are unique across the catalog
    op.create_unique_constraint('uq_products_slug', 'products', ['slug'])

    # Size variants
    op.create_table(
        'product_sizes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('product_id', sa.String(36),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('label', sa.String(100), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=True),
        sa.Column('old_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('image', postgresql.JSONB(), nullable=True),
    )

    # Category names per product (free text, no FK to categories)
    op.create_table(
        'product_categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('product_id', sa.String(36),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('name', sa.String(200), nullable=False, index=True),
    )

    # Categories
    op.create_table(
        'categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_unique_constraint('uq_categories_name', 'categories', ['name'])

    # Banners
    op.create_table(
        'banners',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('image', postgresql.JSONB(), nullable=False),
        sa.Column('link', sa.String(1000), nullable=False),
        sa.Column('display_order', sa.Numeric(12, 2), nullable=False, server_default='0', index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('banners')
    op.drop_table('categories')
    op.drop_table('product_categories')
    op.drop_table('product_sizes')
    op.drop_table('products')
