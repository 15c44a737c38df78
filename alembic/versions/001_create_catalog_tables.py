"""Create taxonomy, option and product tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog tables."""
    # Taxonomy tree
    op.create_table(
        'families',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
    )
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('family_id', sa.Integer(), sa.ForeignKey('families.id'), nullable=False, index=True),
    )
    op.create_table(
        'subcategories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=False, index=True),
    )

    # Options and features
    op.create_table(
        'options',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(50), nullable=False),
    )
    op.create_table(
        'features',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('value', sa.String(50), nullable=False),
        sa.Column('option_id', sa.Integer(), sa.ForeignKey('options.id'), nullable=False, index=True),
    )

    # Products
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False, index=True),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('detail', sa.Text(), nullable=True),
        sa.Column('image_path', sa.String(1000), nullable=True),
        sa.Column('subcategory_id', sa.Integer(), sa.ForeignKey('subcategories.id'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_table(
        'option_products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False, index=True),
        sa.Column('option_id', sa.Integer(), sa.ForeignKey('options.id'), nullable=False, index=True),
    )

    # Variants
    op.create_table(
        'variants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False, index=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_table(
        'variant_features',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('variant_id', sa.Integer(), sa.ForeignKey('variants.id'), nullable=False, index=True),
        sa.Column('feature_id', sa.Integer(), sa.ForeignKey('features.id'), nullable=False, index=True),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('variant_features')
    op.drop_table('variants')
    op.drop_table('option_products')
    op.drop_table('products')
    op.drop_table('features')
    op.drop_table('options')
    op.drop_table('subcategories')
    op.drop_table('categories')
    op.drop_table('families')
