"""Add pharmacy inventory: medicines and stock movements

Revision ID: 002_add_pharmacy_inventory
Revises: 001_initial_schema
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_add_pharmacy_inventory'
down_revision = '001_initial_schema'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('medicines',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('generic_name', sa.String(), nullable=True),
        sa.Column('category', sa.String(50), nullable=False, server_default='General'),
        sa.Column('manufacturer', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('dosage', sa.String(), nullable=True),
        sa.Column('frequency', sa.String(), nullable=True),
        sa.Column('unit', sa.String(20), nullable=False, server_default='units'),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reorder_level', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('is_discontinued', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_medicines_name', 'medicines', ['name'], unique=True)
    op.create_index('ix_medicines_category', 'medicines', ['category'], unique=False)

    op.create_table('stock_movements',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('medicine_id', sa.String(36), nullable=False),
        sa.Column('recorded_by_id', sa.String(36), nullable=False),
        sa.Column('movement_type', sa.String(20), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('stock_after', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['medicine_id'], ['medicines.id']),
        sa.ForeignKeyConstraint(['recorded_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_stock_movements_medicine_id', 'stock_movements', ['medicine_id'], unique=False)


def downgrade():
    op.drop_index('ix_stock_movements_medicine_id', table_name='stock_movements')
    op.drop_table('stock_movements')

    op.drop_index('ix_medicines_category', table_name='medicines')
    op.drop_index('ix_medicines_name', table_name='medicines')
    op.drop_table('medicines')
