"""Add doctor availability status

Revision ID: 003_add_doctor_availability
Revises: 002_add_pharmacy_inventory
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '003_add_doctor_availability'
down_revision = '002_add_pharmacy_inventory'
branch_labels = None
depends_on = None


def upgrade():
    op.add_column('users', sa.Column('availability_status', sa.String(20), nullable=True))
    # Existing doctors start offline
    op.execute("UPDATE users SET availability_status = 'offline' WHERE role = 'doctor'")


def downgrade():
    op.drop_column('users', 'availability_status')
