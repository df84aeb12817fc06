"""add_user_role

Revision ID: 20251106080304
Revises: 20251106065822
Create Date: 2025-11-06 08:03:04.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20251106080304'
down_revision = '20251106065822'
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table('user') as batch_op:
        batch_op.add_column(
            sa.Column(
                'user_role',
                sa.String(50),
                nullable=True,
                comment='User role for supply chain: farmer, wholesaler, distributor, retailer, admin',
            )
        )


def downgrade() -> None:
    with op.batch_alter_table('user') as batch_op:
        batch_op.drop_column('user_role')
