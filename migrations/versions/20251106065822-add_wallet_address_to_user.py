"""add_wallet_address_to_user

Revision ID: 20251106065822
Revises: 20251101000000
Create Date: 2025-11-06 06:58:22.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20251106065822'
down_revision = '20251101000000'
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Add the nullable, unique wallet_address column.
    Values are stored lowercase by the application.
    """
    with op.batch_alter_table('user') as batch_op:
        batch_op.add_column(
            sa.Column(
                'wallet_address',
                sa.String(255),
                nullable=True,
                comment="User's connected Web3 wallet address (MetaMask, WalletConnect, etc.)",
            )
        )
        batch_op.create_unique_constraint('user_wallet_address', ['wallet_address'])


def downgrade() -> None:
    with op.batch_alter_table('user') as batch_op:
        batch_op.drop_constraint('user_wallet_address', type_='unique')
        batch_op.drop_column('wallet_address')
