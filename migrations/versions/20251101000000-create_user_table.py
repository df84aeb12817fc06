"""create_user_table

Revision ID: 20251101000000
Revises:
Create Date: 2025-11-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20251101000000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Baseline `user` table as it existed before wallet linking.
    """
    op.create_table(
        'user',
        sa.Column('ID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('firstName', sa.String(255), nullable=True),
        sa.Column('middleName', sa.String(255), nullable=True),
        sa.Column('lastName', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phoneNumber', sa.String(255), nullable=False),
        sa.Column('role', sa.String(255), nullable=True),
        sa.Column('password', sa.String(255), nullable=True),
        sa.Column(
            'createdAt',
            sa.DateTime(timezone=True),
            nullable=True,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column('registrationChannel', sa.String(255), nullable=True),
        sa.Column('nationalIdPhotoHash', sa.LargeBinary(), nullable=True),
        sa.Column('user_identifier_image_url', sa.String(255), nullable=True),
        sa.UniqueConstraint('email', name='user_email'),
        sa.UniqueConstraint('phoneNumber', name='user_phoneNumber'),
    )


def downgrade() -> None:
    op.drop_table('user')
