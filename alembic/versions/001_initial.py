"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

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
    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('city', sa.Enum('RAMALLAH', 'NABLUS', name='city'), nullable=False),
        sa.Column('url', sa.String(2048)),
        sa.UniqueConstraint('name', 'city', name='uq_restaurants_name_city'),
    )

    # Create restaurant_audit_logs table (no FK: entries outlive the restaurant)
    op.create_table(
        'restaurant_audit_logs',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('action', sa.SmallInteger(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('actor_name', sa.String(255), nullable=False),
        sa.Column('actor_id', sa.Numeric(20, 0), nullable=False),
        sa.Column('change_details', sa.JSON()),
        sa.Column('change_description', sa.Text()),
    )

    # Create indexes
    op.create_index('ix_restaurant_audit_logs_restaurant_id', 'restaurant_audit_logs', ['restaurant_id'])
    op.create_index('ix_restaurant_audit_logs_timestamp', 'restaurant_audit_logs', ['timestamp'])


def downgrade() -> None:
    op.drop_index('ix_restaurant_audit_logs_timestamp', table_name='restaurant_audit_logs')
    op.drop_index('ix_restaurant_audit_logs_restaurant_id', table_name='restaurant_audit_logs')
    op.drop_table('restaurant_audit_logs')
    op.drop_table('restaurants')
    sa.Enum(name='city').drop(op.get_bind(), checkfirst=True)
