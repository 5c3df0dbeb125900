"""init_dining_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- slot: recurring (day_of_week) XOR one-off (specific_date) time windows
- slot_availability: per-date manual overrides, unique per (slot_id, date)
- dining_table: physical tables, table_number unique per restaurant
- reservation: one row per reserved table; a partial unique index keeps at most
  one BOOKED row per (table_id, slot_id, date)
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            'created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
        ),
        sa.Column(
            'updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        'slot',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column('day_of_week', sa.SmallInteger(), nullable=True),
        sa.Column('specific_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            '(day_of_week IS NULL) <> (specific_date IS NULL)', name='ck_slot_day_xor_date'
        ),
    )
    op.create_index(op.f('ix_slot_restaurant_id'), 'slot', ['restaurant_id'])

    op.create_table(
        'slot_availability',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('slot_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('is_slot_disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_indoor_disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_outdoor_disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['slot_id'], ['slot.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('slot_id', 'date', name='uq_slot_availability_slot_date'),
    )
    op.create_index(op.f('ix_slot_availability_slot_id'), 'slot_availability', ['slot_id'])

    op.create_table(
        'dining_table',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('table_number', sa.String(length=32), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'table_number', name='uq_dining_table_number'),
    )
    op.create_index(op.f('ix_dining_table_restaurant_id'), 'dining_table', ['restaurant_id'])

    op.create_table(
        'reservation',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('table_id', sa.Integer(), nullable=False),
        sa.Column('slot_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('customer_name', sa.String(length=120), nullable=False),
        sa.Column('contact', sa.String(length=32), nullable=False),
        sa.Column('adults', sa.Integer(), nullable=False),
        sa.Column('kids', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('food_pref', sa.String(length=20), nullable=False),
        sa.Column('special_req', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='BOOKED'),
        sa.Column('group_id', sa.String(length=64), nullable=True),
        sa.Column('custom_start_time', sa.String(length=5), nullable=True),
        sa.Column('cancellation_reason', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reservation_table_id'), 'reservation', ['table_id'])
    op.create_index(op.f('ix_reservation_date'), 'reservation', ['date'])
    op.create_index(op.f('ix_reservation_group_id'), 'reservation', ['group_id'])
    op.create_index('ix_reservation_slot_date', 'reservation', ['slot_id', 'date'])
    op.create_index(
        'uq_reservation_live_table_slot_date',
        'reservation',
        ['table_id', 'slot_id', 'date'],
        unique=True,
        postgresql_where=sa.text("status = 'BOOKED'"),
    )


def downgrade() -> None:
    op.drop_table('reservation')
    op.drop_table('dining_table')
    op.drop_table('slot_availability')
    op.drop_table('slot')
