"""initial_schema

Revision ID: 3f9c1a2b7d10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

account_role_enum = sa.Enum(
    'user', 'premium_user', 'coach', 'admin', name='account_role_enum'
)
session_status_enum = sa.Enum(
    'scheduled', 'confirmed', 'completed', 'cancelled', name='session_status_enum'
)
notification_type_enum = sa.Enum(
    'booking_confirmation',
    'booking_cancellation',
    'booking_reminder',
    'role_change',
    'system_announcement',
    name='notification_type_enum',
)
notification_priority_enum = sa.Enum(
    'low', 'medium', 'high', 'urgent', name='notification_priority_enum'
)


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema - accounts, availability, bookings, discounts, notifications."""

    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', account_role_enum, server_default='user', nullable=False),
        sa.Column('gender', sa.String(length=32), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('disability', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('disability_cause', sa.Text(), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('credentials', sa.Text(), nullable=True),
        sa.Column('philosophy', sa.Text(), nullable=True),
        sa.Column('profile_image', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=True),
        sa.Column('is_online', sa.Boolean(), server_default='false', nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts')),
    )
    op.create_index(op.f('ix_accounts_email'), 'accounts', ['email'], unique=True)

    op.create_table(
        'time_slots',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('date_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_min', sa.Integer(), server_default='60', nullable=False),
        sa.Column('is_available', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['coach_id'],
            ['accounts.id'],
            name=op.f('fk_time_slots_coach_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_time_slots')),
    )
    op.create_index(op.f('ix_time_slots_coach_id'), 'time_slots', ['coach_id'])
    op.create_index(op.f('ix_time_slots_date_time'), 'time_slots', ['date_time'])

    op.create_table(
        'booking_types',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['coach_id'],
            ['accounts.id'],
            name=op.f('fk_booking_types_coach_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_booking_types')),
    )
    op.create_index(op.f('ix_booking_types_coach_id'), 'booking_types', ['coach_id'])

    op.create_table(
        'discounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('expiry', sa.DateTime(timezone=True), nullable=False),
        sa.Column('max_usage', sa.Integer(), server_default='1', nullable=False),
        sa.Column('use_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['coach_id'],
            ['accounts.id'],
            name=op.f('fk_discounts_coach_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_discounts')),
    )
    op.create_index(op.f('ix_discounts_code'), 'discounts', ['code'], unique=True)
    op.create_index(op.f('ix_discounts_coach_id'), 'discounts', ['coach_id'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('booking_type_id', sa.Uuid(), nullable=False),
        sa.Column('time_slot_id', sa.Uuid(), nullable=False),
        sa.Column('discount_id', sa.Uuid(), nullable=True),
        sa.Column('date_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_min', sa.Integer(), server_default='60', nullable=False),
        sa.Column(
            'status', session_status_enum, server_default='scheduled', nullable=False
        ),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('is_paid', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('payment_id', sa.String(), nullable=True),
        sa.Column('discount_code', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reminder_sent_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'],
            ['accounts.id'],
            name=op.f('fk_sessions_user_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['coach_id'],
            ['accounts.id'],
            name=op.f('fk_sessions_coach_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['booking_type_id'],
            ['booking_types.id'],
            name=op.f('fk_sessions_booking_type_id_booking_types'),
        ),
        sa.ForeignKeyConstraint(
            ['time_slot_id'],
            ['time_slots.id'],
            name=op.f('fk_sessions_time_slot_id_time_slots'),
        ),
        sa.ForeignKeyConstraint(
            ['discount_id'],
            ['discounts.id'],
            name=op.f('fk_sessions_discount_id_discounts'),
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_sessions')),
    )
    op.create_index(op.f('ix_sessions_user_id'), 'sessions', ['user_id'])
    op.create_index(op.f('ix_sessions_coach_id'), 'sessions', ['coach_id'])
    op.create_index(op.f('ix_sessions_date_time'), 'sessions', ['date_time'])
    op.create_index(op.f('ix_sessions_status'), 'sessions', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', notification_type_enum, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=True),
        sa.Column(
            'priority', notification_priority_enum, server_default='medium', nullable=False
        ),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['recipient_id'],
            ['accounts.id'],
            name=op.f('fk_notifications_recipient_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['sender_id'],
            ['accounts.id'],
            name=op.f('fk_notifications_sender_id_accounts'),
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_notifications')),
    )
    op.create_index(op.f('ix_notifications_type'), 'notifications', ['type'])
    op.create_index(
        op.f('ix_notifications_recipient_id'), 'notifications', ['recipient_id']
    )
    op.create_index(op.f('ix_notifications_is_read'), 'notifications', ['is_read'])
    op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('notifications')
    op.drop_table('sessions')
    op.drop_table('discounts')
    op.drop_table('booking_types')
    op.drop_table('time_slots')
    op.drop_table('accounts')

    bind = op.get_bind()
    for enum in (
        notification_priority_enum,
        notification_type_enum,
        session_status_enum,
        account_role_enum,
    ):
        enum.drop(bind, checkfirst=True)
