"""initial_membership_schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _enum(name, *values):
    return sa.Enum(*values, name=name, native_enum=False)


def _timestamps():
    return [
        sa.Column('id', sa.String(length=24), primary_key=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        'user',
        *_timestamps(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', _enum('user_role', 'Admin', 'Member'), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)
    op.create_index('ix_user_is_active', 'user', ['is_active'])

    op.create_table(
        'zone',
        *_timestamps(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
    )
    op.create_index('ix_zone_name', 'zone', ['name'])
    op.create_index('ix_zone_is_active', 'zone', ['is_active'])

    op.create_table(
        'member',
        *_timestamps(),
        sa.Column('user_id', sa.String(length=24), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('member_id', sa.String(length=40), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('zone_id', sa.String(length=24), sa.ForeignKey('zone.id'), nullable=False),
        sa.Column('membership_type', _enum('membership_type', 'Basic', 'Premium', 'VIP'), nullable=False),
        sa.Column('status', _enum('member_status', 'Active', 'Inactive', 'Suspended', 'Expired'), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('join_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('renewal_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('qr_code', sa.Text(), nullable=True),
        sa.Column('profile_image', sa.String(length=500), nullable=True),
    )
    op.create_index('ix_member_member_id', 'member', ['member_id'], unique=True)
    op.create_index('ix_member_zone_id', 'member', ['zone_id'])
    op.create_index('ix_member_status', 'member', ['status'])
    op.create_index('ix_member_renewal_date', 'member', ['renewal_date'])
    op.create_index('ix_member_is_active', 'member', ['is_active'])

    op.create_table(
        'event',
        *_timestamps(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=False),
        sa.Column('max_attendees', sa.Integer(), nullable=True),
        sa.Column('registration_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('status', _enum('event_status', 'Upcoming', 'Ongoing', 'Completed', 'Cancelled'), nullable=False),
        sa.Column('created_by', sa.String(length=24), sa.ForeignKey('user.id'), nullable=False),
    )
    op.create_index('ix_event_event_date', 'event', ['event_date'])
    op.create_index('ix_event_status', 'event', ['status'])
    op.create_index('ix_event_is_active', 'event', ['is_active'])

    op.create_table(
        'event_attendee',
        sa.Column('id', sa.String(length=24), primary_key=True),
        sa.Column('event_id', sa.String(length=24), sa.ForeignKey('event.id', ondelete='CASCADE'), nullable=False),
        sa.Column('member_id', sa.String(length=24), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('registration_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('attendance_status', _enum('attendance_status', 'Registered', 'Attended', 'No Show'), nullable=False),
        sa.Column('payment_status', _enum('attendee_payment_status', 'Pending', 'Paid', 'Refunded'), nullable=False),
        sa.UniqueConstraint('event_id', 'member_id', name='uq_event_attendee_member'),
    )
    op.create_index('ix_event_attendee_event_id', 'event_attendee', ['event_id'])
    op.create_index('ix_event_attendee_member_id', 'event_attendee', ['member_id'])

    op.create_table(
        'payment',
        *_timestamps(),
        sa.Column('payment_id', sa.String(length=40), nullable=False),
        sa.Column('member_id', sa.String(length=24), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column(
            'payment_type',
            _enum('payment_type', 'Membership Fee', 'Event Registration', 'Late Fee', 'Other'),
            nullable=False,
        ),
        sa.Column(
            'payment_method',
            _enum('payment_method', 'Cash', 'Credit Card', 'Debit Card', 'Bank Transfer', 'Online', 'Cheque'),
            nullable=False,
        ),
        sa.Column('status', _enum('payment_status', 'Pending', 'Completed', 'Failed', 'Refunded'), nullable=False),
        sa.Column('transaction_id', sa.String(length=100), nullable=True),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('receipt_file', sa.String(length=500), nullable=True),
        sa.Column('event_id', sa.String(length=24), sa.ForeignKey('event.id'), nullable=True),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('processed_by', sa.String(length=24), sa.ForeignKey('user.id'), nullable=True),
    )
    op.create_index('ix_payment_payment_id', 'payment', ['payment_id'], unique=True)
    op.create_index('ix_payment_member_id', 'payment', ['member_id'])
    op.create_index('ix_payment_event_id', 'payment', ['event_id'])
    op.create_index('ix_payment_status', 'payment', ['status'])
    op.create_index('ix_payment_payment_date', 'payment', ['payment_date'])
    op.create_index('ix_payment_is_active', 'payment', ['is_active'])

    op.create_table(
        'notification',
        *_timestamps(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column(
            'type',
            _enum('notification_type', 'General', 'Event', 'Payment', 'Membership', 'Reminder'),
            nullable=False,
        ),
        sa.Column('priority', _enum('notification_priority', 'Low', 'Medium', 'High', 'Urgent'), nullable=False),
        sa.Column('sent_by', sa.String(length=24), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', _enum('notification_status', 'Draft', 'Scheduled', 'Sent', 'Failed'), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_notification_sent_at', 'notification', ['sent_at'])
    op.create_index('ix_notification_is_active', 'notification', ['is_active'])

    op.create_table(
        'notification_target',
        sa.Column(
            'notification_id',
            sa.String(length=24),
            sa.ForeignKey('notification.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column('member_id', sa.String(length=24), sa.ForeignKey('member.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade():
    op.drop_table('notification_target')
    op.drop_table('notification')
    op.drop_table('payment')
    op.drop_table('event_attendee')
    op.drop_table('event')
    op.drop_table('member')
    op.drop_table('zone')
    op.drop_table('user')
