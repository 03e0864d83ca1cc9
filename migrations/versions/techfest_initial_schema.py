"""techfest_initial_schema

Revision ID: techfest_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'techfest_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

# Matches techfest.models.JSONType
JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _timestamps():
    return [
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'user',
        *_timestamps(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('photo_url', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=11), nullable=False),
        sa.Column('department', sa.String(length=64), nullable=True),
        sa.Column('auth_provider', sa.String(length=8), nullable=False),
        sa.Column('google_sub', sa.String(length=255), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)

    op.create_table(
        'event',
        *_timestamps(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('banner', sa.String(length=1024), nullable=True),
        sa.Column('rules', JSON_TYPE, nullable=False),
        sa.Column('eligibility', sa.Text(), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('event_time', sa.String(length=64), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('department', sa.String(length=64), nullable=False),
        sa.Column('coordinator_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('coordinator_name', sa.String(length=255), nullable=True),
        sa.Column('event_head_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('event_head_name', sa.String(length=255), nullable=True),
        sa.Column('is_live', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('max_participants >= 1', name='ck_event_max_participants'),
        sa.CheckConstraint('current_participants >= 0', name='ck_event_current_participants'),
    )
    op.create_index('ix_event_department', 'event', ['department'])
    op.create_index('ix_event_event_date', 'event', ['event_date'])
    op.create_index('ix_event_event_head_id', 'event', ['event_head_id'])

    op.create_table(
        'registration',
        *_timestamps(),
        sa.Column('event_id', sa.String(length=36), sa.ForeignKey('event.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_title', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('user_photo', sa.String(length=1024), nullable=True),
        sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('attended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('certificate_id', sa.String(length=64), nullable=True),
        sa.UniqueConstraint('user_id', 'event_id', name='uq_registration_user_event'),
    )
    op.create_index('ix_registration_event_id', 'registration', ['event_id'])
    op.create_index('ix_registration_user_id', 'registration', ['user_id'])
    op.create_index('ix_registration_event_attended', 'registration', ['event_id', 'attended'])

    op.create_table(
        'announcement',
        *_timestamps(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('author_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('priority', sa.String(length=6), nullable=False),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('event_id', sa.String(length=36), sa.ForeignKey('event.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('ix_announcement_created', 'announcement', ['created_at'])

    op.create_table(
        'winner',
        *_timestamps(),
        sa.Column('event_id', sa.String(length=36), sa.ForeignKey('event.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_title', sa.String(length=255), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('user_photo', sa.String(length=1024), nullable=True),
        sa.Column('approved_by', sa.String(length=255), nullable=False),
        sa.Column('approved_by_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('event_id', 'position', name='uq_winner_event_position'),
        sa.UniqueConstraint('event_id', 'user_id', name='uq_winner_event_user'),
        sa.CheckConstraint('position IN (1, 2, 3)', name='ck_winner_position'),
    )
    op.create_index('ix_winner_event_id', 'winner', ['event_id'])

    op.create_table(
        'audit_log',
        *_timestamps(),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(length=128), nullable=False),
        sa.Column('entity_type', sa.String(length=128), nullable=False),
        sa.Column('entity_id', sa.String(length=36), nullable=True),
        sa.Column('meta', JSON_TYPE, nullable=True),
    )
    op.create_index('ix_audit_log_user_id', 'audit_log', ['user_id'])


def downgrade():
    op.drop_table('audit_log')
    op.drop_table('winner')
    op.drop_table('announcement')
    op.drop_table('registration')
    op.drop_table('event')
    op.drop_table('user')
