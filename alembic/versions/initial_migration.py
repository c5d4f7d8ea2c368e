"""Initial migration

Revision ID: initial_migration
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'initial_migration'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create events table
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('max_capacity', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(16), nullable=False, server_default='open'),
        sa.Column('average_rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_ratings', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('max_capacity >= 1', name='ck_events_max_capacity_positive'),
        sa.CheckConstraint('current_participants >= 0', name='ck_events_participants_non_negative'),
        sa.CheckConstraint('current_participants <= max_capacity', name='ck_events_participants_within_capacity'),
        sa.CheckConstraint('average_rating >= 0 AND average_rating <= 5', name='ck_events_average_rating_range'),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_title', 'events', ['title'])
    op.create_index('ix_events_event_date', 'events', ['event_date'])
    op.create_index('ix_events_status', 'events', ['status'])

    # Create participations table
    op.create_table(
        'participations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='registered'),
        sa.Column('registration_date', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'event_id', name='uq_participations_user_event'),
    )
    op.create_index('ix_participations_id', 'participations', ['id'])
    op.create_index('ix_participations_user_id', 'participations', ['user_id'])
    op.create_index('ix_participations_event_id', 'participations', ['event_id'])

    # Create evaluations table
    op.create_table(
        'evaluations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'event_id', name='uq_evaluations_user_event'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_evaluations_rating_range'),
    )
    op.create_index('ix_evaluations_id', 'evaluations', ['id'])
    op.create_index('ix_evaluations_user_id', 'evaluations', ['user_id'])
    op.create_index('ix_evaluations_event_id', 'evaluations', ['event_id'])
    op.create_index('ix_evaluations_created_at', 'evaluations', ['created_at'])


def downgrade() -> None:
    op.drop_table('evaluations')
    op.drop_table('participations')
    op.drop_table('events')
    op.drop_table('users')
