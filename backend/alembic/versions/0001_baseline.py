"""Baseline schema

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates every FitCoach table:
- users: login credentials
- profiles, coach_personas: one row per user
- workout_sessions, progress_logs: activity history
- training_plans, nutrition_plans: generated plans (one active per kind)
- chat_threads, chat_messages: coach conversations
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_baseline'
down_revision = None
branch_labels = None
depends_on = None


def _user_fk(unique: bool = False) -> sa.Column:
    return sa.Column(
        'user_id',
        sa.Integer(),
        sa.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        unique=unique,
    )


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(unique=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('goal', sa.String(30), nullable=True),
        sa.Column('experience_level', sa.String(30), nullable=True),
        sa.Column('activity_level', sa.String(30), nullable=True),
        sa.Column('days_per_week', sa.Integer(), nullable=True),
        sa.Column('session_length', sa.Integer(), nullable=True),
        sa.Column('equipment', sa.String(30), nullable=True),
        sa.Column('injuries', sa.Text(), nullable=True),
        sa.Column('allergies', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=False)

    op.create_table(
        'coach_personas',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('style', sa.String(30), nullable=False),
        sa.Column('tone', sa.String(30), nullable=False),
        sa.Column('language', sa.String(50), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_coach_personas_user_id', 'coach_personas', ['user_id'], unique=False)

    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('exercises', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_workout_sessions_user_id', 'workout_sessions', ['user_id'], unique=False)

    op.create_table(
        'progress_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('body_fat', sa.Float(), nullable=True),
        sa.Column('measurements', sa.JSON(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_progress_logs_user_id', 'progress_logs', ['user_id'], unique=False)

    op.create_table(
        'training_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('plan', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_training_plans_user_id', 'training_plans', ['user_id'], unique=False)

    op.create_table(
        'nutrition_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('calories', sa.Integer(), nullable=False),
        sa.Column('protein', sa.Integer(), nullable=False),
        sa.Column('carbs', sa.Integer(), nullable=False),
        sa.Column('fats', sa.Integer(), nullable=False),
        sa.Column('meal_suggestions', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_nutrition_plans_user_id', 'nutrition_plans', ['user_id'], unique=False)

    op.create_table(
        'chat_threads',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_chat_threads_user_updated', 'chat_threads', ['user_id', 'updated_at'], unique=False)

    op.create_table(
        'chat_messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'thread_id',
            sa.Integer(),
            sa.ForeignKey('chat_threads.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_chat_messages_thread_created', 'chat_messages', ['thread_id', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_chat_messages_thread_created', table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index('ix_chat_threads_user_updated', table_name='chat_threads')
    op.drop_table('chat_threads')
    for table in ('nutrition_plans', 'training_plans', 'progress_logs', 'workout_sessions', 'coach_personas', 'profiles'):
        op.drop_index(f'ix_{table}_user_id', table_name=table)
        op.drop_table(table)
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
