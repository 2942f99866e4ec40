"""Baseline migration - users, tasks, reference material and audit tables

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-17

Creates every table of the SyariahOS API. Portable across SQLite and
PostgreSQL (no dialect-specific DDL).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Users & Auth
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('theme', sa.String(20), nullable=False, server_default='light'),
        sa.Column('profile_picture', sa.Text(), nullable=True),
        sa.Column('zakat_rate', sa.Numeric(5, 2), nullable=True),
        sa.Column('preferred_akad', sa.String(100), nullable=True),
        sa.Column('calculation_method', sa.String(20), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'auth_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(64), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_auth_tokens_user_id', 'auth_tokens', ['user_id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_categories_user_id', 'categories', ['user_id'])

    # ==========================================================================
    # Tasks
    # ==========================================================================
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('has_limit', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('current_value', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('target_value', sa.Integer(), nullable=True),
        sa.Column('unit', sa.String(50), nullable=True),
        sa.Column('reset_cycle', sa.String(20), nullable=True),
        sa.Column('per_check_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('increment_value', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_reset_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_tasks_user_category', 'tasks', ['user_id', 'category'])
    op.create_index('idx_tasks_user_cycle', 'tasks', ['user_id', 'reset_cycle'])
    op.create_index('idx_tasks_cycle_reset', 'tasks', ['reset_cycle', 'last_reset_at'])

    op.create_table(
        'task_histories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.Column('note', sa.String(500), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_task_histories_task_ts', 'task_histories', ['task_id', 'timestamp'])

    # ==========================================================================
    # Audit
    # ==========================================================================
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('subject_type', sa.String(50), nullable=True),
        sa.Column('subject_id', sa.Integer(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_activity_logs_action', 'activity_logs', ['action'])
    op.create_index('idx_activity_logs_user_created', 'activity_logs', ['user_id', 'created_at'])

    # ==========================================================================
    # Reference material
    # ==========================================================================
    op.create_table(
        'directory_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('directory_items.id', ondelete='CASCADE'), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('content', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_directory_items_user_parent', 'directory_items', ['user_id', 'parent_id'])

    op.create_table(
        'tools',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('inputs', sa.JSON(), nullable=True),
        sa.Column('outputs', sa.JSON(), nullable=True),
        sa.Column('benefits', sa.JSON(), nullable=True),
        sa.Column('sharia_basis', sa.Text(), nullable=True),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('related_directory_ids', sa.JSON(), nullable=True),
        sa.Column('related_dalil_text', sa.Text(), nullable=True),
        sa.Column('related_dalil_source', sa.String(500), nullable=True),
        sa.Column('sources', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_tools_category', 'tools', ['category'])


def downgrade() -> None:
    """Drop all tables (children first)."""
    op.drop_table('tools')
    op.drop_table('directory_items')
    op.drop_table('activity_logs')
    op.drop_table('task_histories')
    op.drop_table('tasks')
    op.drop_table('categories')
    op.drop_table('auth_tokens')
    op.drop_table('users')
