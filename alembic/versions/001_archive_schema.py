"""Initial migration - live item collections and the archive

Revision ID: 001_archive_schema
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

from productivity_archive.models.db_types import UUID, JSONType

# revision identifiers
revision = '001_archive_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create the five live collections and the archive records table."""

    op.create_table('projects',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', UUID(), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )

    op.create_table('project_members',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('project_id', UUID(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', UUID(), nullable=False, index=True),
        sa.UniqueConstraint('project_id', 'user_id'),
    )

    op.create_table('tasks',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=True),
        sa.Column('project_id', UUID(), nullable=True, index=True),
        sa.Column('assignee_id', UUID(), nullable=True, index=True),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('estimated_time', sa.Float(), nullable=True),
        *_timestamps(),
    )

    op.create_table('notes',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('user_id', UUID(), nullable=False, index=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('tags', JSONType, nullable=True),
        sa.Column('color', sa.String(30), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table('bookmarks',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('user_id', UUID(), nullable=False, index=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('url', sa.String(2048), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('folder_id', sa.String(64), nullable=True),
        *_timestamps(),
    )

    op.create_table('snippets',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('user_id', UUID(), nullable=False, index=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('language', sa.String(50), nullable=False, server_default='text'),
        sa.Column('tags', JSONType, nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        *_timestamps(),
    )

    op.create_table('archive_records',
        sa.Column('id', UUID(), primary_key=True),
        sa.Column('user_id', UUID(), nullable=False, index=True),
        sa.Column('item_type', sa.String(20), nullable=False, index=True),
        sa.Column('original_id', UUID(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False, index=True),
        sa.Column('completion_time', sa.BigInteger(), nullable=True),
        sa.Column('priority', sa.String(20), nullable=True),
        sa.Column('project_id', UUID(), nullable=True, index=True),
        sa.Column('metadata', JSONType, nullable=False),

        # Move lifecycle
        sa.Column('state', sa.String(20), nullable=False, index=True),
        sa.Column('idempotency_key', sa.String(120), nullable=True, unique=True),
        sa.Column('restored_item_id', UUID(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_archive_user_type_completed', 'archive_records', ['user_id', 'item_type', 'completed_at'])
    op.create_index('ix_archive_user_completed', 'archive_records', ['user_id', 'completed_at'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_archive_user_completed', table_name='archive_records')
    op.drop_index('ix_archive_user_type_completed', table_name='archive_records')
    op.drop_table('archive_records')
    op.drop_table('snippets')
    op.drop_table('bookmarks')
    op.drop_table('notes')
    op.drop_table('tasks')
    op.drop_table('project_members')
    op.drop_table('projects')
