"""add_delete_sessions_tasks_table

Revision ID: 4c2e8f1a9b7d
Revises:
Create Date: 2026-10-17 09:12:44.518203

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2e8f1a9b7d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Batch manifests: one row per (task, batch, session), insert-only
    op.create_table(
        'delete_sessions_tasks',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.BigInteger(), nullable=False),
        sa.Column('task_id', sa.String(length=36), nullable=False),
        sa.Column('batch_id', sa.String(length=36), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )

    # Workers resolve a batch by (task_id, batch_id)
    op.create_index(
        'idx_delete_sessions_tasks_task_batch',
        'delete_sessions_tasks',
        ['task_id', 'batch_id'],
    )
    op.create_index(
        op.f('ix_delete_sessions_tasks_session_id'),
        'delete_sessions_tasks',
        ['session_id'],
    )


def downgrade():
    op.drop_index(op.f('ix_delete_sessions_tasks_session_id'), table_name='delete_sessions_tasks')
    op.drop_index('idx_delete_sessions_tasks_task_batch', table_name='delete_sessions_tasks')
    op.drop_table('delete_sessions_tasks')
