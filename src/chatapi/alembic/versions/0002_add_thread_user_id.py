"""add owner subject to threads

Existing threads are assigned to the subject given in the
``CHATAPI_BACKFILL_USER_ID`` environment variable; without it the migration
refuses to run against a non-empty table.

Revision ID: 0002_add_thread_user_id
Revises: 0001_initial
Create Date: 2026-09-21
"""
from __future__ import annotations
import os
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_add_thread_user_id'
down_revision: Union[str, None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. nullable first so existing rows can be backfilled
    op.add_column('threads', sa.Column('user_id', sa.String(length=255), nullable=True))

    bind = op.get_bind()
    orphaned = bind.execute(sa.text("SELECT COUNT(*) FROM threads WHERE user_id IS NULL")).scalar()
    if orphaned:
        owner = os.environ.get("CHATAPI_BACKFILL_USER_ID")
        if not owner:
            raise RuntimeError(
                f"{orphaned} existing thread(s) have no owner; set CHATAPI_BACKFILL_USER_ID"
            )
        bind.execute(
            sa.text("UPDATE threads SET user_id = :owner WHERE user_id IS NULL"),
            {"owner": owner},
        )

    # 2. enforce; batch mode keeps SQLite working
    with op.batch_alter_table('threads') as batch_op:
        batch_op.alter_column('user_id', existing_type=sa.String(length=255), nullable=False)
    op.create_index('ix_threads_user_id', 'threads', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_threads_user_id', table_name='threads')
    with op.batch_alter_table('threads') as batch_op:
        batch_op.drop_column('user_id')
