"""create_users_and_watch_progress

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-17 00:00:01.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("username", sa.String(length=150), nullable=False),
            sa.Column("password_hash", sa.String(length=128), nullable=False),
            sa.Column(
                "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
            ),
            sa.PrimaryKeyConstraint("id", name="pk_users"),
            sa.UniqueConstraint("username", name="uq_users_username"),
        )

    if not insp.has_table("watch_progress"):
        op.create_table(
            "watch_progress",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("item_id", sa.Text(), nullable=False),
            sa.Column("position_seconds", sa.Integer(), nullable=False),
            sa.Column(
                "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
            ),
            sa.PrimaryKeyConstraint("id", name="pk_watch_progress"),
            sa.ForeignKeyConstraint(
                ["user_id"],
                ["users.id"],
                name="fk_watch_progress_user_id_users",
                ondelete="CASCADE",
            ),
            sa.UniqueConstraint("user_id", "item_id", name="uq_watch_progress_user_item"),
            sa.CheckConstraint(
                "position_seconds >= 0", name="ck_watch_progress_position_non_negative"
            ),
        )
        op.create_index(
            "ix_watch_progress_user_updated", "watch_progress", ["user_id", "updated_at"]
        )


def downgrade() -> None:
    op.drop_index("ix_watch_progress_user_updated", table_name="watch_progress")
    op.drop_table("watch_progress")
    op.drop_table("users")
