"""initial_schema

Revision ID: 001
Revises:
Create Date: 2025-10-01 00:00:00.000000

Create settings, players and matches tables, all scoped by user_id.
Tables that already exist (databases created before migrations were
introduced) are left alone; 002 brings them up to date.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(conn, table_name: str) -> bool:
    """Check if a table exists."""
    return sa.inspect(conn).has_table(table_name)


def upgrade() -> None:
    """Create the three tables if missing."""
    conn = op.get_bind()

    if not _table_exists(conn, "settings"):
        op.create_table(
            "settings",
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("key", sa.String(), nullable=False),
            sa.Column("value", sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint("user_id", "key"),
        )

    if not _table_exists(conn, "players"):
        op.create_table(
            "players",
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("user_id", "name", name="uq_players_user_name"),
        )

    if not _table_exists(conn, "matches"):
        op.create_table(
            "matches",
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("player1", sa.String(), nullable=False),
            sa.Column("player2", sa.String(), nullable=False),
            sa.Column("date", sa.String(), nullable=False),
            sa.Column("start_time", sa.String(), nullable=True),
            sa.Column("duration", sa.Integer(), nullable=True),
            sa.Column("surface", sa.String(), nullable=False),
            sa.Column("season", sa.String(), nullable=False),
            sa.Column("score1", sa.String(), nullable=True),
            sa.Column("score2", sa.String(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="scheduled"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("idx_matches_user_date", "matches", ["user_id", "date"])
        op.create_index("idx_matches_user_player2", "matches", ["user_id", "player2"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("matches")
    op.drop_table("players")
    op.drop_table("settings")
