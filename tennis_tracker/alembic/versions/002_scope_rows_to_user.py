"""scope_rows_to_user

Revision ID: 002
Revises: 001
Create Date: 2025-10-20 00:00:00.000000

Upgrade single-user databases: add user_id to matches and players, key
settings by (user_id, key) and make player names unique per user. Existing
rows are assigned to the "default" user. No-op on databases that already
have user_id everywhere.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import text


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEGACY_USER_ID = "default"


def _column_exists(conn, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    columns = sa.inspect(conn).get_columns(table_name)
    return any(col["name"] == column_name for col in columns)


def _index_exists(conn, table_name: str, index_name: str) -> bool:
    """Check if an index exists."""
    indexes = sa.inspect(conn).get_indexes(table_name)
    return any(idx["name"] == index_name for idx in indexes)


def _unique_exists(conn, table_name: str, column_names) -> bool:
    """Check for a unique constraint or unique index over exactly these columns."""
    inspector = sa.inspect(conn)
    target = set(column_names)
    if any(set(uc["column_names"]) == target for uc in inspector.get_unique_constraints(table_name)):
        return True
    return any(
        idx.get("unique") and set(idx["column_names"]) == target
        for idx in inspector.get_indexes(table_name)
    )


def upgrade() -> None:
    """Add per-user scoping to legacy tables."""
    conn = op.get_bind()

    # 1. matches: add user_id, existing rows belong to the legacy user
    if not _column_exists(conn, "matches", "user_id"):
        op.add_column(
            "matches",
            sa.Column("user_id", sa.String(), nullable=False, server_default=LEGACY_USER_ID),
        )

    # 2. players: rebuild so names are unique per user instead of globally.
    # Databases scoped by the old in-place migration have user_id but still
    # a global UNIQUE(name), so the constraint is checked too.
    has_user_id = _column_exists(conn, "players", "user_id")
    if not has_user_id or not _unique_exists(conn, "players", ["user_id", "name"]):
        owner = "COALESCE(user_id, :user_id)" if has_user_id else ":user_id"
        op.create_table(
            "players_new",
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("user_id", "name", name="uq_players_user_name"),
        )
        conn.execute(
            text(f"INSERT INTO players_new (id, user_id, name) SELECT id, {owner}, name FROM players"),
            {"user_id": LEGACY_USER_ID},
        )
        op.drop_table("players")
        op.rename_table("players_new", "players")

    # 3. settings: rebuild with (user_id, key) primary key
    if not _column_exists(conn, "settings", "user_id"):
        op.create_table(
            "settings_new",
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("key", sa.String(), nullable=False),
            sa.Column("value", sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint("user_id", "key"),
        )
        conn.execute(
            text("INSERT INTO settings_new (user_id, key, value) SELECT :user_id, key, value FROM settings"),
            {"user_id": LEGACY_USER_ID},
        )
        op.drop_table("settings")
        op.rename_table("settings_new", "settings")

    # 4. Indexes for user-scoped match queries
    if not _index_exists(conn, "matches", "idx_matches_user_date"):
        op.create_index("idx_matches_user_date", "matches", ["user_id", "date"])
    if not _index_exists(conn, "matches", "idx_matches_user_player2"):
        op.create_index("idx_matches_user_player2", "matches", ["user_id", "player2"])


def downgrade() -> None:
    """Irreversible: rows of different users cannot be merged back into one namespace."""
    pass
