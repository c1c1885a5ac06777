"""
SQLAlchemy ORM models for the tennis tracker.

Every row is scoped to an opaque user id (the Google account id of the
session owner). Isolation is by query filtering only.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Enum,
    UniqueConstraint,
    Index,
)
from tennis_tracker.database.db import Base


class MatchStatus(str, enum.Enum):
    """Match status enum."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class Setting(Base):
    """Per-user key/value configuration."""

    __tablename__ = "settings"

    user_id = Column(String, primary_key=True)
    key = Column(String, primary_key=True)
    value = Column(Text, nullable=True)


class Player(Base):
    """Opponents known to a user."""

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False)
    name = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_players_user_name"),)


class Match(Base):
    """Scheduled and completed matches."""

    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False)
    player1 = Column(String, nullable=False)  # Session owner
    player2 = Column(String, nullable=False)  # Opponent, by name (not a foreign key)
    date = Column(String, nullable=False)  # "2025-10-15"
    start_time = Column(String, nullable=True)  # "10:00"
    duration = Column(Integer, nullable=True)  # Minutes
    surface = Column(String, nullable=False)
    season = Column(String, nullable=False)
    score1 = Column(String, nullable=True)  # Games per set, comma-separated: "6,6"
    score2 = Column(String, nullable=True)  # "4,2"
    status = Column(
        Enum(
            MatchStatus,
            values_callable=lambda x: [e.value for e in x],
            native_enum=False,
            length=20,
        ),
        default=MatchStatus.SCHEDULED,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_matches_user_date", "user_id", "date"),
        Index("idx_matches_user_player2", "user_id", "player2"),
    )
