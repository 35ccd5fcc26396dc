from __future__ import annotations

import datetime

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeMeta, declarative_base, relationship

Base: DeclarativeMeta = declarative_base()

# Identifiers are stored as canonical UUID strings
UUID_LENGTH = 36


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(UUID_LENGTH), primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    short_name = Column(String(3), nullable=False)
    country = Column(String(100), nullable=True)
    logo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.datetime.now, nullable=False)

    memberships = relationship(
        "TeamPlayer",
        back_populates="team",
        order_by="TeamPlayer.squad_position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Team id={self.id} name={self.name}>"


class Player(Base):
    __tablename__ = "players"

    id = Column(String(UUID_LENGTH), primary_key=True)
    name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    nationality = Column(String(100), nullable=True)
    position = Column(String(16), nullable=False)
    jersey_number = Column(String(8), nullable=False)
    photo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.datetime.now, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Player id={self.id} name={self.name}>"


class TeamPlayer(Base):
    """Roster membership, ordered by insertion."""

    __tablename__ = "team_players"
    __table_args__ = (UniqueConstraint("team_id", "player_id", name="uq_team_player"),)

    id = Column(Integer, primary_key=True)
    team_id = Column(String(UUID_LENGTH), ForeignKey("teams.id"), nullable=False, index=True)
    player_id = Column(String(UUID_LENGTH), ForeignKey("players.id"), nullable=False)
    squad_position = Column(Integer, nullable=False)

    team = relationship("Team", back_populates="memberships")
    player = relationship("Player")


class Match(Base):
    __tablename__ = "matches"

    id = Column(String(UUID_LENGTH), primary_key=True)
    home_team_id = Column(String(UUID_LENGTH), ForeignKey("teams.id"), nullable=False, index=True)
    away_team_id = Column(String(UUID_LENGTH), ForeignKey("teams.id"), nullable=False, index=True)
    venue = Column(String(255), nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    status = Column(String(16), nullable=False, index=True)
    home_score = Column(Integer, nullable=False, default=0)
    away_score = Column(Integer, nullable=False, default=0)
    kicked_off_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    # optimistic locking token, bumped on every save
    version = Column(Integer, nullable=False, default=0)

    home_team = relationship("Team", foreign_keys=[home_team_id])
    away_team = relationship("Team", foreign_keys=[away_team_id])
    events = relationship("MatchEvent", back_populates="match", order_by="MatchEvent.sequence")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Match id={self.id} status={self.status} v{self.version}>"


class MatchEvent(Base):
    __tablename__ = "match_events"
    __table_args__ = (UniqueConstraint("match_id", "sequence", name="uq_match_event_sequence"),)

    id = Column(String(UUID_LENGTH), primary_key=True)
    match_id = Column(String(UUID_LENGTH), ForeignKey("matches.id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    type = Column(String(32), nullable=False)
    description = Column(Text, nullable=False)
    primary_player_id = Column(String(UUID_LENGTH), ForeignKey("players.id"), nullable=True)
    secondary_player_id = Column(String(UUID_LENGTH), ForeignKey("players.id"), nullable=True)
    timestamp = Column(DateTime, nullable=False)
    match_minute = Column(Integer, nullable=False)
    payload = Column(JSON, nullable=True)

    match = relationship("Match", back_populates="events")
    primary_player = relationship("Player", foreign_keys=[primary_player_id])
    secondary_player = relationship("Player", foreign_keys=[secondary_player_id])

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<MatchEvent id={self.id} type={self.type} minute={self.match_minute}>"
