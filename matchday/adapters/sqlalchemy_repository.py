"""SQLAlchemy implementations of the repository ports.

Rows are mapped to domain objects with the entities' ``restore`` constructors,
so persisted matches whose start time lies in the past load without tripping
creation-time validation. Within one load, each player id maps to a single
Player instance shared by rosters and ledger entries.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from matchday.domain.entities import Match as DomainMatch
from matchday.domain.entities import Player as DomainPlayer
from matchday.domain.entities import Team as DomainTeam
from matchday.domain.events import MatchEvent as DomainMatchEvent
from matchday.domain.events import payload_from_dict, payload_to_dict
from matchday.domain.exceptions import ConcurrentModificationError
from matchday.domain.value_objects import MatchEventType, MatchStatus, Position
from matchday.models import Match as ORMMatch
from matchday.models import MatchEvent as ORMMatchEvent
from matchday.models import Player as ORMPlayer
from matchday.models import Team as ORMTeam
from matchday.models import TeamPlayer as ORMTeamPlayer
from matchday.usecases.match_use_cases import MatchRepositoryInterface
from matchday.usecases.player_use_cases import PlayerRepositoryInterface
from matchday.usecases.team_use_cases import TeamRepositoryInterface

logger = logging.getLogger(__name__)

PlayerCache = Dict[str, DomainPlayer]


def _map_player(orm: ORMPlayer, cache: Optional[PlayerCache] = None) -> DomainPlayer:
    if cache is not None and orm.id in cache:
        return cache[orm.id]

    player = DomainPlayer.restore(
        id=UUID(orm.id),
        name=orm.name,
        date_of_birth=orm.date_of_birth,
        nationality=orm.nationality,
        position=Position[orm.position],
        jersey_number=orm.jersey_number,
        photo_url=orm.photo_url,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )
    if cache is not None:
        cache[orm.id] = player
    return player


def _map_team(orm: ORMTeam, cache: Optional[PlayerCache] = None) -> DomainTeam:
    if cache is None:
        cache = {}
    return DomainTeam.restore(
        id=UUID(orm.id),
        name=orm.name,
        short_name=orm.short_name,
        country=orm.country,
        logo_url=orm.logo_url,
        players=[_map_player(m.player, cache) for m in orm.memberships],
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


def _map_event(orm: ORMMatchEvent, cache: PlayerCache) -> DomainMatchEvent:
    return DomainMatchEvent(
        id=UUID(orm.id),
        type=MatchEventType[orm.type],
        description=orm.description,
        timestamp=orm.timestamp,
        match_minute=orm.match_minute,
        primary_player=_map_player(orm.primary_player, cache) if orm.primary_player else None,
        secondary_player=_map_player(orm.secondary_player, cache) if orm.secondary_player else None,
        payload=payload_from_dict(orm.payload),
    )


def _map_match(orm: ORMMatch) -> DomainMatch:
    cache: PlayerCache = {}
    return DomainMatch.restore(
        id=UUID(orm.id),
        home_team=_map_team(orm.home_team, cache),
        away_team=_map_team(orm.away_team, cache),
        venue=orm.venue,
        start_time=orm.start_time,
        status=MatchStatus[orm.status],
        home_score=orm.home_score,
        away_score=orm.away_score,
        events=[_map_event(e, cache) for e in orm.events],
        created_at=orm.created_at,
        updated_at=orm.updated_at,
        kicked_off_at=orm.kicked_off_at,
        version=orm.version,
    )


def _write_player(session: Session, player: DomainPlayer) -> ORMPlayer:
    """Insert or update the row of a player."""
    orm = session.get(ORMPlayer, str(player.id))
    is_new = orm is None
    if is_new:
        orm = ORMPlayer(id=str(player.id))
        session.add(orm)

    orm.name = player.name
    orm.date_of_birth = player.date_of_birth
    orm.nationality = player.nationality
    orm.position = player.position.name
    orm.jersey_number = player.jersey_number
    orm.photo_url = player.photo_url
    orm.created_at = player.created_at
    orm.updated_at = player.updated_at

    if is_new:
        # make the row visible to later lookups in the same unit of work
        session.flush()
    return orm


def _ensure_player(session: Session, player: Optional[DomainPlayer]) -> None:
    """Insert a player row only when none exists yet."""
    if player is not None and session.get(ORMPlayer, str(player.id)) is None:
        _write_player(session, player)


def _write_team(session: Session, team: DomainTeam) -> ORMTeam:
    """Insert or update a team row and reconcile its roster."""
    orm = session.get(ORMTeam, str(team.id))
    if orm is None:
        orm = ORMTeam(id=str(team.id))
        session.add(orm)

    orm.name = team.name
    orm.short_name = team.short_name
    orm.country = team.country
    orm.logo_url = team.logo_url
    orm.created_at = team.created_at
    orm.updated_at = team.updated_at

    existing = {m.player_id: m for m in orm.memberships}
    wanted = [str(p.id) for p in team.players]

    for player_id, membership in existing.items():
        if player_id not in wanted:
            orm.memberships.remove(membership)

    for position, player in enumerate(team.players):
        _ensure_player(session, player)
        membership = existing.get(str(player.id))
        if membership is None:
            membership = ORMTeamPlayer(player_id=str(player.id))
            orm.memberships.append(membership)
        membership.squad_position = position

    return orm


class SQLAlchemyPlayerRepository(PlayerRepositoryInterface):
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, player_id: UUID) -> Optional[DomainPlayer]:
        orm = self.session.get(ORMPlayer, str(player_id))
        return _map_player(orm) if orm is not None else None

    def list_all(self) -> List[DomainPlayer]:
        orm_players = self.session.query(ORMPlayer).order_by(ORMPlayer.name).all()
        return [_map_player(p) for p in orm_players]

    def list_by_position(self, position: Position) -> List[DomainPlayer]:
        orm_players = (
            self.session.query(ORMPlayer)
            .filter(ORMPlayer.position == position.name)
            .order_by(ORMPlayer.name)
            .all()
        )
        return [_map_player(p) for p in orm_players]

    def list_by_nationality(self, nationality: str) -> List[DomainPlayer]:
        orm_players = (
            self.session.query(ORMPlayer)
            .filter(ORMPlayer.nationality.ilike(nationality))
            .order_by(ORMPlayer.name)
            .all()
        )
        return [_map_player(p) for p in orm_players]

    def save(self, player: DomainPlayer) -> DomainPlayer:
        try:
            _write_player(self.session, player)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Failed to save player {player.id}: {e}")
            raise
        logger.info(f"Saved player {player.id}")
        return player


class SQLAlchemyTeamRepository(TeamRepositoryInterface):
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, team_id: UUID) -> Optional[DomainTeam]:
        orm = self.session.get(ORMTeam, str(team_id))
        return _map_team(orm) if orm is not None else None

    def get_by_name(self, name: str) -> Optional[DomainTeam]:
        orm = self.session.query(ORMTeam).filter(ORMTeam.name == name).first()
        return _map_team(orm) if orm is not None else None

    def list_all(self) -> List[DomainTeam]:
        orm = self.session.query(ORMTeam).order_by(ORMTeam.name).all()
        return [_map_team(t) for t in orm]

    def list_by_country(self, country: str) -> List[DomainTeam]:
        orm = (
            self.session.query(ORMTeam)
            .filter(ORMTeam.country.ilike(country))
            .order_by(ORMTeam.name)
            .all()
        )
        return [_map_team(t) for t in orm]

    def save(self, team: DomainTeam) -> DomainTeam:
        try:
            _write_team(self.session, team)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Failed to save team {team.id}: {e}")
            raise
        logger.info(f"Saved team {team.id} with {team.squad_size()} players")
        return team


class SQLAlchemyMatchRepository(MatchRepositoryInterface):
    """Match persistence with a version column for optimistic locking.

    ``save`` only succeeds when the stored version still equals the version
    the aggregate was loaded with; ledger rows are inserted for events not yet
    stored and are never updated or deleted.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, match_id: UUID) -> Optional[DomainMatch]:
        orm = self.session.get(ORMMatch, str(match_id))
        return _map_match(orm) if orm is not None else None

    def list_all(self) -> List[DomainMatch]:
        orm = self.session.query(ORMMatch).order_by(ORMMatch.start_time).all()
        return [_map_match(m) for m in orm]

    def list_by_status(self, status: MatchStatus) -> List[DomainMatch]:
        orm = (
            self.session.query(ORMMatch)
            .filter(ORMMatch.status == status.name)
            .order_by(ORMMatch.start_time)
            .all()
        )
        return [_map_match(m) for m in orm]

    def list_by_team(self, team_id: UUID) -> List[DomainMatch]:
        key = str(team_id)
        orm = (
            self.session.query(ORMMatch)
            .filter(or_(ORMMatch.home_team_id == key, ORMMatch.away_team_id == key))
            .order_by(ORMMatch.start_time)
            .all()
        )
        return [_map_match(m) for m in orm]

    def list_by_start_time_between(self, start: datetime, end: datetime) -> List[DomainMatch]:
        orm = (
            self.session.query(ORMMatch)
            .filter(ORMMatch.start_time.between(start, end))
            .order_by(ORMMatch.start_time)
            .all()
        )
        return [_map_match(m) for m in orm]

    def save(self, match: DomainMatch) -> DomainMatch:
        key = str(match.id)
        values = {
            "venue": match.venue,
            "start_time": match.start_time,
            "status": match.status.name,
            "home_score": match.home_score,
            "away_score": match.away_score,
            "kicked_off_at": match.kicked_off_at,
            "updated_at": match.updated_at,
        }
        new_version = match.version + 1

        try:
            if self.session.get(ORMMatch, key) is None:
                for team in (match.home_team, match.away_team):
                    if self.session.get(ORMTeam, str(team.id)) is None:
                        _write_team(self.session, team)
                self.session.add(ORMMatch(
                    id=key,
                    home_team_id=str(match.home_team.id),
                    away_team_id=str(match.away_team.id),
                    created_at=match.created_at,
                    version=new_version,
                    **values,
                ))
            else:
                updated = (
                    self.session.query(ORMMatch)
                    .filter(ORMMatch.id == key, ORMMatch.version == match.version)
                    .update(dict(values, version=new_version), synchronize_session=False)
                )
                if updated == 0:
                    self.session.rollback()
                    logger.error(f"Match {key} was modified concurrently (loaded v{match.version})")
                    raise ConcurrentModificationError(
                        f"Match {key} was modified by another writer; reload and retry"
                    )

            self._append_events(key, match)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Failed to save match {key}: {e}")
            raise

        match.version = new_version
        logger.info(f"Saved match {key} v{new_version} with {len(match.events)} events")
        return match

    def _append_events(self, key: str, match: DomainMatch) -> None:
        stored = {
            row.id
            for row in self.session.query(ORMMatchEvent.id).filter(ORMMatchEvent.match_id == key)
        }
        for sequence, event in enumerate(match.events):
            if str(event.id) in stored:
                continue
            _ensure_player(self.session, event.primary_player)
            _ensure_player(self.session, event.secondary_player)
            self.session.add(ORMMatchEvent(
                id=str(event.id),
                match_id=key,
                sequence=sequence,
                type=event.type.name,
                description=event.description,
                primary_player_id=str(event.primary_player.id) if event.primary_player else None,
                secondary_player_id=str(event.secondary_player.id) if event.secondary_player else None,
                timestamp=event.timestamp,
                match_minute=event.match_minute,
                payload=payload_to_dict(event.payload),
            ))
