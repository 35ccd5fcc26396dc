"""In-memory implementations of the repository ports.

Aggregates are kept by reference in dictionaries guarded by a lock, which
gives a single process a single writer per collection. Useful for tests and
for embedding the use cases without a database.
"""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from matchday.domain.entities import Match, Player, Team
from matchday.domain.value_objects import MatchStatus, Position
from matchday.usecases.match_use_cases import MatchRepositoryInterface
from matchday.usecases.player_use_cases import PlayerRepositoryInterface
from matchday.usecases.team_use_cases import TeamRepositoryInterface

logger = logging.getLogger(__name__)


class InMemoryPlayerRepository(PlayerRepositoryInterface):
    def __init__(self):
        self._players: Dict[UUID, Player] = {}
        self._lock = threading.Lock()

    def get_by_id(self, player_id: UUID) -> Optional[Player]:
        with self._lock:
            return self._players.get(player_id)

    def save(self, player: Player) -> Player:
        with self._lock:
            self._players[player.id] = player
        logger.debug("Stored player %s", player.id)
        return player

    def list_all(self) -> List[Player]:
        with self._lock:
            return sorted(self._players.values(), key=lambda p: p.name)

    def list_by_position(self, position: Position) -> List[Player]:
        return [p for p in self.list_all() if p.position == position]

    def list_by_nationality(self, nationality: str) -> List[Player]:
        wanted = nationality.lower()
        return [p for p in self.list_all() if (p.nationality or "").lower() == wanted]


class InMemoryTeamRepository(TeamRepositoryInterface):
    def __init__(self):
        self._teams: Dict[UUID, Team] = {}
        self._lock = threading.Lock()

    def get_by_id(self, team_id: UUID) -> Optional[Team]:
        with self._lock:
            return self._teams.get(team_id)

    def get_by_name(self, name: str) -> Optional[Team]:
        with self._lock:
            for team in self._teams.values():
                if team.name == name:
                    return team
        return None

    def save(self, team: Team) -> Team:
        with self._lock:
            self._teams[team.id] = team
        logger.debug("Stored team %s", team.id)
        return team

    def list_all(self) -> List[Team]:
        with self._lock:
            return sorted(self._teams.values(), key=lambda t: t.name)

    def list_by_country(self, country: str) -> List[Team]:
        wanted = country.lower()
        return [t for t in self.list_all() if (t.country or "").lower() == wanted]


class InMemoryMatchRepository(MatchRepositoryInterface):
    def __init__(self):
        self._matches: Dict[UUID, Match] = {}
        self._lock = threading.Lock()

    def get_by_id(self, match_id: UUID) -> Optional[Match]:
        with self._lock:
            return self._matches.get(match_id)

    def save(self, match: Match) -> Match:
        with self._lock:
            self._matches[match.id] = match
        logger.debug("Stored match %s with %d events", match.id, len(match.events))
        return match

    def list_all(self) -> List[Match]:
        with self._lock:
            return sorted(self._matches.values(), key=lambda m: m.start_time)

    def list_by_status(self, status: MatchStatus) -> List[Match]:
        return [m for m in self.list_all() if m.status == status]

    def list_by_team(self, team_id: UUID) -> List[Match]:
        return [m for m in self.list_all() if m.involves(team_id)]

    def list_by_start_time_between(self, start: datetime, end: datetime) -> List[Match]:
        return [m for m in self.list_all() if start <= m.start_time <= end]
