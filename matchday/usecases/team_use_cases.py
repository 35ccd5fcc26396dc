"""Team-specific use cases for managing teams and their rosters."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from matchday.domain.entities import Clock, Team
from matchday.domain.exceptions import DuplicateMemberError, NotFoundError
from .player_use_cases import PlayerDTO, PlayerRepositoryInterface, load_player

logger = logging.getLogger(__name__)


# DTOs for Team operations
@dataclass
class TeamSummaryDTO:
    """Team information without the roster."""
    id: UUID
    name: str
    short_name: str
    country: str
    logo_url: Optional[str]
    squad_size: int

    @classmethod
    def from_entity(cls, team: Team) -> 'TeamSummaryDTO':
        return cls(
            id=team.id,
            name=team.name,
            short_name=team.short_name,
            country=team.country,
            logo_url=team.logo_url,
            squad_size=team.squad_size(),
        )


@dataclass
class TeamDTO:
    """Data Transfer Object for Team information."""
    id: UUID
    name: str
    short_name: str
    country: str
    logo_url: Optional[str]
    squad_size: int
    players: List[PlayerDTO]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, team: Team) -> 'TeamDTO':
        """Create DTO from domain entity."""
        return cls(
            id=team.id,
            name=team.name,
            short_name=team.short_name,
            country=team.country,
            logo_url=team.logo_url,
            squad_size=team.squad_size(),
            players=[PlayerDTO.from_entity(p) for p in team.players],
            created_at=team.created_at,
            updated_at=team.updated_at,
        )


@dataclass
class CreateTeamRequest:
    """Request to create a new team."""
    name: str
    short_name: str
    country: str
    logo_url: Optional[str] = None


@dataclass
class UpdateTeamRequest:
    """Partial update; fields left as None are not changed."""
    team_id: UUID
    name: Optional[str] = None
    short_name: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass
class RosterChangeRequest:
    """Request to add a player to, or remove one from, a team."""
    team_id: UUID
    player_id: UUID


# Repository interfaces
class TeamRepositoryInterface(ABC):
    """Interface for Team repository operations."""

    @abstractmethod
    def get_by_id(self, team_id: UUID) -> Optional[Team]:
        """Get team by ID."""
        pass

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Team]:
        """Get team by name."""
        pass

    @abstractmethod
    def save(self, team: Team) -> Team:
        """Create or update a team and its roster."""
        pass

    @abstractmethod
    def list_all(self) -> List[Team]:
        """Get all teams."""
        pass

    @abstractmethod
    def list_by_country(self, country: str) -> List[Team]:
        """Get teams from a country."""
        pass


def load_team(repository: TeamRepositoryInterface, team_id: UUID) -> Team:
    """Fetch a team or raise NotFoundError."""
    team = repository.get_by_id(team_id)
    if team is None:
        raise NotFoundError(f"Team not found with ID: {team_id}")
    return team


# Use Cases
class CreateTeamUseCase:
    """Use case for creating a new team."""

    def __init__(self, team_repository: TeamRepositoryInterface, clock: Optional[Clock] = None):
        self.team_repository = team_repository
        self.clock = clock

    def execute(self, request: CreateTeamRequest) -> TeamDTO:
        """Create a new team."""
        # Create domain entity
        team = Team(
            name=request.name,
            short_name=request.short_name,
            country=request.country,
            logo_url=request.logo_url,
            clock=self.clock,
        )

        # Validate team doesn't already exist
        existing = self.team_repository.get_by_name(team.name)
        if existing:
            raise DuplicateMemberError(f"Team with name '{request.name}' already exists")

        created = self.team_repository.save(team)
        logger.info("Created team %s (%s)", created.id, created.name)
        return TeamDTO.from_entity(created)


class GetTeamUseCase:
    """Use case for retrieving team information."""

    def __init__(self, team_repository: TeamRepositoryInterface):
        self.team_repository = team_repository

    def execute(self, team_id: UUID) -> TeamDTO:
        return TeamDTO.from_entity(load_team(self.team_repository, team_id))


class ListTeamsUseCase:
    """Use case for listing teams."""

    def __init__(self, team_repository: TeamRepositoryInterface):
        self.team_repository = team_repository

    def execute(self, country: Optional[str] = None) -> List[TeamSummaryDTO]:
        if country:
            teams = self.team_repository.list_by_country(country)
        else:
            teams = self.team_repository.list_all()
        return [TeamSummaryDTO.from_entity(team) for team in teams]


class UpdateTeamUseCase:
    """Use case for partially updating team information."""

    def __init__(self, team_repository: TeamRepositoryInterface):
        self.team_repository = team_repository

    def execute(self, request: UpdateTeamRequest) -> TeamDTO:
        team = load_team(self.team_repository, request.team_id)

        if request.name is not None and request.name != team.name:
            existing = self.team_repository.get_by_name(request.name)
            if existing is not None and existing != team:
                raise DuplicateMemberError(f"Team with name '{request.name}' already exists")

        team.update_info(
            name=request.name,
            short_name=request.short_name,
            country=request.country,
            logo_url=request.logo_url,
        )
        saved = self.team_repository.save(team)
        logger.info("Updated team %s", saved.id)
        return TeamDTO.from_entity(saved)


class AddPlayerToTeamUseCase:
    """Use case for adding a registered player to a team roster."""

    def __init__(
        self,
        team_repository: TeamRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
    ):
        self.team_repository = team_repository
        self.player_repository = player_repository

    def execute(self, request: RosterChangeRequest) -> TeamDTO:
        team = load_team(self.team_repository, request.team_id)
        player = load_player(self.player_repository, request.player_id)

        try:
            team.add_player(player)
        except DuplicateMemberError:
            logger.warning("Player %s already in team %s", player.id, team.id)
            raise

        saved = self.team_repository.save(team)
        logger.info("Added player %s to team %s", player.id, team.id)
        return TeamDTO.from_entity(saved)


class RemovePlayerFromTeamUseCase:
    """Use case for removing a player from a team roster."""

    def __init__(
        self,
        team_repository: TeamRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
    ):
        self.team_repository = team_repository
        self.player_repository = player_repository

    def execute(self, request: RosterChangeRequest) -> TeamDTO:
        team = load_team(self.team_repository, request.team_id)
        player = load_player(self.player_repository, request.player_id)

        try:
            team.remove_player(player)
        except NotFoundError:
            logger.warning("Player %s is not in team %s", player.id, team.id)
            raise

        saved = self.team_repository.save(team)
        logger.info("Removed player %s from team %s", player.id, team.id)
        return TeamDTO.from_entity(saved)
