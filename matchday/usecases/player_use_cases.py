"""Player-specific use cases for managing the player registry."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from matchday.domain.entities import Clock, Player
from matchday.domain.exceptions import NotFoundError
from matchday.domain.value_objects import Position

logger = logging.getLogger(__name__)


# DTOs for Player operations
@dataclass
class PlayerDTO:
    """Data Transfer Object for Player information."""
    id: UUID
    name: str
    date_of_birth: date
    age: int
    nationality: str
    position: str
    position_name: str
    jersey_number: str
    photo_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, player: Player) -> 'PlayerDTO':
        """Create DTO from domain entity."""
        return cls(
            id=player.id,
            name=player.name,
            date_of_birth=player.date_of_birth,
            age=player.age(),
            nationality=player.nationality,
            position=player.position.name,
            position_name=player.position.display_name,
            jersey_number=player.jersey_number,
            photo_url=player.photo_url,
            created_at=player.created_at,
            updated_at=player.updated_at,
        )


@dataclass
class CreatePlayerRequest:
    """Request to register a new player."""
    name: str
    date_of_birth: date
    nationality: str
    position: Position
    jersey_number: str
    photo_url: Optional[str] = None


@dataclass
class UpdatePlayerRequest:
    """Partial update; fields left as None are not changed."""
    player_id: UUID
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = None
    position: Optional[Position] = None
    jersey_number: Optional[str] = None


@dataclass
class SearchPlayersRequest:
    """Request to search players."""
    position: Optional[Position] = None
    nationality: Optional[str] = None


# Repository interfaces
class PlayerRepositoryInterface(ABC):
    """Interface for Player repository operations."""

    @abstractmethod
    def get_by_id(self, player_id: UUID) -> Optional[Player]:
        """Get player by ID."""
        pass

    @abstractmethod
    def save(self, player: Player) -> Player:
        """Create or update a player."""
        pass

    @abstractmethod
    def list_all(self) -> List[Player]:
        """Get all players."""
        pass

    @abstractmethod
    def list_by_position(self, position: Position) -> List[Player]:
        """Get players by position."""
        pass

    @abstractmethod
    def list_by_nationality(self, nationality: str) -> List[Player]:
        """Get players by nationality."""
        pass


def load_player(repository: PlayerRepositoryInterface, player_id: UUID) -> Player:
    """Fetch a player or raise NotFoundError."""
    player = repository.get_by_id(player_id)
    if player is None:
        raise NotFoundError(f"Player not found with ID: {player_id}")
    return player


# Use Cases
class CreatePlayerUseCase:
    """Use case for registering a new player."""

    def __init__(self, player_repository: PlayerRepositoryInterface, clock: Optional[Clock] = None):
        self.player_repository = player_repository
        self.clock = clock

    def execute(self, request: CreatePlayerRequest) -> PlayerDTO:
        player = Player(
            name=request.name,
            date_of_birth=request.date_of_birth,
            nationality=request.nationality,
            position=request.position,
            jersey_number=request.jersey_number,
            photo_url=request.photo_url,
            clock=self.clock,
        )

        saved = self.player_repository.save(player)
        logger.info("Created player %s (%s)", saved.id, saved.name)
        return PlayerDTO.from_entity(saved)


class GetPlayerUseCase:
    """Use case for retrieving player information."""

    def __init__(self, player_repository: PlayerRepositoryInterface):
        self.player_repository = player_repository

    def execute(self, player_id: UUID) -> PlayerDTO:
        return PlayerDTO.from_entity(load_player(self.player_repository, player_id))


class UpdatePlayerUseCase:
    """Use case for partially updating player information."""

    def __init__(self, player_repository: PlayerRepositoryInterface):
        self.player_repository = player_repository

    def execute(self, request: UpdatePlayerRequest) -> PlayerDTO:
        player = load_player(self.player_repository, request.player_id)
        player.update_info(
            name=request.name,
            date_of_birth=request.date_of_birth,
            nationality=request.nationality,
            position=request.position,
            jersey_number=request.jersey_number,
        )

        saved = self.player_repository.save(player)
        logger.info("Updated player %s", saved.id)
        return PlayerDTO.from_entity(saved)


class SetPlayerPhotoUseCase:
    """Use case for replacing a player's photo URL."""

    def __init__(self, player_repository: PlayerRepositoryInterface):
        self.player_repository = player_repository

    def execute(self, player_id: UUID, photo_url: Optional[str]) -> PlayerDTO:
        player = load_player(self.player_repository, player_id)
        player.set_photo_url(photo_url)
        return PlayerDTO.from_entity(self.player_repository.save(player))


class SearchPlayersUseCase:
    """Use case for searching players by position and nationality."""

    def __init__(self, player_repository: PlayerRepositoryInterface):
        self.player_repository = player_repository

    def execute(self, request: SearchPlayersRequest) -> List[PlayerDTO]:
        if request.position is not None:
            players = self.player_repository.list_by_position(request.position)
        elif request.nationality:
            players = self.player_repository.list_by_nationality(request.nationality)
        else:
            players = self.player_repository.list_all()

        # Apply the remaining filter when both were given
        if request.position is not None and request.nationality:
            wanted = request.nationality.lower()
            players = [p for p in players if (p.nationality or "").lower() == wanted]

        return [PlayerDTO.from_entity(p) for p in players]
