"""Match use cases: scheduling, lifecycle, scoring and the event ledger.

Every command follows the same cycle: load the aggregate through the
repository port, apply the intent through the MatchDomainService, save the
aggregate, then hand each new ledger entry to the injected publisher. The
domain itself never publishes anything.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from matchday.config import Config, settings as default_settings
from matchday.domain.entities import Clock, Match, Player
from matchday.domain.events import IncidentPayload, MatchEvent, payload_to_dict
from matchday.domain.exceptions import DomainError, NotFoundError, ValidationError
from matchday.domain.services import MatchDomainService
from matchday.domain.value_objects import MatchEventType, MatchStatus
from .player_use_cases import PlayerRepositoryInterface, load_player
from .team_use_cases import TeamRepositoryInterface, TeamSummaryDTO, load_team

logger = logging.getLogger(__name__)


# DTOs for Match operations
@dataclass
class MatchEventDTO:
    """Data Transfer Object for a ledger entry."""
    id: UUID
    match_id: UUID
    type: str
    description: str
    timestamp: datetime
    match_minute: int
    primary_player_id: Optional[UUID] = None
    primary_player_name: Optional[str] = None
    secondary_player_id: Optional[UUID] = None
    secondary_player_name: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None

    @classmethod
    def from_entity(cls, match_id: UUID, event: MatchEvent) -> 'MatchEventDTO':
        primary, secondary = event.primary_player, event.secondary_player
        return cls(
            id=event.id,
            match_id=match_id,
            type=event.type.value,
            description=event.description,
            timestamp=event.timestamp,
            match_minute=event.match_minute,
            primary_player_id=primary.id if primary is not None else None,
            primary_player_name=primary.name if primary is not None else None,
            secondary_player_id=secondary.id if secondary is not None else None,
            secondary_player_name=secondary.name if secondary is not None else None,
            payload=payload_to_dict(event.payload),
        )


@dataclass
class MatchDTO:
    """Data Transfer Object for Match information."""
    id: UUID
    home_team: TeamSummaryDTO
    away_team: TeamSummaryDTO
    venue: str
    start_time: datetime
    status: str
    home_score: int
    away_score: int
    result: str
    winner_id: Optional[UUID]
    is_draw: bool
    events: List[MatchEventDTO]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, match: Match) -> 'MatchDTO':
        """Create DTO from the aggregate."""
        winner = match.get_winner()
        return cls(
            id=match.id,
            home_team=TeamSummaryDTO.from_entity(match.home_team),
            away_team=TeamSummaryDTO.from_entity(match.away_team),
            venue=match.venue,
            start_time=match.start_time,
            status=match.status.value,
            home_score=match.home_score,
            away_score=match.away_score,
            result=match.get_result(),
            winner_id=winner.id if winner is not None else None,
            is_draw=match.is_draw(),
            events=[MatchEventDTO.from_entity(match.id, e) for e in match.events],
            created_at=match.created_at,
            updated_at=match.updated_at,
        )


@dataclass
class CreateMatchRequest:
    """Request to schedule a new match."""
    home_team_id: UUID
    away_team_id: UUID
    venue: str
    start_time: datetime


@dataclass
class ListMatchesRequest:
    """Request to list matches; filters combine."""
    status: Optional[MatchStatus] = None
    team_id: Optional[UUID] = None
    start_from: Optional[datetime] = None
    start_until: Optional[datetime] = None
    limit: Optional[int] = None
    offset: int = 0


@dataclass
class CancelMatchRequest:
    match_id: UUID
    reason: Optional[str] = None


@dataclass
class UpdateScoreRequest:
    """Request to correct the score of a live match."""
    match_id: UUID
    home_score: int
    away_score: int


@dataclass
class AddGoalRequest:
    """Request to add a goal for one side."""
    match_id: UUID
    is_home_team: bool
    scorer_id: Optional[UUID] = None
    assistant_id: Optional[UUID] = None


@dataclass
class RescheduleMatchRequest:
    match_id: UUID
    new_start_time: datetime


@dataclass
class ChangeVenueRequest:
    match_id: UUID
    new_venue: str


@dataclass
class RecordMatchEventRequest:
    """A match event submitted over the real-time channel."""
    match_id: UUID
    event_type: MatchEventType
    description: str = ""
    is_home_team: Optional[bool] = None
    primary_player_id: Optional[UUID] = None
    secondary_player_id: Optional[UUID] = None
    submitted_by: Optional[str] = None


@dataclass
class ListMatchesResult:
    """Result of listing matches."""
    matches: List[MatchDTO] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False


# Repository interfaces
class MatchRepositoryInterface(ABC):
    """Interface for Match repository operations."""

    @abstractmethod
    def get_by_id(self, match_id: UUID) -> Optional[Match]:
        """Get match by ID."""
        pass

    @abstractmethod
    def save(self, match: Match) -> Match:
        """Persist the aggregate, appending ledger entries not yet stored."""
        pass

    @abstractmethod
    def list_all(self) -> List[Match]:
        """Get all matches ordered by start time."""
        pass

    @abstractmethod
    def list_by_status(self, status: MatchStatus) -> List[Match]:
        """Get matches with the given status."""
        pass

    @abstractmethod
    def list_by_team(self, team_id: UUID) -> List[Match]:
        """Get matches where the team plays home or away."""
        pass

    @abstractmethod
    def list_by_start_time_between(self, start: datetime, end: datetime) -> List[Match]:
        """Get matches starting within [start, end]."""
        pass


class DomainEventPublisher(ABC):
    """Outbound port for broadcasting match events to subscribers."""

    @abstractmethod
    def publish(self, event_type: str, payload: Any) -> None:
        """Publish one event."""
        pass


def topic_for(event: MatchEvent) -> str:
    """Publication topic of a ledger entry, e.g. ``match.goal``."""
    return f"match.{event.type.value.lower()}"


def load_match(repository: MatchRepositoryInterface, match_id: UUID) -> Match:
    """Fetch a match or raise NotFoundError."""
    match = repository.get_by_id(match_id)
    if match is None:
        raise NotFoundError(f"Match not found with ID: {match_id}")
    return match


# Use Cases
class CreateMatchUseCase:
    """Use case for scheduling a match between two registered teams."""

    def __init__(
        self,
        match_repository: MatchRepositoryInterface,
        team_repository: TeamRepositoryInterface,
        clock: Optional[Clock] = None,
    ):
        self.match_repository = match_repository
        self.team_repository = team_repository
        self.clock = clock

    def execute(self, request: CreateMatchRequest) -> MatchDTO:
        home_team = load_team(self.team_repository, request.home_team_id)
        away_team = load_team(self.team_repository, request.away_team_id)

        match = Match(
            home_team=home_team,
            away_team=away_team,
            venue=request.venue,
            start_time=request.start_time,
            clock=self.clock,
        )
        saved = self.match_repository.save(match)
        logger.info("Scheduled match %s: %s", saved.id, saved.get_result())
        return MatchDTO.from_entity(saved)


class GetMatchUseCase:
    """Use case for retrieving a match."""

    def __init__(self, match_repository: MatchRepositoryInterface):
        self.match_repository = match_repository

    def execute(self, match_id: UUID) -> MatchDTO:
        return MatchDTO.from_entity(load_match(self.match_repository, match_id))


class GetMatchEventsUseCase:
    """Use case for reading a match ledger in order."""

    def __init__(self, match_repository: MatchRepositoryInterface):
        self.match_repository = match_repository

    def execute(self, match_id: UUID) -> List[MatchEventDTO]:
        match = load_match(self.match_repository, match_id)
        return [MatchEventDTO.from_entity(match.id, e) for e in match.events]


class ListMatchesUseCase:
    """Use case for listing matches by status, team and time window."""

    def __init__(self, match_repository: MatchRepositoryInterface, settings: Optional[Config] = None):
        self.match_repository = match_repository
        self.settings = settings or default_settings

    def execute(self, request: ListMatchesRequest) -> ListMatchesResult:
        if (request.start_from is None) != (request.start_until is None):
            raise ValidationError("Both ends of the time window must be given")
        if request.start_from is not None and request.start_from > request.start_until:
            raise ValidationError("Time window start must not be after its end")

        if request.team_id is not None:
            matches = self.match_repository.list_by_team(request.team_id)
        elif request.status is not None:
            matches = self.match_repository.list_by_status(request.status)
        elif request.start_from is not None:
            matches = self.match_repository.list_by_start_time_between(
                request.start_from, request.start_until
            )
        else:
            matches = self.match_repository.list_all()

        # Apply the filters the repository query did not cover
        if request.status is not None:
            matches = [m for m in matches if m.status == request.status]
        if request.start_from is not None:
            matches = [
                m for m in matches
                if request.start_from <= m.start_time <= request.start_until
            ]

        limit = self.settings.clamp_page_size(request.limit)
        offset = max(request.offset, 0)
        page = matches[offset:offset + limit]

        return ListMatchesResult(
            matches=[MatchDTO.from_entity(m) for m in page],
            total_count=len(matches),
            has_more=offset + len(page) < len(matches),
        )


class MatchCommandUseCase:
    """Shared load / apply / save / publish cycle for match commands."""

    action = "update"

    def __init__(
        self,
        match_repository: MatchRepositoryInterface,
        publisher: Optional[DomainEventPublisher] = None,
        domain_service: Optional[MatchDomainService] = None,
        settings: Optional[Config] = None,
    ):
        self.match_repository = match_repository
        self.publisher = publisher
        self.domain_service = domain_service or MatchDomainService()
        self.settings = settings or default_settings

    def _run(self, match_id: UUID, apply: Callable[[Match], Match]) -> Match:
        match = load_match(self.match_repository, match_id)
        ledger_size = len(match.events)

        try:
            match = apply(match)
        except DomainError as e:
            logger.warning("Rejected %s on match %s: %s", self.action, match_id, e)
            raise

        saved = self.match_repository.save(match)
        logger.info("Applied %s on match %s (%s)", self.action, saved.id, saved.status.value)
        self._publish(saved, saved.events[ledger_size:])
        return saved

    def _publish(self, match: Match, new_events) -> None:
        if self.publisher is None or not self.settings.EVENT_PUBLISHING_ENABLED:
            return
        for event in new_events:
            self.publisher.publish(topic_for(event), MatchEventDTO.from_entity(match.id, event))


class StartMatchUseCase(MatchCommandUseCase):
    action = "start"

    def execute(self, match_id: UUID) -> MatchDTO:
        return MatchDTO.from_entity(self._run(match_id, self.domain_service.start_match))


class CompleteMatchUseCase(MatchCommandUseCase):
    action = "complete"

    def execute(self, match_id: UUID) -> MatchDTO:
        return MatchDTO.from_entity(self._run(match_id, self.domain_service.complete_match))


class CancelMatchUseCase(MatchCommandUseCase):
    action = "cancel"

    def execute(self, request: CancelMatchRequest) -> MatchDTO:
        saved = self._run(
            request.match_id,
            lambda match: self.domain_service.cancel_match(match, request.reason),
        )
        return MatchDTO.from_entity(saved)


class UpdateScoreUseCase(MatchCommandUseCase):
    """Absolute score correction; writes no ledger entry."""

    action = "score update"

    def execute(self, request: UpdateScoreRequest) -> MatchDTO:
        saved = self._run(
            request.match_id,
            lambda match: self.domain_service.update_score(
                match, request.home_score, request.away_score
            ),
        )
        return MatchDTO.from_entity(saved)


class RescheduleMatchUseCase(MatchCommandUseCase):
    action = "reschedule"

    def execute(self, request: RescheduleMatchRequest) -> MatchDTO:
        saved = self._run(
            request.match_id,
            lambda match: self.domain_service.reschedule_match(match, request.new_start_time),
        )
        return MatchDTO.from_entity(saved)


class ChangeVenueUseCase(MatchCommandUseCase):
    action = "venue change"

    def execute(self, request: ChangeVenueRequest) -> MatchDTO:
        saved = self._run(
            request.match_id,
            lambda match: self.domain_service.change_venue(match, request.new_venue),
        )
        return MatchDTO.from_entity(saved)


class AddGoalUseCase(MatchCommandUseCase):
    """Use case for adding a goal with scorer and optional assistant."""

    action = "goal"

    def __init__(
        self,
        match_repository: MatchRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
        publisher: Optional[DomainEventPublisher] = None,
        domain_service: Optional[MatchDomainService] = None,
        settings: Optional[Config] = None,
    ):
        super().__init__(match_repository, publisher, domain_service, settings)
        self.player_repository = player_repository

    def _optional_player(self, player_id: Optional[UUID]) -> Optional[Player]:
        if player_id is None:
            return None
        return load_player(self.player_repository, player_id)

    def execute(self, request: AddGoalRequest) -> MatchDTO:
        scorer = self._optional_player(request.scorer_id)
        assistant = self._optional_player(request.assistant_id)

        saved = self._run(
            request.match_id,
            lambda match: self.domain_service.add_goal(
                match, scorer, assistant, request.is_home_team
            ),
        )
        return MatchDTO.from_entity(saved)


class RecordMatchEventUseCase(AddGoalUseCase):
    """Apply an event submitted over the real-time channel.

    Lifecycle events drive the state machine, goals go through the
    increment path so the score and the ledger move together, and
    incidents are recorded as they are.
    """

    action = "event submission"

    def execute(self, request: RecordMatchEventRequest) -> MatchEventDTO:
        event_type = request.event_type
        primary = self._optional_player(request.primary_player_id)
        secondary = self._optional_player(request.secondary_player_id)
        service = self.domain_service

        if event_type in (MatchEventType.GOAL, MatchEventType.OWN_GOAL) and request.is_home_team is None:
            raise ValidationError(f"{event_type.value} events must say which side scored")

        if event_type == MatchEventType.MATCH_START:
            apply = service.start_match
        elif event_type == MatchEventType.MATCH_END:
            apply = service.complete_match
        elif event_type == MatchEventType.MATCH_CANCELLED:
            def apply(match):
                return service.cancel_match(match, request.description)
        elif event_type == MatchEventType.GOAL:
            def apply(match):
                return service.add_goal(match, primary, secondary, request.is_home_team)
        elif event_type == MatchEventType.OWN_GOAL:
            def apply(match):
                return service.add_own_goal(match, primary, request.is_home_team)
        elif event_type.is_incident():
            def apply(match):
                return service.add_event(
                    match,
                    event_type,
                    request.description,
                    primary,
                    secondary,
                    IncidentPayload(is_home_team=request.is_home_team),
                )
        else:
            raise ValidationError(
                f"{event_type.value} events cannot be submitted; use the dedicated operation"
            )

        saved = self._run(request.match_id, apply)
        if request.submitted_by:
            logger.info("Event %s on match %s submitted by %s",
                        event_type.value, saved.id, request.submitted_by)
        return MatchEventDTO.from_entity(saved.id, saved.events[-1])
