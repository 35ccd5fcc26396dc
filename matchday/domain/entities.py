"""Domain entities representing core business objects.

Entities have identity and lifecycle. They encapsulate business rules
and maintain invariants within their boundaries. Equality is by identity:
two entities are equal when their ids are equal.

No entity performs I/O. Wall-clock time is taken from an injectable ``clock``
callable so that callers (and tests) control what "now" means.
"""

from datetime import date, datetime
from typing import Callable, List, Optional, Tuple
from uuid import UUID, uuid4

from .events import (
    CancellationPayload,
    FinalScorePayload,
    GoalPayload,
    IncidentPayload,
    MatchEvent,
    OwnGoalPayload,
    ReschedulePayload,
    VenueChangePayload,
)
from .exceptions import (
    DuplicateMemberError,
    IllegalStateError,
    NotFoundError,
    ValidationError,
)
from .value_objects import (
    JerseyNumber,
    MatchEventType,
    MatchStatus,
    PlayerName,
    Position,
    ShortName,
    TeamName,
    Venue,
)

Clock = Callable[[], datetime]

MINIMUM_PLAYER_AGE = 16


def _system_clock() -> datetime:
    return datetime.now()


def calculate_age(date_of_birth: date, today: date) -> int:
    """Whole years between date_of_birth and today."""
    age = today.year - date_of_birth.year

    # Adjust age if birthday hasn't occurred yet this year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1

    return age


class Entity:
    """Base class giving identity equality to domain entities."""

    id: UUID

    def __eq__(self, other) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class Player(Entity):
    """Player domain entity with roster attributes."""

    def __init__(
        self,
        name: str,
        date_of_birth: date,
        nationality: str,
        position: Position,
        jersey_number: str,
        photo_url: Optional[str] = None,
        id: Optional[UUID] = None,
        clock: Optional[Clock] = None,
    ):
        self._clock = clock or _system_clock
        self._name = PlayerName(name)
        self._date_of_birth = self._validate_date_of_birth(date_of_birth)
        self._position = self._validate_position(position)
        self._jersey_number = JerseyNumber(jersey_number)
        self.id = id or uuid4()
        self.nationality = nationality
        self.photo_url = photo_url
        now = self._clock()
        self.created_at = now
        self.updated_at = now

    @classmethod
    def restore(
        cls,
        id: UUID,
        name: str,
        date_of_birth: date,
        nationality: str,
        position: Position,
        jersey_number: str,
        photo_url: Optional[str],
        created_at: datetime,
        updated_at: datetime,
        clock: Optional[Clock] = None,
    ) -> 'Player':
        """Rebuild a persisted player without creation-time checks."""
        player = cls.__new__(cls)
        player._clock = clock or _system_clock
        player._name = PlayerName(name)
        player._date_of_birth = date_of_birth
        player._position = position
        player._jersey_number = JerseyNumber(jersey_number)
        player.id = id
        player.nationality = nationality
        player.photo_url = photo_url
        player.created_at = created_at
        player.updated_at = updated_at
        return player

    @property
    def name(self) -> str:
        return self._name.value

    @property
    def date_of_birth(self) -> date:
        return self._date_of_birth

    @property
    def position(self) -> Position:
        return self._position

    @property
    def jersey_number(self) -> str:
        return self._jersey_number.value

    def age(self, today: Optional[date] = None) -> int:
        """Calculate player's age in whole years."""
        return calculate_age(self._date_of_birth, today or self._clock().date())

    def update_info(
        self,
        name: Optional[str] = None,
        date_of_birth: Optional[date] = None,
        nationality: Optional[str] = None,
        position: Optional[Position] = None,
        jersey_number: Optional[str] = None,
    ) -> None:
        """Apply a partial update; None means "leave unchanged".

        Every supplied field is validated before anything is assigned, so a
        rejected update leaves the player untouched.
        """
        new_name = PlayerName(name) if name is not None else self._name
        new_dob = (
            self._validate_date_of_birth(date_of_birth)
            if date_of_birth is not None else self._date_of_birth
        )
        new_position = (
            self._validate_position(position) if position is not None else self._position
        )
        new_jersey = (
            JerseyNumber(jersey_number) if jersey_number is not None else self._jersey_number
        )

        self._name = new_name
        self._date_of_birth = new_dob
        self._position = new_position
        self._jersey_number = new_jersey
        if nationality is not None:
            self.nationality = nationality
        self.updated_at = self._clock()

    def set_photo_url(self, photo_url: Optional[str]) -> None:
        """Set player photo URL."""
        self.photo_url = photo_url
        self.updated_at = self._clock()

    def _validate_date_of_birth(self, date_of_birth) -> date:
        if date_of_birth is None:
            raise ValidationError("Date of birth cannot be null")

        if isinstance(date_of_birth, datetime):
            date_of_birth = date_of_birth.date()
        elif not isinstance(date_of_birth, date):
            raise ValidationError("Date of birth must be a date")

        today = self._clock().date()
        if date_of_birth > today:
            raise ValidationError("Date of birth cannot be in the future")

        if calculate_age(date_of_birth, today) < MINIMUM_PLAYER_AGE:
            raise ValidationError(
                f"Player must be at least {MINIMUM_PLAYER_AGE} years old"
            )

        return date_of_birth

    @staticmethod
    def _validate_position(position) -> Position:
        if isinstance(position, Position):
            return position
        if isinstance(position, str):
            return Position.from_string(position)
        raise ValidationError("Player position must be specified")

    def __repr__(self) -> str:
        return f"<Player id={self.id} name={self.name} #{self.jersey_number}>"


class Team(Entity):
    """Team domain entity owning an ordered roster of players."""

    def __init__(
        self,
        name: str,
        short_name: str,
        country: str,
        logo_url: Optional[str] = None,
        id: Optional[UUID] = None,
        clock: Optional[Clock] = None,
    ):
        self._clock = clock or _system_clock
        self._name = TeamName(name)
        self._short_name = ShortName(short_name)
        self.id = id or uuid4()
        self.country = country
        self.logo_url = logo_url
        self._players: List[Player] = []
        now = self._clock()
        self.created_at = now
        self.updated_at = now

    @classmethod
    def restore(
        cls,
        id: UUID,
        name: str,
        short_name: str,
        country: str,
        logo_url: Optional[str],
        players: List[Player],
        created_at: datetime,
        updated_at: datetime,
        clock: Optional[Clock] = None,
    ) -> 'Team':
        """Rebuild a persisted team and its roster."""
        team = cls.__new__(cls)
        team._clock = clock or _system_clock
        team._name = TeamName(name)
        team._short_name = ShortName(short_name)
        team.id = id
        team.country = country
        team.logo_url = logo_url
        team._players = list(players)
        team.created_at = created_at
        team.updated_at = updated_at
        return team

    @property
    def name(self) -> str:
        return self._name.value

    @property
    def short_name(self) -> str:
        return self._short_name.value

    @property
    def players(self) -> Tuple[Player, ...]:
        return tuple(self._players)

    def add_player(self, player: Player) -> None:
        """Append a player to the roster."""
        if player is None:
            raise ValidationError("Player cannot be null")

        if self.has_player(player):
            raise DuplicateMemberError(
                f"Player {player.name} is already in team {self.name}"
            )

        self._players.append(player)
        self.updated_at = self._clock()

    def remove_player(self, player: Player) -> None:
        """Remove a player from the roster."""
        if player is None:
            raise ValidationError("Player cannot be null")

        if not self.has_player(player):
            raise NotFoundError(f"Player {player.name} is not in team {self.name}")

        self._players.remove(player)
        self.updated_at = self._clock()

    def update_info(
        self,
        name: Optional[str] = None,
        short_name: Optional[str] = None,
        country: Optional[str] = None,
        logo_url: Optional[str] = None,
    ) -> None:
        """Apply a partial update; a rejected update changes nothing."""
        new_name = TeamName(name) if name is not None else self._name
        new_short_name = ShortName(short_name) if short_name is not None else self._short_name

        self._name = new_name
        self._short_name = new_short_name
        if country is not None:
            self.country = country
        if logo_url is not None:
            self.logo_url = logo_url
        self.updated_at = self._clock()

    def squad_size(self) -> int:
        return len(self._players)

    def has_player(self, player: Optional[Player]) -> bool:
        return player is not None and player in self._players

    def has_player_with_id(self, player_id: Optional[UUID]) -> bool:
        if player_id is None:
            return False
        return any(player.id == player_id for player in self._players)

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name} squad={self.squad_size()}>"


class Match(Entity):
    """Match aggregate root.

    A match owns its status, score and ledger of events. Every mutation goes
    through a method of this class; each method checks its preconditions
    before touching any field, so a failed call leaves the match unchanged.

    State machine::

        SCHEDULED --start--> LIVE --complete--> COMPLETED
        SCHEDULED --cancel--> CANCELLED
        LIVE ------cancel--> CANCELLED

    ``version`` is a concurrency token owned by the persistence adapters; the
    domain never reads or changes it.
    """

    def __init__(
        self,
        home_team: Team,
        away_team: Team,
        venue: str,
        start_time: datetime,
        id: Optional[UUID] = None,
        clock: Optional[Clock] = None,
    ):
        self._clock = clock or _system_clock
        self._validate_teams(home_team, away_team)
        self._venue = Venue(venue)
        self._start_time = self._validate_start_time(start_time)
        self.id = id or uuid4()
        self._home_team = home_team
        self._away_team = away_team
        self._status = MatchStatus.SCHEDULED
        self._home_score = 0
        self._away_score = 0
        self._kicked_off_at: Optional[datetime] = None
        self._events: List[MatchEvent] = []
        now = self._clock()
        self.created_at = now
        self.updated_at = now
        self.version = 0

    @classmethod
    def restore(
        cls,
        id: UUID,
        home_team: Team,
        away_team: Team,
        venue: str,
        start_time: datetime,
        status: MatchStatus,
        home_score: int,
        away_score: int,
        events: List[MatchEvent],
        created_at: datetime,
        updated_at: datetime,
        kicked_off_at: Optional[datetime] = None,
        version: int = 0,
        clock: Optional[Clock] = None,
    ) -> 'Match':
        """Rebuild a persisted match; the start time may lie in the past."""
        match = cls.__new__(cls)
        match._clock = clock or _system_clock
        match._validate_teams(home_team, away_team)
        match._venue = Venue(venue)
        match._start_time = start_time
        match.id = id
        match._home_team = home_team
        match._away_team = away_team
        match._status = status
        match._home_score = home_score
        match._away_score = away_score
        match._kicked_off_at = kicked_off_at
        match._events = list(events)
        match.created_at = created_at
        match.updated_at = updated_at
        match.version = version
        return match

    # Read accessors

    @property
    def home_team(self) -> Team:
        return self._home_team

    @property
    def away_team(self) -> Team:
        return self._away_team

    @property
    def venue(self) -> str:
        return self._venue.value

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def status(self) -> MatchStatus:
        return self._status

    @property
    def home_score(self) -> int:
        return self._home_score

    @property
    def away_score(self) -> int:
        return self._away_score

    @property
    def kicked_off_at(self) -> Optional[datetime]:
        return self._kicked_off_at

    @property
    def events(self) -> Tuple[MatchEvent, ...]:
        return tuple(self._events)

    @property
    def is_finished(self) -> bool:
        return self._status in (MatchStatus.COMPLETED, MatchStatus.CANCELLED)

    # Lifecycle

    def start(self) -> None:
        """Start the match; only a SCHEDULED match can kick off."""
        self._require_status(
            MatchStatus.SCHEDULED, "Match can only be started when in SCHEDULED state"
        )

        now = self._clock()
        self._status = MatchStatus.LIVE
        self._kicked_off_at = now
        self._append_event(now, MatchEventType.MATCH_START, "Match started")

    def complete(self) -> None:
        """Complete the match; only a LIVE match can finish."""
        self._require_status(
            MatchStatus.LIVE, "Match can only be completed when in LIVE state"
        )

        now = self._clock()
        self._status = MatchStatus.COMPLETED
        self._append_event(
            now,
            MatchEventType.MATCH_END,
            "Match completed",
            payload=FinalScorePayload(self._home_score, self._away_score),
        )

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel the match unless it is already completed or cancelled."""
        if self._status in (MatchStatus.COMPLETED, MatchStatus.CANCELLED):
            raise IllegalStateError(
                "Match cannot be cancelled when already completed or cancelled"
            )

        if reason is not None and not isinstance(reason, str):
            raise ValidationError("Cancellation reason must be text")

        description = reason.strip() if reason and reason.strip() else "Match cancelled"
        now = self._clock()
        self._status = MatchStatus.CANCELLED
        self._append_event(
            now,
            MatchEventType.MATCH_CANCELLED,
            description,
            payload=CancellationPayload(description),
        )

    def reschedule(self, new_start_time: datetime) -> None:
        """Move kickoff to a new future time."""
        self._require_status(
            MatchStatus.SCHEDULED, "Match can only be rescheduled when in SCHEDULED state"
        )
        new_start_time = self._validate_start_time(new_start_time)

        now = self._clock()
        previous = self._start_time
        self._start_time = new_start_time
        self._append_event(
            now,
            MatchEventType.RESCHEDULED,
            f"Match rescheduled to {new_start_time.isoformat()}",
            payload=ReschedulePayload(previous, new_start_time),
        )

    def change_venue(self, new_venue: str) -> None:
        """Change the venue of a match that has not started."""
        self._require_status(
            MatchStatus.SCHEDULED,
            "Venue can only be changed when match is in SCHEDULED state",
        )
        venue = Venue(new_venue)

        now = self._clock()
        previous = self._venue
        self._venue = venue
        self._append_event(
            now,
            MatchEventType.VENUE_CHANGE,
            f"Venue changed from {previous} to {venue}",
            payload=VenueChangePayload(previous.value, venue.value),
        )

    # Scoring

    def update_score(self, home_score: int, away_score: int) -> None:
        """Set an absolute score; used for corrections while LIVE.

        The new score may not lower either side and must differ from the
        current one. No ledger entry is written.
        """
        self._require_status(
            MatchStatus.LIVE, "Score can only be updated when match is LIVE"
        )

        for score in (home_score, away_score):
            if isinstance(score, bool) or not isinstance(score, int):
                raise ValidationError("Scores must be whole numbers")
            if score < 0:
                raise ValidationError("Scores cannot be negative")

        if home_score < self._home_score or away_score < self._away_score:
            raise ValidationError(
                f"Score cannot decrease from {self._home_score}-{self._away_score} "
                f"to {home_score}-{away_score}"
            )

        if home_score == self._home_score and away_score == self._away_score:
            raise ValidationError(
                f"Score is already {home_score}-{away_score}"
            )

        self._home_score = home_score
        self._away_score = away_score
        self.updated_at = self._clock()

    def add_home_goal(self, scorer: Optional[Player], assistant: Optional[Player] = None) -> None:
        """Add one goal for the home team."""
        self._add_goal(True, scorer, assistant)

    def add_away_goal(self, scorer: Optional[Player], assistant: Optional[Player] = None) -> None:
        """Add one goal for the away team."""
        self._add_goal(False, scorer, assistant)

    def add_own_goal(self, player: Optional[Player], for_home_team: bool) -> None:
        """Credit one goal to ``for_home_team``'s side, conceded by ``player``."""
        self._require_status(
            MatchStatus.LIVE, "Goals can only be added when match is LIVE"
        )

        now = self._clock()
        if for_home_team:
            self._home_score += 1
        else:
            self._away_score += 1

        who = f" by {player.name}" if player is not None else ""
        self._append_event(
            now,
            MatchEventType.OWN_GOAL,
            f"Own goal{who}",
            primary_player=player,
            payload=OwnGoalPayload(
                is_home_team=bool(for_home_team),
                player_id=player.id if player is not None else None,
            ),
        )

    def record_event(
        self,
        event_type: MatchEventType,
        description: str,
        primary_player: Optional[Player] = None,
        secondary_player: Optional[Player] = None,
        payload: Optional[IncidentPayload] = None,
    ) -> MatchEvent:
        """Record an in-play incident such as a card or a substitution.

        Lifecycle and scoring events have dedicated operations and are
        rejected here.
        """
        if not isinstance(event_type, MatchEventType) or not event_type.is_incident():
            raise ValidationError(
                f"{getattr(event_type, 'value', event_type)} cannot be recorded directly"
            )
        self._require_status(
            MatchStatus.LIVE, "Match events can only be recorded when match is LIVE"
        )
        if payload is not None and not isinstance(payload, IncidentPayload):
            raise ValidationError(f"{event_type.value} events require an IncidentPayload")

        text = description.strip() if description and description.strip() else (
            event_type.value.replace("_", " ").capitalize()
        )
        return self._append_event(
            self._clock(),
            event_type,
            text,
            primary_player=primary_player,
            secondary_player=secondary_player,
            payload=payload or IncidentPayload(),
        )

    # Queries

    def get_result(self) -> str:
        """Render the score line, e.g. ``Home 2 - 1 Away``."""
        return (
            f"{self._home_team.name} {self._home_score} - "
            f"{self._away_score} {self._away_team.name}"
        )

    def get_winner(self) -> Optional[Team]:
        """Return the winning team of a completed match, None otherwise."""
        if self._status != MatchStatus.COMPLETED:
            return None

        if self._home_score > self._away_score:
            return self._home_team
        if self._away_score > self._home_score:
            return self._away_team
        return None

    def is_draw(self) -> bool:
        return self._status == MatchStatus.COMPLETED and self._home_score == self._away_score

    def involves(self, team_or_id) -> bool:
        """Check whether a team (or team id) plays in this match."""
        team_id = getattr(team_or_id, "id", team_or_id)
        return team_id in (self._home_team.id, self._away_team.id)

    def goals_for(self, team_or_id) -> int:
        """Goals scored by one of the two sides."""
        team_id = getattr(team_or_id, "id", team_or_id)
        if team_id == self._home_team.id:
            return self._home_score
        if team_id == self._away_team.id:
            return self._away_score
        raise ValidationError(f"Team {team_id} does not play in this match")

    def minute_at(self, moment: datetime) -> int:
        """Whole minutes elapsed since kickoff, never negative.

        Before kickoff the scheduled start time is the reference.
        """
        reference = self._kicked_off_at or self._start_time
        elapsed = (moment - reference).total_seconds()
        return max(0, int(elapsed // 60))

    # Internals

    def _add_goal(self, home: bool, scorer: Optional[Player], assistant: Optional[Player]) -> None:
        self._require_status(
            MatchStatus.LIVE, "Goals can only be added when match is LIVE"
        )
        if scorer is not None and assistant is not None and scorer == assistant:
            raise ValidationError("A player cannot assist their own goal")

        now = self._clock()
        if home:
            self._home_score += 1
        else:
            self._away_score += 1

        if scorer is not None:
            description = f"Goal scored by {scorer.name}"
        else:
            side = self._home_team if home else self._away_team
            description = f"Goal for {side.name}"

        self._append_event(
            now,
            MatchEventType.GOAL,
            description,
            primary_player=scorer,
            secondary_player=assistant,
            payload=GoalPayload(
                is_home_team=home,
                scorer_id=scorer.id if scorer is not None else None,
                assistant_id=assistant.id if assistant is not None else None,
            ),
        )

    def _append_event(
        self,
        now: datetime,
        event_type: MatchEventType,
        description: str,
        primary_player: Optional[Player] = None,
        secondary_player: Optional[Player] = None,
        payload=None,
    ) -> MatchEvent:
        event = MatchEvent(
            id=uuid4(),
            type=event_type,
            description=description,
            timestamp=now,
            match_minute=self.minute_at(now),
            primary_player=primary_player,
            secondary_player=secondary_player,
            payload=payload,
        )
        self._events.append(event)
        self.updated_at = now
        return event

    def _require_status(self, expected: MatchStatus, message: str) -> None:
        if self._status != expected:
            raise IllegalStateError(f"{message} (current: {self._status.value})")

    @staticmethod
    def _validate_teams(home_team: Team, away_team: Team) -> None:
        if home_team is None or away_team is None:
            raise ValidationError("Both home and away teams must be specified")

        if home_team == away_team:
            raise ValidationError("Home and away teams cannot be the same")

    def _validate_start_time(self, start_time) -> datetime:
        if start_time is None:
            raise ValidationError("Start time must be specified")

        if not isinstance(start_time, datetime):
            raise ValidationError("Start time must be a datetime")

        if start_time.tzinfo is not None:
            raise ValidationError("Start time must be a naive local datetime")

        if start_time < self._clock():
            raise ValidationError("Start time must be in the future")

        return start_time

    def __repr__(self) -> str:
        return f"<Match id={self.id} {self.get_result()} status={self._status.value}>"
