"""Value objects for the domain layer.

Value objects are immutable objects that have no identity and are defined
by their attributes. They encapsulate validation logic and business rules.
"""

import re
from dataclasses import dataclass
from enum import Enum

from .exceptions import ValidationError


class Position(Enum):
    """Enumeration for player positions."""
    GOALKEEPER = "GK"
    DEFENDER = "DEF"
    MIDFIELDER = "MID"
    FORWARD = "FWD"

    @property
    def short_code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Get display name for position."""
        names = {
            Position.GOALKEEPER: "Goalkeeper",
            Position.DEFENDER: "Defender",
            Position.MIDFIELDER: "Midfielder",
            Position.FORWARD: "Forward",
        }
        return names[self]

    @classmethod
    def from_string(cls, position_str: str) -> 'Position':
        """Create Position from an enum name or a short code."""
        candidate = (position_str or "").upper().strip()

        for position in cls:
            if candidate in (position.name, position.value):
                return position

        raise ValidationError(f"Invalid player position: {position_str}")


class MatchStatus(Enum):
    """Lifecycle states of a match."""
    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    # Declared for forward compatibility; no operation transitions into it.
    POSTPONED = "POSTPONED"

    @classmethod
    def from_string(cls, status_str: str) -> 'MatchStatus':
        try:
            return cls[(status_str or "").upper().strip()]
        except KeyError:
            raise ValidationError(f"Invalid match status: {status_str}") from None


class MatchEventType(Enum):
    """Everything that can appear in a match ledger."""
    MATCH_START = "MATCH_START"
    MATCH_END = "MATCH_END"
    MATCH_CANCELLED = "MATCH_CANCELLED"
    GOAL = "GOAL"
    OWN_GOAL = "OWN_GOAL"
    YELLOW_CARD = "YELLOW_CARD"
    RED_CARD = "RED_CARD"
    SUBSTITUTION = "SUBSTITUTION"
    PENALTY_AWARDED = "PENALTY_AWARDED"
    PENALTY_MISSED = "PENALTY_MISSED"
    PENALTY_SAVED = "PENALTY_SAVED"
    CORNER = "CORNER"
    FREE_KICK = "FREE_KICK"
    INJURY = "INJURY"
    OFFSIDE = "OFFSIDE"
    RESCHEDULED = "RESCHEDULED"
    VENUE_CHANGE = "VENUE_CHANGE"

    @classmethod
    def from_string(cls, type_str: str) -> 'MatchEventType':
        try:
            return cls[(type_str or "").upper().strip()]
        except KeyError:
            raise ValidationError(f"Invalid match event type: {type_str}") from None

    def is_incident(self) -> bool:
        """Check if the type is an in-play incident without its own operation."""
        return self in INCIDENT_EVENT_TYPES


INCIDENT_EVENT_TYPES = frozenset({
    MatchEventType.YELLOW_CARD,
    MatchEventType.RED_CARD,
    MatchEventType.SUBSTITUTION,
    MatchEventType.PENALTY_AWARDED,
    MatchEventType.PENALTY_MISSED,
    MatchEventType.PENALTY_SAVED,
    MatchEventType.CORNER,
    MatchEventType.FREE_KICK,
    MatchEventType.INJURY,
    MatchEventType.OFFSIDE,
})


# ASCII digits only; int() alone would also accept "1_0", " 7 " and "+5"
JERSEY_NUMBER_PATTERN = re.compile(r"\A[0-9]{1,2}\Z")


def _require_text(value, label: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} cannot be empty")
    return value


@dataclass(frozen=True)
class PlayerName:
    """Player name value object with validation."""

    value: str

    def __post_init__(self):
        _require_text(self.value, "Player name")

        if len(self.value) < 2:
            raise ValidationError("Player name must be at least 2 characters long")

        if len(self.value) > 100:
            raise ValidationError("Player name cannot exceed 100 characters")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class JerseyNumber:
    """Jersey number kept in its textual form, encoding an integer in 1..99."""

    value: str

    def __post_init__(self):
        _require_text(self.value, "Jersey number")

        if not JERSEY_NUMBER_PATTERN.fullmatch(self.value):
            raise ValidationError("Jersey number must be a valid number")

        number = int(self.value)

        if number < 1 or number > 99:
            raise ValidationError("Jersey number must be between 1 and 99")

    @property
    def number(self) -> int:
        return int(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TeamName:
    """Team name value object with validation."""

    value: str

    def __post_init__(self):
        _require_text(self.value, "Team name")

        if len(self.value) < 3:
            raise ValidationError("Team name must be at least 3 characters long")

        if len(self.value) > 100:
            raise ValidationError("Team name cannot exceed 100 characters")

    def initials(self) -> str:
        """Get team initials."""
        words = self.value.split()
        return ''.join(word[0].upper() for word in words if word)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ShortName:
    """Two or three character team abbreviation."""

    value: str

    def __post_init__(self):
        _require_text(self.value, "Team short name")

        if len(self.value) < 2:
            raise ValidationError("Team short name must be at least 2 characters long")

        if len(self.value) > 3:
            raise ValidationError("Team short name cannot exceed 3 characters")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Venue:
    value: str

    def __post_init__(self):
        _require_text(self.value, "Venue")

    def __str__(self) -> str:
        return self.value
