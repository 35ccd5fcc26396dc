"""Match ledger entries and their typed payloads.

A MatchEvent is immutable once created. Each event type admits exactly one
payload class, so event-specific data (which side scored, who was involved,
what changed) travels as typed fields rather than as string metadata.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional, Type
from uuid import UUID

from .exceptions import ValidationError
from .value_objects import MatchEventType


@dataclass(frozen=True)
class GoalPayload:
    is_home_team: bool
    scorer_id: Optional[UUID] = None
    assistant_id: Optional[UUID] = None


@dataclass(frozen=True)
class OwnGoalPayload:
    """Own goal; ``is_home_team`` names the side that was credited."""
    is_home_team: bool
    player_id: Optional[UUID] = None


@dataclass(frozen=True)
class CancellationPayload:
    reason: str


@dataclass(frozen=True)
class ReschedulePayload:
    previous_start_time: datetime
    new_start_time: datetime


@dataclass(frozen=True)
class VenueChangePayload:
    previous_venue: str
    new_venue: str


@dataclass(frozen=True)
class FinalScorePayload:
    home_score: int
    away_score: int


@dataclass(frozen=True)
class IncidentPayload:
    """Cards, substitutions, set pieces and other in-play incidents."""
    is_home_team: Optional[bool] = None


PAYLOAD_TYPES: Dict[MatchEventType, Optional[type]] = {
    MatchEventType.MATCH_START: None,
    MatchEventType.MATCH_END: FinalScorePayload,
    MatchEventType.MATCH_CANCELLED: CancellationPayload,
    MatchEventType.GOAL: GoalPayload,
    MatchEventType.OWN_GOAL: OwnGoalPayload,
    MatchEventType.RESCHEDULED: ReschedulePayload,
    MatchEventType.VENUE_CHANGE: VenueChangePayload,
}

_PAYLOAD_CLASSES = {
    cls.__name__: cls
    for cls in (
        GoalPayload, OwnGoalPayload, CancellationPayload, ReschedulePayload,
        VenueChangePayload, FinalScorePayload, IncidentPayload,
    )
}


def payload_type_for(event_type: MatchEventType) -> Optional[type]:
    """Get the payload class an event type carries (None for no payload)."""
    if event_type.is_incident():
        return IncidentPayload
    return PAYLOAD_TYPES[event_type]


def payload_to_dict(payload) -> Optional[Dict[str, Any]]:
    """Flatten a payload into JSON-friendly primitives, tagged by class name."""
    if payload is None:
        return None

    data: Dict[str, Any] = {"kind": type(payload).__name__}
    for field in fields(payload):
        value = getattr(payload, field.name)
        if isinstance(value, UUID):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        data[field.name] = value
    return data


def payload_from_dict(data: Optional[Dict[str, Any]]):
    """Rebuild a payload produced by payload_to_dict."""
    if not data:
        return None

    kind = data.get("kind")
    payload_cls: Type = _PAYLOAD_CLASSES.get(kind)
    if payload_cls is None:
        raise ValidationError(f"Unknown event payload kind: {kind}")

    kwargs = {}
    for field in fields(payload_cls):
        if field.name not in data:
            continue
        value = data[field.name]
        if value is not None and field.name.endswith("_id"):
            value = UUID(value)
        elif value is not None and field.name.endswith("_time"):
            value = datetime.fromisoformat(value)
        kwargs[field.name] = value
    return payload_cls(**kwargs)


@dataclass(frozen=True)
class MatchEvent:
    """A single immutable entry of a match ledger.

    Events are stamped by the owning Match; ``match_minute`` is the number of
    whole minutes elapsed since kickoff at ``timestamp``.
    """

    id: UUID
    type: MatchEventType
    description: str
    timestamp: datetime
    match_minute: int
    primary_player: Optional[Any] = None
    secondary_player: Optional[Any] = None
    payload: Optional[Any] = None

    def __post_init__(self):
        if not isinstance(self.type, MatchEventType):
            raise ValidationError("Match event type must be a MatchEventType")

        if self.match_minute < 0:
            raise ValidationError("Match minute cannot be negative")

        expected = payload_type_for(self.type)
        if expected is None:
            if self.payload is not None:
                raise ValidationError(f"{self.type.value} events carry no payload")
        elif not isinstance(self.payload, expected):
            raise ValidationError(
                f"{self.type.value} events require a {expected.__name__}"
            )

    @property
    def is_home_team(self) -> Optional[bool]:
        return getattr(self.payload, "is_home_team", None)

    def __str__(self) -> str:
        return f"{self.match_minute}' {self.type.value}: {self.description}"
