"""Domain layer - Business entities, value objects, and domain services.

This layer contains the core match-tracking logic. It is independent of any
external concern: it performs no I/O, no logging and no event publication.
"""

from .exceptions import *
from .value_objects import *
from .events import *
from .entities import *
from .services import *

__all__ = [
    # Errors
    'DomainError', 'ValidationError', 'IllegalStateError', 'NotFoundError',
    'DuplicateMemberError', 'ConcurrentModificationError',

    # Value Objects
    'Position', 'MatchStatus', 'MatchEventType', 'INCIDENT_EVENT_TYPES',
    'PlayerName', 'JerseyNumber', 'TeamName', 'ShortName', 'Venue',

    # Ledger
    'MatchEvent', 'GoalPayload', 'OwnGoalPayload', 'CancellationPayload',
    'ReschedulePayload', 'VenueChangePayload', 'FinalScorePayload',
    'IncidentPayload', 'payload_type_for', 'payload_to_dict', 'payload_from_dict',

    # Entities
    'Entity', 'Player', 'Team', 'Match', 'MINIMUM_PLAYER_AGE', 'calculate_age',

    # Domain Services
    'MatchDomainService',
]
