"""Validation module for inbound request validation.

Provides Marshmallow schemas for all match, team and player commands.
"""

from .schemas import (
    PlayerCreateSchema, PlayerUpdateSchema,
    TeamCreateSchema, TeamUpdateSchema,
    MatchCreateSchema, ScoreUpdateSchema, GoalSchema,
    CancelMatchSchema, RescheduleMatchSchema, ChangeVenueSchema,
    MatchEventSubmissionSchema, parse_request,
    player_create_schema, player_update_schema,
    team_create_schema, team_update_schema,
    match_create_schema, score_update_schema, goal_schema,
    cancel_match_schema, reschedule_match_schema, change_venue_schema,
    match_event_submission_schema,
)

__all__ = [
    'PlayerCreateSchema', 'PlayerUpdateSchema',
    'TeamCreateSchema', 'TeamUpdateSchema',
    'MatchCreateSchema', 'ScoreUpdateSchema', 'GoalSchema',
    'CancelMatchSchema', 'RescheduleMatchSchema', 'ChangeVenueSchema',
    'MatchEventSubmissionSchema', 'parse_request',
    'player_create_schema', 'player_update_schema',
    'team_create_schema', 'team_update_schema',
    'match_create_schema', 'score_update_schema', 'goal_schema',
    'cancel_match_schema', 'reschedule_match_schema', 'change_venue_schema',
    'match_event_submission_schema',
]
