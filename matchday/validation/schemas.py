"""Validation schemas for inbound requests using Marshmallow.

Schemas check the shape of raw payloads (REST bodies, real-time event
submissions) and ``parse_request`` turns them into the use case request
objects. Domain rules (minimum age, state machine guards) stay in the domain;
the schemas only reject input that could never be valid.
"""

from typing import Any, Dict, Mapping

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError as SchemaValidationError,
    fields,
    pre_load,
    validate,
    validates_schema,
)

from matchday.domain.exceptions import ValidationError
from matchday.domain.value_objects import JERSEY_NUMBER_PATTERN, MatchEventType, Position

POSITION_CHOICES = [p.name for p in Position] + [p.value for p in Position]
EVENT_TYPE_CHOICES = [t.name for t in MatchEventType]


class PlayerCreateSchema(Schema):
    """Schema for validating player creation requests."""

    name = fields.Str(
        required=True,
        validate=validate.Length(min=2, max=100),
        error_messages={'required': 'Player name is required'}
    )

    date_of_birth = fields.Date(
        required=True,
        error_messages={'required': 'Date of birth is required'}
    )

    nationality = fields.Str(required=True, validate=validate.Length(max=100))

    position = fields.Str(
        required=True,
        validate=validate.OneOf(POSITION_CHOICES, error='Unknown position: {input}'),
        error_messages={'required': 'Player position is required'}
    )

    jersey_number = fields.Str(
        required=True,
        validate=validate.Regexp(JERSEY_NUMBER_PATTERN, error='Jersey number must be 1 to 99'),
        error_messages={'required': 'Jersey number is required'}
    )

    photo_url = fields.Url(load_default=None, allow_none=True)


class PlayerUpdateSchema(Schema):
    """Schema for validating partial player updates."""

    name = fields.Str(validate=validate.Length(min=2, max=100))
    date_of_birth = fields.Date()
    nationality = fields.Str(validate=validate.Length(max=100))
    position = fields.Str(validate=validate.OneOf(POSITION_CHOICES, error='Unknown position: {input}'))
    jersey_number = fields.Str(
        validate=validate.Regexp(JERSEY_NUMBER_PATTERN, error='Jersey number must be 1 to 99')
    )


class TeamCreateSchema(Schema):
    """Schema for validating team creation requests."""

    name = fields.Str(
        required=True,
        validate=validate.Length(min=3, max=100),
        error_messages={'required': 'Team name is required'}
    )

    short_name = fields.Str(
        required=True,
        validate=validate.Length(min=2, max=3),
        error_messages={'required': 'Team short name is required'}
    )

    country = fields.Str(required=True, validate=validate.Length(max=100))
    logo_url = fields.Url(load_default=None, allow_none=True)


class TeamUpdateSchema(Schema):
    """Schema for validating partial team updates."""

    name = fields.Str(validate=validate.Length(min=3, max=100))
    short_name = fields.Str(validate=validate.Length(min=2, max=3))
    country = fields.Str(validate=validate.Length(max=100))
    logo_url = fields.Url()


class MatchCreateSchema(Schema):
    """Schema for validating match scheduling requests."""

    home_team_id = fields.UUID(required=True)
    away_team_id = fields.UUID(required=True)
    venue = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    start_time = fields.NaiveDateTime(required=True)

    @validates_schema
    def validate_teams(self, data: Dict[str, Any], **kwargs):
        if data.get('home_team_id') and data.get('home_team_id') == data.get('away_team_id'):
            raise SchemaValidationError(
                'Home and away teams cannot be the same', field_name='away_team_id'
            )


class ScoreUpdateSchema(Schema):
    """Schema for absolute score corrections."""

    home_score = fields.Int(required=True, strict=True, validate=validate.Range(min=0))
    away_score = fields.Int(required=True, strict=True, validate=validate.Range(min=0))


class GoalSchema(Schema):
    """Schema for goal submissions on the increment path."""

    is_home_team = fields.Bool(required=True)
    scorer_id = fields.UUID(load_default=None, allow_none=True)
    assistant_id = fields.UUID(load_default=None, allow_none=True)

    @validates_schema
    def validate_players(self, data: Dict[str, Any], **kwargs):
        scorer, assistant = data.get('scorer_id'), data.get('assistant_id')
        if scorer is not None and scorer == assistant:
            raise SchemaValidationError(
                'A player cannot assist their own goal', field_name='assistant_id'
            )


class CancelMatchSchema(Schema):
    reason = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=500))


class RescheduleMatchSchema(Schema):
    new_start_time = fields.NaiveDateTime(required=True)


class ChangeVenueSchema(Schema):
    new_venue = fields.Str(required=True, validate=validate.Length(min=1, max=255))


class MatchEventSubmissionSchema(Schema):
    """Schema for events submitted over the real-time channel.

    Clients may send event details either at the top level or inside a
    ``data`` map of strings (``{"isHomeTeam": "true", "playerId": "..."}``);
    both are parsed once here into typed fields.
    """

    class Meta:
        unknown = EXCLUDE

    type = fields.Str(
        required=True,
        validate=validate.OneOf(EVENT_TYPE_CHOICES, error='Unknown event type: {input}'),
    )
    description = fields.Str(load_default="", validate=validate.Length(max=500))
    is_home_team = fields.Bool(data_key='isHomeTeam', load_default=None, allow_none=True)
    primary_player_id = fields.UUID(data_key='playerId', load_default=None, allow_none=True)
    secondary_player_id = fields.UUID(
        data_key='secondaryPlayerId', load_default=None, allow_none=True
    )

    @pre_load
    def flatten_data(self, data, **kwargs):
        if not isinstance(data, Mapping):
            return data

        merged = {}
        if isinstance(data.get('data'), Mapping):
            merged.update(data['data'])
        merged.update({k: v for k, v in data.items() if k != 'data'})

        if isinstance(merged.get('type'), str):
            merged['type'] = merged['type'].strip().upper()
        return merged


def parse_request(schema: Schema, data: Any, request_cls, **context):
    """Validate ``data`` with ``schema`` and build ``request_cls``.

    ``context`` supplies fields that come from elsewhere than the payload,
    such as the match id taken from the URL.
    """
    try:
        loaded = schema.load(data if data is not None else {})
    except SchemaValidationError as e:
        raise ValidationError(f"Invalid {request_cls.__name__}", errors=e.messages) from e

    if 'position' in loaded:
        loaded['position'] = Position.from_string(loaded['position'])
    if 'type' in loaded:
        loaded['event_type'] = MatchEventType[loaded.pop('type')]

    return request_cls(**context, **loaded)


# Schema instances for reuse
player_create_schema = PlayerCreateSchema()
player_update_schema = PlayerUpdateSchema()
team_create_schema = TeamCreateSchema()
team_update_schema = TeamUpdateSchema()
match_create_schema = MatchCreateSchema()
score_update_schema = ScoreUpdateSchema()
goal_schema = GoalSchema()
cancel_match_schema = CancelMatchSchema()
reschedule_match_schema = RescheduleMatchSchema()
change_venue_schema = ChangeVenueSchema()
match_event_submission_schema = MatchEventSubmissionSchema()
