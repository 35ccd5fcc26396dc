from datetime import date, datetime
from uuid import uuid4

import pytest

from matchday.domain import MatchEventType, Position, ValidationError
from matchday.usecases import (
    AddGoalRequest,
    CreateMatchRequest,
    CreatePlayerRequest,
    RecordMatchEventRequest,
    UpdatePlayerRequest,
    UpdateScoreRequest,
)
from matchday.validation import (
    goal_schema,
    match_create_schema,
    match_event_submission_schema,
    parse_request,
    player_create_schema,
    player_update_schema,
    score_update_schema,
)


def test_player_create_payload():
    request = parse_request(player_create_schema, {
        "name": "Gianluigi Donnarumma",
        "date_of_birth": "1999-02-25",
        "nationality": "Italy",
        "position": "GK",
        "jersey_number": "1",
    }, CreatePlayerRequest)

    assert request.position is Position.GOALKEEPER
    assert request.date_of_birth == date(1999, 2, 25)
    assert request.photo_url is None


def test_player_create_reports_every_problem():
    with pytest.raises(ValidationError) as excinfo:
        parse_request(player_create_schema, {
            "name": "X",
            "position": "STRIKER",
            "jersey_number": "100",
        }, CreatePlayerRequest)

    errors = excinfo.value.errors
    assert set(errors) >= {"name", "date_of_birth", "nationality", "position", "jersey_number"}
    assert errors["date_of_birth"] == ["Date of birth is required"]


def test_player_update_is_partial():
    player_id = uuid4()
    request = parse_request(player_update_schema, {"position": "DEFENDER"}, UpdatePlayerRequest,
                            player_id=player_id)
    assert request.player_id == player_id
    assert request.position is Position.DEFENDER
    assert request.name is None


def test_match_create_payload():
    home, away = uuid4(), uuid4()
    request = parse_request(match_create_schema, {
        "home_team_id": str(home),
        "away_team_id": str(away),
        "venue": "Allianz Arena",
        "start_time": "2025-08-22T20:30:00",
    }, CreateMatchRequest)

    assert request.home_team_id == home
    assert request.start_time == datetime(2025, 8, 22, 20, 30)


def test_match_create_rejects_same_team():
    team = str(uuid4())
    with pytest.raises(ValidationError) as excinfo:
        parse_request(match_create_schema, {
            "home_team_id": team, "away_team_id": team,
            "venue": "Anywhere", "start_time": "2025-08-22T20:30:00",
        }, CreateMatchRequest)
    assert "away_team_id" in excinfo.value.errors


def test_score_update_requires_integers():
    match_id = uuid4()
    request = parse_request(score_update_schema, {"home_score": 2, "away_score": 0},
                            UpdateScoreRequest, match_id=match_id)
    assert (request.home_score, request.away_score) == (2, 0)

    with pytest.raises(ValidationError):
        parse_request(score_update_schema, {"home_score": "2", "away_score": 0},
                      UpdateScoreRequest, match_id=match_id)
    with pytest.raises(ValidationError):
        parse_request(score_update_schema, {"home_score": -1, "away_score": 0},
                      UpdateScoreRequest, match_id=match_id)


def test_goal_scorer_cannot_assist():
    player = str(uuid4())
    with pytest.raises(ValidationError) as excinfo:
        parse_request(goal_schema, {"is_home_team": True, "scorer_id": player,
                                    "assistant_id": player}, AddGoalRequest, match_id=uuid4())
    assert "assistant_id" in excinfo.value.errors


def test_event_submission_reads_string_data_map():
    match_id, player = uuid4(), uuid4()
    request = parse_request(match_event_submission_schema, {
        "type": "goal",
        "description": "Header",
        "data": {"isHomeTeam": "true", "playerId": str(player), "clientVersion": "2.1"},
    }, RecordMatchEventRequest, match_id=match_id, submitted_by="scout-7")

    assert request.event_type is MatchEventType.GOAL
    assert request.is_home_team is True
    assert request.primary_player_id == player
    assert request.secondary_player_id is None
    assert request.submitted_by == "scout-7"


def test_event_submission_top_level_fields_win():
    request = parse_request(match_event_submission_schema, {
        "type": "SUBSTITUTION",
        "isHomeTeam": False,
        "data": {"isHomeTeam": "true"},
    }, RecordMatchEventRequest, match_id=uuid4())

    assert request.is_home_team is False
    assert request.description == ""


@pytest.mark.parametrize("payload", [
    {"type": "TIMEOUT"},
    {"type": "GOAL", "data": {"playerId": "not-a-uuid"}},
    {},
])
def test_event_submission_rejects_bad_payloads(payload):
    with pytest.raises(ValidationError):
        parse_request(match_event_submission_schema, payload, RecordMatchEventRequest,
                      match_id=uuid4())


@pytest.mark.parametrize("jersey", ["7\n", "٧", "1_0", "123"])
def test_player_create_rejects_non_ascii_or_padded_jersey(jersey):
    with pytest.raises(ValidationError) as excinfo:
        parse_request(player_create_schema, {
            "name": "Gianluigi Donnarumma",
            "date_of_birth": "1999-02-25",
            "nationality": "Italy",
            "position": "GK",
            "jersey_number": jersey,
        }, CreatePlayerRequest)
    assert "jersey_number" in excinfo.value.errors
