import pytest

from matchday.domain import (
    IllegalStateError,
    MatchDomainService,
    MatchEventType,
    MatchStatus,
    ValidationError,
)
from matchday.domain.events import IncidentPayload


@pytest.fixture
def service():
    return MatchDomainService()


def test_service_returns_same_aggregate(service, match):
    assert service.start_match(match) is match
    assert service.complete_match(match) is match
    assert match.status is MatchStatus.COMPLETED


def test_add_goal_routes_by_side(service, live_match, make_player):
    service.add_goal(live_match, make_player(), None, is_home_team=True)
    service.add_goal(live_match, None, None, is_home_team=False)
    service.add_goal(live_match, None, None, is_home_team=False)

    assert (live_match.home_score, live_match.away_score) == (1, 2)
    assert [e.is_home_team for e in live_match.events[1:]] == [True, False, False]


def test_add_event_and_own_goal(service, live_match, make_player):
    service.add_event(live_match, MatchEventType.RED_CARD, "Second booking", make_player(),
                      payload=IncidentPayload(is_home_team=False))
    service.add_own_goal(live_match, make_player(), True)

    assert [e.type for e in live_match.events] == [
        MatchEventType.MATCH_START, MatchEventType.RED_CARD, MatchEventType.OWN_GOAL,
    ]
    assert live_match.home_score == 1


def test_service_propagates_domain_errors(service, match):
    with pytest.raises(IllegalStateError):
        service.complete_match(match)
    with pytest.raises(IllegalStateError):
        service.update_score(match, 1, 0)

    service.start_match(match)
    with pytest.raises(ValidationError):
        service.update_score(match, 0, 0)


def test_cancel_reschedule_and_venue(service, match, clock):
    from datetime import timedelta

    service.reschedule_match(match, clock.now + timedelta(days=7))
    service.change_venue(match, "Villa Park")
    service.cancel_match(match, "Strike")

    assert [e.type for e in match.events] == [
        MatchEventType.RESCHEDULED, MatchEventType.VENUE_CHANGE, MatchEventType.MATCH_CANCELLED,
    ]
    assert match.venue == "Villa Park"
