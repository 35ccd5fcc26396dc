import os
import sys
from datetime import date, datetime, timedelta

import pytest

# Ensure repo root is on sys.path so tests can import the matchday package
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from matchday.domain import Match, Player, Position, Team  # noqa: E402

KICKOFF_DAY = datetime(2025, 6, 1, 14, 0)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(KICKOFF_DAY)


@pytest.fixture
def make_player(clock):
    def _make(name="Marcus Rashford", jersey="10", position=Position.FORWARD,
              dob=date(1997, 10, 31), nationality="England"):
        return Player(
            name=name,
            date_of_birth=dob,
            nationality=nationality,
            position=position,
            jersey_number=jersey,
            clock=clock,
        )
    return _make


@pytest.fixture
def home_team(clock):
    return Team(name="Home", short_name="HOM", country="England", clock=clock)


@pytest.fixture
def away_team(clock):
    return Team(name="Away", short_name="AWY", country="England", clock=clock)


@pytest.fixture
def match(clock, home_team, away_team):
    return Match(
        home_team=home_team,
        away_team=away_team,
        venue="Old Trafford",
        start_time=clock.now + timedelta(hours=1),
        clock=clock,
    )


@pytest.fixture
def live_match(match):
    match.start()
    return match
