"""Domain services implementing match orchestration.

The match domain service translates external intents (start, complete,
cancel, goal, score correction, incident) into calls on the Match aggregate.
It holds no state, performs no I/O and publishes nothing; callers load the
aggregate, invoke the service and persist the returned reference.
"""

from typing import Optional

from .entities import Match, Player
from .events import IncidentPayload
from .value_objects import MatchEventType


class MatchDomainService:
    """Stateless orchestration over the Match aggregate."""

    @staticmethod
    def start_match(match: Match) -> Match:
        """Start a match, changing its status to LIVE."""
        match.start()
        return match

    @staticmethod
    def complete_match(match: Match) -> Match:
        """Complete a match, changing its status to COMPLETED."""
        match.complete()
        return match

    @staticmethod
    def cancel_match(match: Match, reason: Optional[str] = None) -> Match:
        """Cancel a match, changing its status to CANCELLED."""
        match.cancel(reason)
        return match

    @staticmethod
    def add_goal(
        match: Match,
        scorer: Optional[Player],
        assistant: Optional[Player],
        is_home_team: bool,
    ) -> Match:
        """Add a goal for the home or the away side."""
        if is_home_team:
            match.add_home_goal(scorer, assistant)
        else:
            match.add_away_goal(scorer, assistant)
        return match

    @staticmethod
    def add_own_goal(match: Match, player: Optional[Player], for_home_team: bool) -> Match:
        match.add_own_goal(player, for_home_team)
        return match

    @staticmethod
    def update_score(match: Match, home_score: int, away_score: int) -> Match:
        """Correct the score of a LIVE match."""
        match.update_score(home_score, away_score)
        return match

    @staticmethod
    def add_event(
        match: Match,
        event_type: MatchEventType,
        description: str,
        primary_player: Optional[Player] = None,
        secondary_player: Optional[Player] = None,
        payload: Optional[IncidentPayload] = None,
    ) -> Match:
        """Record an in-play incident on a match."""
        match.record_event(event_type, description, primary_player, secondary_player, payload)
        return match

    @staticmethod
    def reschedule_match(match: Match, new_start_time) -> Match:
        match.reschedule(new_start_time)
        return match

    @staticmethod
    def change_venue(match: Match, new_venue: str) -> Match:
        match.change_venue(new_venue)
        return match
