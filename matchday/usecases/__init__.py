"""Use Cases Layer - Application layer containing business use cases.

This layer orchestrates domain entities and services to fulfill business requirements.
It owns the repository and publisher ports that adapters implement.
"""

# Export all use cases
from .player_use_cases import *
from .team_use_cases import *
from .match_use_cases import *

__all__ = [
    # Player Use Cases
    "CreatePlayerUseCase", "GetPlayerUseCase", "UpdatePlayerUseCase",
    "SetPlayerPhotoUseCase", "SearchPlayersUseCase",
    "PlayerDTO", "CreatePlayerRequest", "UpdatePlayerRequest", "SearchPlayersRequest",
    "PlayerRepositoryInterface",

    # Team Use Cases
    "CreateTeamUseCase", "GetTeamUseCase", "ListTeamsUseCase", "UpdateTeamUseCase",
    "AddPlayerToTeamUseCase", "RemovePlayerFromTeamUseCase",
    "TeamDTO", "TeamSummaryDTO", "CreateTeamRequest", "UpdateTeamRequest",
    "RosterChangeRequest", "TeamRepositoryInterface",

    # Match Use Cases
    "CreateMatchUseCase", "GetMatchUseCase", "GetMatchEventsUseCase", "ListMatchesUseCase",
    "StartMatchUseCase", "CompleteMatchUseCase", "CancelMatchUseCase", "UpdateScoreUseCase",
    "RescheduleMatchUseCase", "ChangeVenueUseCase", "AddGoalUseCase", "RecordMatchEventUseCase",
    "MatchDTO", "MatchEventDTO", "CreateMatchRequest", "ListMatchesRequest", "ListMatchesResult",
    "CancelMatchRequest", "UpdateScoreRequest", "AddGoalRequest", "RescheduleMatchRequest",
    "ChangeVenueRequest", "RecordMatchEventRequest",
    "MatchRepositoryInterface", "DomainEventPublisher", "topic_for",
]
