from datetime import date
from uuid import uuid4

import pytest

from matchday.adapters import InMemoryPlayerRepository, InMemoryTeamRepository
from matchday.domain import DuplicateMemberError, NotFoundError, Position, ValidationError
from matchday.usecases import (
    AddPlayerToTeamUseCase,
    CreatePlayerRequest,
    CreatePlayerUseCase,
    CreateTeamRequest,
    CreateTeamUseCase,
    GetPlayerUseCase,
    GetTeamUseCase,
    ListTeamsUseCase,
    RemovePlayerFromTeamUseCase,
    RosterChangeRequest,
    SearchPlayersRequest,
    SearchPlayersUseCase,
    SetPlayerPhotoUseCase,
    UpdatePlayerRequest,
    UpdatePlayerUseCase,
    UpdateTeamRequest,
    UpdateTeamUseCase,
)


@pytest.fixture
def player_repo():
    return InMemoryPlayerRepository()


@pytest.fixture
def team_repo():
    return InMemoryTeamRepository()


@pytest.fixture
def create_player(player_repo, clock):
    def _create(name="Lautaro Martinez", position=Position.FORWARD, nationality="Argentina"):
        return CreatePlayerUseCase(player_repo, clock=clock).execute(CreatePlayerRequest(
            name=name,
            date_of_birth=date(1997, 8, 22),
            nationality=nationality,
            position=position,
            jersey_number="10",
        ))
    return _create


@pytest.fixture
def create_team(team_repo, clock):
    def _create(name="Inter Milan", short_name="INT", country="Italy"):
        return CreateTeamUseCase(team_repo, clock=clock).execute(
            CreateTeamRequest(name=name, short_name=short_name, country=country)
        )
    return _create


def test_create_and_get_player(player_repo, create_player):
    created = create_player()
    fetched = GetPlayerUseCase(player_repo).execute(created.id)

    assert fetched.name == "Lautaro Martinez"
    assert fetched.position == "FORWARD"
    assert fetched.position_name == "Forward"
    assert fetched.age == 27


def test_create_underage_player_fails(player_repo, clock):
    with pytest.raises(ValidationError):
        CreatePlayerUseCase(player_repo, clock=clock).execute(CreatePlayerRequest(
            name="Young Prospect",
            date_of_birth=date(2012, 1, 1),
            nationality="Italy",
            position=Position.MIDFIELDER,
            jersey_number="44",
        ))
    assert player_repo.list_all() == []


def test_get_missing_player(player_repo):
    with pytest.raises(NotFoundError):
        GetPlayerUseCase(player_repo).execute(uuid4())


def test_update_player_and_photo(player_repo, create_player):
    created = create_player()

    updated = UpdatePlayerUseCase(player_repo).execute(
        UpdatePlayerRequest(created.id, jersey_number="9", position=Position.MIDFIELDER)
    )
    assert updated.jersey_number == "9"
    assert updated.position == "MIDFIELDER"
    assert updated.name == created.name

    with_photo = SetPlayerPhotoUseCase(player_repo).execute(created.id, "https://cdn.example.com/9.png")
    assert with_photo.photo_url == "https://cdn.example.com/9.png"


def test_search_players(player_repo, create_player):
    create_player()
    create_player(name="Nicolo Barella", position=Position.MIDFIELDER, nationality="Italy")
    create_player(name="Federico Dimarco", position=Position.DEFENDER, nationality="Italy")

    use_case = SearchPlayersUseCase(player_repo)
    assert [p.name for p in use_case.execute(SearchPlayersRequest(nationality="italy"))] == [
        "Federico Dimarco", "Nicolo Barella",
    ]
    assert [p.name for p in use_case.execute(
        SearchPlayersRequest(position=Position.DEFENDER, nationality="Italy")
    )] == ["Federico Dimarco"]
    assert len(use_case.execute(SearchPlayersRequest())) == 3


def test_create_team_rejects_duplicate_name(create_team):
    create_team()
    with pytest.raises(DuplicateMemberError):
        create_team(short_name="FCI")


def test_list_and_update_teams(team_repo, create_team):
    inter = create_team()
    create_team(name="Atletico Madrid", short_name="ATM", country="Spain")

    summaries = ListTeamsUseCase(team_repo).execute()
    assert [t.name for t in summaries] == ["Atletico Madrid", "Inter Milan"]
    assert [t.short_name for t in ListTeamsUseCase(team_repo).execute(country="Spain")] == ["ATM"]

    with pytest.raises(DuplicateMemberError):
        UpdateTeamUseCase(team_repo).execute(UpdateTeamRequest(inter.id, name="Atletico Madrid"))

    renamed = UpdateTeamUseCase(team_repo).execute(UpdateTeamRequest(inter.id, name="Internazionale"))
    assert renamed.name == "Internazionale"
    assert GetTeamUseCase(team_repo).execute(inter.id).name == "Internazionale"


def test_roster_changes(team_repo, player_repo, create_team, create_player):
    team = create_team()
    player = create_player()
    add = AddPlayerToTeamUseCase(team_repo, player_repo)
    remove = RemovePlayerFromTeamUseCase(team_repo, player_repo)

    dto = add.execute(RosterChangeRequest(team.id, player.id))
    assert dto.squad_size == 1
    assert dto.players[0].id == player.id

    with pytest.raises(DuplicateMemberError):
        add.execute(RosterChangeRequest(team.id, player.id))

    assert remove.execute(RosterChangeRequest(team.id, player.id)).squad_size == 0
    with pytest.raises(NotFoundError):
        remove.execute(RosterChangeRequest(team.id, player.id))


def test_roster_change_with_unknown_ids(team_repo, player_repo, create_team):
    team = create_team()
    with pytest.raises(NotFoundError):
        AddPlayerToTeamUseCase(team_repo, player_repo).execute(RosterChangeRequest(team.id, uuid4()))
    with pytest.raises(NotFoundError):
        AddPlayerToTeamUseCase(team_repo, player_repo).execute(RosterChangeRequest(uuid4(), uuid4()))
