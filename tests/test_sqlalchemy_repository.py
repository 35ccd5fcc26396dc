import warnings
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SADeprecationWarning
from sqlalchemy.orm import sessionmaker

from matchday.adapters import (
    SQLAlchemyMatchRepository,
    SQLAlchemyPlayerRepository,
    SQLAlchemyTeamRepository,
)
from matchday.domain import (
    ConcurrentModificationError,
    Match,
    MatchEventType,
    MatchStatus,
    Position,
    Team,
)
from matchday.domain.events import GoalPayload, IncidentPayload
from matchday.models import Base
from matchday.models import MatchEvent as ORMMatchEvent


@pytest.fixture
def in_memory_session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def new_match(home_team, away_team):
    return Match(home_team, away_team, "San Siro", datetime.now() + timedelta(days=1))


def test_player_save_and_get(in_memory_session, make_player):
    repo = SQLAlchemyPlayerRepository(in_memory_session)
    p = make_player()
    p.set_photo_url("https://img.example.com/rashford.png")
    repo.save(p)

    fetched = repo.get_by_id(p.id)
    assert fetched == p
    assert fetched.name == "Marcus Rashford"
    assert fetched.position is Position.FORWARD
    assert fetched.jersey_number == "10"
    assert fetched.photo_url == "https://img.example.com/rashford.png"
    assert repo.get_by_id(uuid4()) is None


def test_player_queries(in_memory_session, make_player):
    repo = SQLAlchemyPlayerRepository(in_memory_session)
    repo.save(make_player(name="Zed Forward"))
    repo.save(make_player(name="Alan Keeper", position=Position.GOALKEEPER, nationality="Scotland"))

    assert [p.name for p in repo.list_all()] == ["Alan Keeper", "Zed Forward"]
    assert [p.name for p in repo.list_by_position(Position.GOALKEEPER)] == ["Alan Keeper"]
    assert [p.name for p in repo.list_by_nationality("england")] == ["Zed Forward"]


def test_player_update_is_persisted(in_memory_session, make_player):
    repo = SQLAlchemyPlayerRepository(in_memory_session)
    p = make_player()
    repo.save(p)

    p.update_info(jersey_number="7", position=Position.MIDFIELDER)
    repo.save(p)

    fetched = repo.get_by_id(p.id)
    assert fetched.jersey_number == "7"
    assert fetched.position is Position.MIDFIELDER


def test_team_roster_round_trip(in_memory_session, home_team, make_player):
    repo = SQLAlchemyTeamRepository(in_memory_session)
    players = [make_player(name=f"Player {n}", jersey=str(n)) for n in (9, 4, 1)]
    for p in players:
        home_team.add_player(p)
    repo.save(home_team)

    fetched = repo.get_by_id(home_team.id)
    assert fetched.players == tuple(players)
    assert repo.get_by_name("Home") == home_team
    assert repo.get_by_name("Nobody") is None

    home_team.remove_player(players[1])
    repo.save(home_team)
    assert [p.name for p in repo.get_by_id(home_team.id).players] == ["Player 9", "Player 1"]


def test_team_queries(in_memory_session, home_team, away_team, clock):
    repo = SQLAlchemyTeamRepository(in_memory_session)
    repo.save(home_team)
    repo.save(away_team)
    repo.save(Team("Benfica", "SLB", "Portugal", clock=clock))

    assert [t.name for t in repo.list_all()] == ["Away", "Benfica", "Home"]
    assert [t.name for t in repo.list_by_country("PORTUGAL")] == ["Benfica"]


def test_duplicate_team_name_rolls_back(in_memory_session, home_team, clock):
    repo = SQLAlchemyTeamRepository(in_memory_session)
    repo.save(home_team)

    with pytest.raises(IntegrityError):
        repo.save(Team("Home", "HM2", "Wales", clock=clock))

    assert [t.id for t in repo.list_all()] == [home_team.id]


def test_match_save_and_reload(in_memory_session, new_match, make_player):
    repo = SQLAlchemyMatchRepository(in_memory_session)
    scorer, assistant = make_player(), make_player(name="Bruno Fernandes", jersey="8")

    repo.save(new_match)
    assert new_match.version == 1

    new_match.start()
    new_match.add_home_goal(scorer, assistant)
    new_match.record_event(MatchEventType.YELLOW_CARD, "Dissent", assistant,
                           payload=IncidentPayload(is_home_team=True))
    repo.save(new_match)
    assert new_match.version == 2

    fetched = repo.get_by_id(new_match.id)
    assert fetched.status is MatchStatus.LIVE
    assert fetched.home_score == 1
    assert fetched.version == 2
    assert fetched.kicked_off_at == new_match.kicked_off_at
    assert [e.id for e in fetched.events] == [e.id for e in new_match.events]

    goal = fetched.events[1]
    assert goal.payload == GoalPayload(True, scorer.id, assistant.id)
    assert goal.primary_player == scorer
    # one Player instance per id within a load
    assert fetched.events[2].primary_player is goal.secondary_player


def test_match_ledger_rows_are_appended(in_memory_session, new_match):
    repo = SQLAlchemyMatchRepository(in_memory_session)
    new_match.start()
    repo.save(new_match)

    match = repo.get_by_id(new_match.id)
    match.complete()
    repo.save(match)

    rows = (
        in_memory_session.query(ORMMatchEvent)
        .filter(ORMMatchEvent.match_id == str(new_match.id))
        .order_by(ORMMatchEvent.sequence)
        .all()
    )
    assert [(r.sequence, r.type) for r in rows] == [(0, "MATCH_START"), (1, "MATCH_END")]
    assert rows[1].payload == {"kind": "FinalScorePayload", "home_score": 0, "away_score": 0}


def test_match_queries(in_memory_session, home_team, away_team, clock):
    repo = SQLAlchemyMatchRepository(in_memory_session)
    third = Team("Third", "THI", "Spain", clock=clock)
    base = datetime.now() + timedelta(days=1)
    first = Match(home_team, away_team, "A", base)
    second = Match(third, away_team, "B", base + timedelta(hours=3))
    for m in (second, first):
        repo.save(m)
    first.start()
    repo.save(first)

    assert [m.id for m in repo.list_all()] == [first.id, second.id]
    assert [m.id for m in repo.list_by_status(MatchStatus.LIVE)] == [first.id]
    assert [m.id for m in repo.list_by_team(third.id)] == [second.id]
    assert [m.id for m in repo.list_by_team(away_team.id)] == [first.id, second.id]
    assert [m.id for m in repo.list_by_start_time_between(
        base + timedelta(hours=1), base + timedelta(hours=4)
    )] == [second.id]


def test_stale_match_save_is_rejected(tmp_path, new_match):
    engine = create_engine(f"sqlite:///{tmp_path / 'matches.db'}")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    first_session, second_session = Session(), Session()
    try:
        SQLAlchemyMatchRepository(first_session).save(new_match)

        first_repo = SQLAlchemyMatchRepository(first_session)
        second_repo = SQLAlchemyMatchRepository(second_session)
        mine = first_repo.get_by_id(new_match.id)
        theirs = second_repo.get_by_id(new_match.id)

        mine.start()
        first_repo.save(mine)

        theirs.cancel("Late call")
        with pytest.raises(ConcurrentModificationError):
            second_repo.save(theirs)

        third_session = Session()
        stored = SQLAlchemyMatchRepository(third_session).get_by_id(new_match.id)
        assert stored.status is MatchStatus.LIVE
        assert [e.type for e in stored.events] == [MatchEventType.MATCH_START]
        third_session.close()
    finally:
        first_session.close()
        second_session.close()


def test_database_wiring_from_settings(make_player):
    from matchday.config import TestingConfig
    from matchday.database import (
        create_engine_from_settings,
        create_session_factory,
        get_db_session,
        get_repositories,
        init_db,
    )

    engine = create_engine_from_settings(TestingConfig())
    init_db(engine)
    factory = create_session_factory(engine)

    player = make_player()
    sessions = get_db_session(factory)
    db = next(sessions)
    get_repositories(db)["players"].save(player)
    sessions.close()

    # the in-memory database outlives the session on the shared connection
    with factory() as other:
        repos = get_repositories(other)
        assert isinstance(repos["matches"], SQLAlchemyMatchRepository)
        assert repos["players"].get_by_id(player.id) == player


def test_saving_new_players_emits_no_deprecation_warnings(in_memory_session, home_team, make_player):
    home_team.add_player(make_player())
    home_team.add_player(make_player(name="Casemiro", jersey="18"))

    with warnings.catch_warnings():
        warnings.simplefilter("error", SADeprecationWarning)
        SQLAlchemyTeamRepository(in_memory_session).save(home_team)

    assert SQLAlchemyTeamRepository(in_memory_session).get_by_id(home_team.id).squad_size() == 2
