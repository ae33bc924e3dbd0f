import pytest

from civtracker.models import DatabaseError, Member, MembersError
from civtracker.store import (
    SessionError,
    connect,
    ensure_session,
    ensure_session_member,
    get_member,
    get_members,
    get_session,
    remove_member,
)


@pytest.fixture
def conn():
    connection = connect(":memory:")
    yield connection
    connection.close()


def test_connect_uses_environment_path(tmp_path, monkeypatch):
    db_file = tmp_path / "game.sqlite"
    monkeypatch.setenv("DB_FILE_PATH", f"sqlite://{db_file}")
    connection = connect()
    ensure_session(connection, "guild", "Game")
    connection.close()
    assert db_file.exists()
    reopened = connect(str(db_file))
    assert get_session(reopened, "guild").name == "Game"
    reopened.close()


def test_connect_bad_path_raises_database_error(tmp_path):
    with pytest.raises(DatabaseError):
        connect(str(tmp_path / "missing" / "dir" / "db.sqlite"))


def test_ensure_session_creates_then_reuses(conn):
    first = ensure_session(conn, "guild", "Game")
    second = ensure_session(conn, "guild", "Game")
    assert first.name == "Game"
    assert first.key == second.key
    assert get_session(conn, "guild") == first


def test_ensure_session_gives_distinct_keys(conn):
    first = ensure_session(conn, "guild-a", "Game")
    second = ensure_session(conn, "guild-b", "Game")
    assert first.key != second.key
    assert get_session(conn, "guild-b").key == second.key


def test_ensure_session_renames(conn):
    original = ensure_session(conn, "guild", "Old")
    renamed = ensure_session(conn, "guild", "New")
    assert renamed.name == "New"
    assert renamed.key == original.key
    assert get_session(conn, "guild").name == "New"


def test_get_session_unknown_raises(conn):
    with pytest.raises(SessionError) as info:
        get_session(conn, "nowhere")
    assert isinstance(info.value.cause, DatabaseError)
    assert str(info.value).startswith("Database error")


def test_members_empty_for_new_session(conn):
    session = ensure_session(conn, "guild", "Game")
    assert len(get_members(conn, session.key)) == 0


def test_ensure_session_member_adds(conn):
    session = ensure_session(conn, "guild", "Game")
    member = ensure_session_member(conn, session.key, "42", "Alice")
    assert member == Member(name="Alice", discord_id="42")
    assert list(get_members(conn, session.key)) == [member]
    assert get_member(conn, session.key, "42") == member


def test_ensure_session_member_is_idempotent(conn):
    session = ensure_session(conn, "guild", "Game")
    ensure_session_member(conn, session.key, "42", "Alice")
    ensure_session_member(conn, session.key, "42", "Alice")
    assert len(get_members(conn, session.key)) == 1


def test_ensure_session_member_renames(conn):
    session = ensure_session(conn, "guild", "Game")
    ensure_session_member(conn, session.key, "42", "Alice")
    member = ensure_session_member(conn, session.key, "42", "Alicia")
    assert member.name == "Alicia"
    assert get_member(conn, session.key, "42").name == "Alicia"


def test_members_are_scoped_to_session(conn):
    first = ensure_session(conn, "guild-a", "Game")
    second = ensure_session(conn, "guild-b", "Game")
    ensure_session_member(conn, first.key, "42", "Alice")
    assert len(get_members(conn, second.key)) == 0
    with pytest.raises(MembersError):
        get_member(conn, second.key, "42")


def test_get_member_unknown_raises(conn):
    session = ensure_session(conn, "guild", "Game")
    with pytest.raises(MembersError) as info:
        get_member(conn, session.key, "404")
    assert isinstance(info.value.cause, DatabaseError)


def test_remove_member(conn):
    session = ensure_session(conn, "guild", "Game")
    alice = ensure_session_member(conn, session.key, "1", "Alice")
    bob = ensure_session_member(conn, session.key, "2", "Bob")
    remove_member(conn, session.key, alice)
    assert list(get_members(conn, session.key)) == [bob]


def test_remove_member_unknown_keeps_others(conn):
    session = ensure_session(conn, "guild", "Game")
    alice = ensure_session_member(conn, session.key, "1", "Alice")
    remove_member(conn, session.key, Member(name="Nobody", discord_id="9"))
    assert list(get_members(conn, session.key)) == [alice]


def test_closed_connection_raises_members_error():
    connection = connect(":memory:")
    connection.close()
    with pytest.raises(MembersError):
        get_members(connection, "key")