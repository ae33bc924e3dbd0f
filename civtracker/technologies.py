"""Storage of the technologies researched and owned by session members."""

from __future__ import annotations

import sqlite3

from civtracker.models import (
    Member,
    MembersError,
    State,
    TechnologiesState,
    Technology,
    TechnologyInState,
    TechnologyStateError,
)
from civtracker.store import _database_errors, get_members

_REPLACE_SQL = (
    "REPLACE INTO session_tech (session_key, session_member_discord_id, name, done) "
    "VALUES (?1, ?2, ?3, ?4)"
)
_DELETE_SQL = (
    "DELETE FROM session_tech "
    "WHERE session_key = ?1 AND session_member_discord_id = ?2 AND name = ?3"
)


def _member_technologies(
    conn: sqlite3.Connection, session_key: str, discord_id: str, done: int
) -> list[Technology]:
    with _database_errors(TechnologyStateError):
        rows = conn.execute(
            "SELECT name FROM session_tech "
            "WHERE session_key = ?1 AND session_member_discord_id = ?2 AND done = ?3",
            (session_key, discord_id, done),
        ).fetchall()
    return [Technology.from_name(name) for (name,) in rows]


def get_member_searching(
    conn: sqlite3.Connection, session_key: str, discord_id: str
) -> list[Technology]:
    """Return the technologies a member is researching."""
    return _member_technologies(conn, session_key, discord_id, 0)


def get_member_done(
    conn: sqlite3.Connection, session_key: str, discord_id: str
) -> list[Technology]:
    """Return the technologies a member owns."""
    return _member_technologies(conn, session_key, discord_id, 1)


def get_technologies_state(conn: sqlite3.Connection, session_key: str) -> TechnologiesState:
    """Gather the done and searched technologies of the whole session, in technology order."""
    try:
        members = get_members(conn, session_key)
    except MembersError as error:
        raise TechnologyStateError.wrap(error) from error

    search_members: dict[Technology, list[Member]] = {}
    done_members: dict[Technology, list[Member]] = {}
    for member in members:
        for technology in get_member_searching(conn, session_key, member.discord_id):
            search_members.setdefault(technology, []).append(member)
        for technology in get_member_done(conn, session_key, member.discord_id):
            done_members.setdefault(technology, []).append(member)

    state = TechnologiesState()
    for technology in Technology:
        if technology in search_members:
            state.add_search(TechnologyInState(technology, list(search_members[technology])))
        if technology in done_members:
            state.add_done(TechnologyInState(technology, list(done_members[technology])))
    return state


def set_technology_state(
    conn: sqlite3.Connection,
    session_key: str,
    discord_id: str,
    technology: Technology,
    state: State,
) -> None:
    """Mark a technology as researched, done, or forget it for a member."""
    name = str(technology)
    with _database_errors(TechnologyStateError):
        if state is State.RESEARCHING:
            conn.execute(_REPLACE_SQL, (session_key, discord_id, name, "0"))
        elif state is State.DONE:
            conn.execute(_REPLACE_SQL, (session_key, discord_id, name, "1"))
        else:
            conn.execute(_DELETE_SQL, (session_key, discord_id, name))