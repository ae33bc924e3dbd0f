"""SQLite storage of sessions and their members."""

from __future__ import annotations

import os
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from civtracker.models import (
    DatabaseError,
    Member,
    Members,
    MembersError,
    Session,
    UniqueConstraintError,
    _WrappingError,
)

DEFAULT_DB_FILE_PATH = "sqlite://db.sqlite"
_URL_PREFIX = "sqlite://"
_NO_ROWS = "no rows returned by a query that expected to return at least one row"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS session (
    key TEXT PRIMARY KEY,
    discord_id TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS session_member (
    session_key TEXT NOT NULL,
    discord_id TEXT NOT NULL,
    name TEXT NOT NULL,
    PRIMARY KEY (session_key, discord_id)
);
CREATE TABLE IF NOT EXISTS session_city (
    session_key TEXT NOT NULL,
    session_member_discord_id TEXT NOT NULL,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS session_tech (
    session_key TEXT NOT NULL,
    session_member_discord_id TEXT NOT NULL,
    name TEXT NOT NULL,
    done INTEGER NOT NULL,
    PRIMARY KEY (session_key, session_member_discord_id, name)
);
"""


class SessionError(_WrappingError):
    """Failure while reading or writing sessions."""

    _prefixes = ((DatabaseError, "Database error"),)


def _to_database_error(error: sqlite3.Error) -> DatabaseError:
    if isinstance(error, sqlite3.IntegrityError) and "UNIQUE" in str(error).upper():
        return UniqueConstraintError()
    return DatabaseError(str(error))


@contextmanager
def _database_errors(error_type: type[_WrappingError]) -> Iterator[None]:
    """Turn database failures raised in the block into ``error_type``."""
    try:
        yield
    except sqlite3.Error as error:
        raise error_type.wrap(_to_database_error(error)) from error
    except DatabaseError as error:
        raise error_type.wrap(error) from error


def _fetch_one(conn: sqlite3.Connection, sql: str, params: Sequence[Any]) -> tuple:
    row = conn.execute(sql, params).fetchone()
    if row is None:
        raise DatabaseError(_NO_ROWS)
    return row


def connect(path: str | None = None) -> sqlite3.Connection:
    """Open the database, defaulting to the ``DB_FILE_PATH`` environment variable."""
    target = path if path is not None else os.environ.get("DB_FILE_PATH", DEFAULT_DB_FILE_PATH)
    if target.startswith(_URL_PREFIX):
        target = target[len(_URL_PREFIX):]
    try:
        conn = sqlite3.connect(target, isolation_level=None)
        conn.executescript(_SCHEMA)
    except sqlite3.Error as error:
        raise _to_database_error(error) from error
    return conn


def _session_exists(conn: sqlite3.Connection, discord_id: str) -> bool:
    with _database_errors(SessionError):
        row = _fetch_one(
            conn, "SELECT EXISTS(SELECT 1 FROM session WHERE discord_id = ?1)", (discord_id,)
        )
    return bool(row[0])


def ensure_session(conn: sqlite3.Connection, discord_id: str, name: str) -> Session:
    """Return the guild's session, creating it or updating its name as needed."""
    if not _session_exists(conn, discord_id):
        key = str(uuid.uuid4())
        with _database_errors(SessionError):
            conn.execute(
                "INSERT INTO session ( key, discord_id, name ) VALUES ( ?1, ?2, ?3 )",
                (key, discord_id, name),
            )

    session = get_session(conn, discord_id)
    if session.name != name:
        session.name = name
        with _database_errors(SessionError):
            conn.execute("UPDATE session SET name = ?1", (name,))
    return session


def get_session(conn: sqlite3.Connection, discord_id: str) -> Session:
    """Return the session of a guild; raise ``SessionError`` if there is none."""
    with _database_errors(SessionError):
        name, key = _fetch_one(
            conn, "SELECT name, key FROM session WHERE discord_id = ?1", (discord_id,)
        )
    return Session(name=name, key=key)


def get_members(conn: sqlite3.Connection, session_key: str) -> Members:
    """Return every member of a session."""
    with _database_errors(MembersError):
        rows = conn.execute(
            "SELECT name, discord_id FROM session_member WHERE session_key = ?1",
            (session_key,),
        ).fetchall()
    return Members([Member(name=name, discord_id=discord_id) for name, discord_id in rows])


def _member_exists(conn: sqlite3.Connection, session_key: str, discord_id: str) -> bool:
    with _database_errors(MembersError):
        row = _fetch_one(
            conn,
            "SELECT EXISTS(SELECT 1 FROM session_member WHERE session_key = ?1 AND discord_id = ?2)",
            (session_key, discord_id),
        )
    return bool(row[0])


def ensure_session_member(
    conn: sqlite3.Connection, session_key: str, discord_id: str, name: str
) -> Member:
    """Register a member in a session, or refresh its name if it is known."""
    if not _member_exists(conn, session_key, discord_id):
        with _database_errors(MembersError):
            conn.execute(
                "INSERT INTO session_member ( session_key, name, discord_id ) VALUES ( ?1, ?2, ?3 )",
                (session_key, name, discord_id),
            )
    else:
        member = get_member(conn, session_key, discord_id)
        if member.name != name:
            with _database_errors(MembersError):
                conn.execute("UPDATE session_member SET name = ?1", (name,))
    return Member(name=name, discord_id=discord_id)


def get_member(conn: sqlite3.Connection, session_key: str, discord_id: str) -> Member:
    """Return one member; raise ``MembersError`` if it is unknown."""
    with _database_errors(MembersError):
        name, member_id = _fetch_one(
            conn,
            "SELECT name, discord_id FROM session_member WHERE session_key = ?1 AND discord_id = ?2",
            (session_key, discord_id),
        )
    return Member(name=name, discord_id=member_id)


def remove_member(conn: sqlite3.Connection, session_key: str, member: Member) -> None:
    """Delete the members of a session that carry ``member``'s name."""
    with _database_errors(MembersError):
        conn.execute(
            "DELETE FROM session_member WHERE session_key = ?1 AND name = ?2",
            (session_key, member.name),
        )