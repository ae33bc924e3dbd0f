"""Storage of the cities founded by session members."""

from __future__ import annotations

import sqlite3

from civtracker.models import (
    CitiesState,
    City,
    CityError,
    CityInState,
    CityState,
    MembersError,
)
from civtracker.store import _database_errors, _fetch_one, get_members


def city_exists(
    conn: sqlite3.Connection, session_key: str, discord_id: str, city_name: str
) -> bool:
    """Tell whether the member already owns a city with this name."""
    with _database_errors(CityError):
        row = _fetch_one(
            conn,
            "SELECT EXISTS(SELECT 1 FROM session_city WHERE session_key = ?1 "
            "AND session_member_discord_id = ?2 AND name = ?3)",
            (session_key, discord_id, city_name),
        )
    return bool(row[0])


def get_cities(conn: sqlite3.Connection, session_key: str, discord_id: str) -> list[City]:
    """Return the cities owned by one member of a session."""
    with _database_errors(CityError):
        rows = conn.execute(
            "SELECT name FROM session_city WHERE session_key = ?1 "
            "AND session_member_discord_id = ?2",
            (session_key, discord_id),
        ).fetchall()
    return [City(name=name) for (name,) in rows]


def add_city(
    conn: sqlite3.Connection, session_key: str, discord_id: str, city_name: str
) -> City:
    """Record a new city for a member."""
    with _database_errors(CityError):
        conn.execute(
            "INSERT INTO session_city ( session_key, session_member_discord_id, name ) "
            "VALUES ( ?1, ?2, ?3 )",
            (session_key, discord_id, city_name),
        )
    return City(name=city_name)


def remove_city(
    conn: sqlite3.Connection, session_key: str, discord_id: str, city_name: str
) -> None:
    """Delete a member's city."""
    with _database_errors(CityError):
        conn.execute(
            "DELETE FROM session_city WHERE session_key = ?1 "
            "AND session_member_discord_id = ?2 AND name = ?3",
            (session_key, discord_id, city_name),
        )


def find_city_by_partial_name(
    conn: sqlite3.Connection, session_key: str, partial_name: str
) -> list[City]:
    """Return the session's cities whose name ends with ``partial_name``, ignoring case."""
    pattern = "%" + partial_name
    with _database_errors(CityError):
        rows = conn.execute(
            "SELECT name FROM session_city WHERE UPPER(name) LIKE ?1 AND session_key = ?2",
            (pattern, session_key),
        ).fetchall()
    return [City(name=name) for (name,) in rows]


def get_cities_state(conn: sqlite3.Connection, session_key: str) -> CitiesState:
    """Collect every member of the session together with their cities."""
    try:
        members = get_members(conn, session_key)
    except MembersError as error:
        raise CityError.wrap(error) from error

    state = CitiesState()
    for member in members:
        cities = [
            CityInState(city, CityState.NOTHING)
            for city in get_cities(conn, session_key, member.discord_id)
        ]
        state.add_cities(member, cities)
    return state