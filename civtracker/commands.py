"""Chat commands managing the cities and technologies of a session."""

from __future__ import annotations

import sqlite3
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from civtracker.cities import (
    add_city,
    city_exists,
    find_city_by_partial_name,
    get_cities_state,
    remove_city,
)
from civtracker.markdown import cities_markdown, technologies_markdown
from civtracker.models import (
    CityError,
    DatabaseError,
    Session,
    State,
    Technology,
    TechnologyStateError,
)
from civtracker.store import SessionError, connect, get_session
from civtracker.technologies import get_technologies_state, set_technology_state

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


class CommandError(Exception):
    """A command failed; users only see a generic message."""

    def __init__(self, detail: str = "", message: str = "Internal error") -> None:
        super().__init__(message)
        self.detail = detail


class ManagedError(CommandError):
    """A command failed in a way the user is told about."""

    def __init__(self, message: str) -> None:
        super().__init__(message, message)


class ExtractFromContextError(Exception):
    """The invocation lacks what a command needs to run."""


@dataclass
class CommandContext:
    """One command invocation: who called it, where, and the replies sent."""

    author_id: str | None
    guild_id: str | None
    conn: sqlite3.Connection | None = None
    replies: list[str] = field(default_factory=list)

    def say(self, text: str) -> None:
        self.replies.append(text)


def extract_session(ctx: CommandContext) -> tuple[sqlite3.Connection, str, Session]:
    """Return the database, the author and the guild's session of an invocation."""
    if ctx.conn is None:
        try:
            ctx.conn = connect()
        except DatabaseError as error:
            raise ExtractFromContextError(f"Database error: {error}") from error
    if ctx.author_id is None:
        raise ExtractFromContextError("No author id was in context")
    if ctx.guild_id is None:
        raise ExtractFromContextError("No guild id was in context")
    try:
        session = get_session(ctx.conn, ctx.guild_id)
    except SessionError as error:
        raise ExtractFromContextError(f"Session error: {error}") from error
    return ctx.conn, ctx.author_id, session


def _extract_for_command(ctx: CommandContext) -> tuple[sqlite3.Connection, str, Session]:
    try:
        return extract_session(ctx)
    except ExtractFromContextError as error:
        raise CommandError(str(error)) from error


@contextmanager
def _reported(command: str) -> Iterator[None]:
    try:
        yield
    except ManagedError:
        raise
    except CommandError as error:
        print(f"Error during {command} command: {error}", file=sys.stderr)
        raise


def add_city_command(ctx: CommandContext, name: str, user_id: str | None = None) -> None:
    """Record a city for the given user, or for the author."""
    with _reported("add city"):
        conn, author_id, session = _extract_for_command(ctx)
        member_id = user_id if user_id is not None else author_id
        try:
            exists = city_exists(conn, session.key, member_id, name)
        except CityError as error:
            raise ManagedError(str(error)) from error
        if exists:
            ctx.say("This city is already known")
            return
        try:
            add_city(conn, session.key, member_id, name)
        except CityError as error:
            raise CommandError(str(error)) from error
        ctx.say("City added")


def remove_city_command(ctx: CommandContext, name: str, user_id: str) -> None:
    """Forget a city of the given user."""
    conn, _, session = extract_session(ctx)
    try:
        remove_city(conn, session.key, user_id, name)
    except CityError as error:
        raise CommandError(str(error)) from error
    ctx.say("City removed")


def list_cities_command(ctx: CommandContext) -> None:
    """Reply with every member's cities."""
    conn, _, session = extract_session(ctx)
    ctx.say(cities_markdown(get_cities_state(conn, session.key)))


def autocomplete_city_name(ctx: CommandContext, partial: str) -> list[str]:
    """Suggest the session's city names matching ``partial``."""
    try:
        conn, _, session = extract_session(ctx)
    except ExtractFromContextError as error:
        print(
            f"Error during city remove autocomplete (extract from contexts): {error}",
            file=sys.stderr,
        )
        return []
    try:
        cities = find_city_by_partial_name(conn, session.key, partial)
    except CityError as error:
        print(f"Error during city remove autocomplete (find city): {error}", file=sys.stderr)
        return []
    return [city.name for city in cities]


def set_technology_command(
    ctx: CommandContext, state: State, tech: str, user_id: str | None = None
) -> None:
    """Change a user's state for a technology and reply with the session overview."""
    try:
        technology = Technology.from_name(tech)
    except ValueError as error:
        raise ManagedError("Unknown technology") from error

    with _reported("set tech"):
        conn, author_id, session = _extract_for_command(ctx)
        member_id = user_id if user_id is not None else author_id
        try:
            set_technology_state(conn, session.key, member_id, technology, state)
            overview = get_technologies_state(conn, session.key)
        except TechnologyStateError as error:
            raise CommandError(str(error)) from error
        ctx.say(technologies_markdown(overview))


def list_technologies_command(ctx: CommandContext) -> None:
    """Reply with the technologies owned and researched in the session."""
    conn, _, session = extract_session(ctx)
    try:
        overview = get_technologies_state(conn, session.key)
    except TechnologyStateError as error:
        raise CommandError(str(error)) from error
    ctx.say(technologies_markdown(overview))


def autocomplete_technology(partial: str) -> list[str]:
    """Suggest technology names containing ``partial``, ignoring ASCII case."""
    needle = partial.translate(_ASCII_LOWER)
    return [
        technology.value
        for technology in Technology
        if needle in technology.value.translate(_ASCII_LOWER)
    ]