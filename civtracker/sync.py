"""Keep sessions and members in step with the guilds the bot can see."""

from __future__ import annotations

import sqlite3
import sys
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Mapping, Union

from civtracker.models import Member, MembersError
from civtracker.store import SessionError, ensure_session, ensure_session_member, get_session

MemberSyncFailure = Union[SessionError, MembersError]


class SyncError(Exception):
    """One or more guilds or members could not be synchronised."""

    def __init__(self, message: str, failures: list[tuple] | None = None) -> None:
        super().__init__(message)
        self.failures = list(failures or [])

    @classmethod
    def guilds(cls, failures: list[tuple[str, SessionError]]) -> "SyncError":
        return cls(f"Session synchronisation: {failures!r}", failures)

    @classmethod
    def members(
        cls, failures: list[tuple[str, str | None, MemberSyncFailure]]
    ) -> "SyncError":
        return cls(f"Members synchronisation: {failures!r}", failures)


@dataclass(frozen=True)
class GuildInfo:
    """A guild the bot belongs to."""

    id: str
    name: str


@dataclass(frozen=True)
class DiscordMember:
    """A user as seen in one guild."""

    id: str
    name: str
    nick: str | None = None
    bot: bool = False

    @property
    def display_name(self) -> str:
        return self.nick if self.nick is not None else self.name


@dataclass
class ReadyEvent:
    """The bot connected and sees these guilds and their members."""

    name: ClassVar[str] = "ready"

    guilds: list[GuildInfo] = field(default_factory=list)
    guild_members: dict[str, list[DiscordMember]] = field(default_factory=dict)


@dataclass
class MemberJoinEvent:
    """A user joined a guild."""

    name: ClassVar[str] = "guild_member_addition"

    guild_id: str
    member: DiscordMember


def _sync_member(conn: sqlite3.Connection, session_key: str, member: DiscordMember) -> Member:
    return ensure_session_member(conn, session_key, str(member.id), member.display_name)


def sync_guilds(conn: sqlite3.Connection, guilds: Iterable[GuildInfo]) -> None:
    """Make sure every guild has a session carrying its current name."""
    failures: list[tuple[str, SessionError]] = []
    for guild in guilds:
        try:
            ensure_session(conn, str(guild.id), guild.name)
        except SessionError as error:
            failures.append((guild.id, error))
    if failures:
        raise SyncError.guilds(failures)


def sync_members(
    conn: sqlite3.Connection, guild_members: Mapping[str, Iterable[DiscordMember]]
) -> None:
    """Register every human member of every guild in the guild's session."""
    failures: list[tuple[str, str | None, MemberSyncFailure]] = []
    for guild_id, members in guild_members.items():
        try:
            session = get_session(conn, str(guild_id))
        except SessionError as error:
            failures.append((guild_id, None, error))
            continue
        for member in members:
            if member.bot:
                continue
            try:
                _sync_member(conn, session.key, member)
            except MembersError as error:
                failures.append((guild_id, member.id, error))
    if failures:
        raise SyncError.members(failures)


def sync_all(
    conn: sqlite3.Connection,
    guilds: Iterable[GuildInfo],
    guild_members: Mapping[str, Iterable[DiscordMember]] | None = None,
) -> None:
    """Synchronise the guilds, then the members of each of them."""
    guilds = list(guilds)
    known_members = guild_members or {}
    sync_guilds(conn, guilds)
    sync_members(conn, {guild.id: known_members.get(guild.id, ()) for guild in guilds})


def sync_new_member(conn: sqlite3.Connection, guild_id: str, member: DiscordMember) -> None:
    """Register a member who just joined a guild."""
    try:
        session = get_session(conn, str(guild_id))
    except SessionError as error:
        raise SyncError.members([(guild_id, None, error)]) from error
    try:
        _sync_member(conn, session.key, member)
    except MembersError as error:
        raise SyncError.members([(guild_id, None, error)]) from error


def handle_event(conn: sqlite3.Connection, event: object) -> None:
    """React to a gateway event; failures are reported on stderr."""
    try:
        if isinstance(event, ReadyEvent):
            sync_all(conn, event.guilds, event.guild_members)
        elif isinstance(event, MemberJoinEvent):
            sync_new_member(conn, event.guild_id, event.member)
    except SyncError as error:
        print(f"Error during process of event {event.name}: {error}", file=sys.stderr)