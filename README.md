# civtracker

civtracker keeps track of a shared turn-based strategy game session: who is
playing, which technologies each player owns or is researching, and which
cities each player has founded. Everything is stored in a small SQLite
database, whose tables are created when it is opened.

## Installation

```
pip install .
```

## Concepts

- A **session** (`models.Session`) belongs to one chat server (a guild). It
  has a name and a generated key.
- A **member** (`models.Member`) is a player in a session, identified by a
  chat user id.
- A **technology** is a member of the `models.Technology` enum, which a member
  marks with a `models.State`: `RESEARCHING`, `DONE` or `CANCEL` (cancel
  forgets the technology for that member).
- A **city** (`models.City`) is a named city owned by a member.

## Using the library

```python
from civtracker import cities, markdown, store, technologies
from civtracker.models import State, Technology

conn = store.connect("db.sqlite")

session = store.ensure_session(conn, "guild-1", "Sunday game")
store.ensure_session_member(conn, session.key, "user-1", "Alice")
store.ensure_session_member(conn, session.key, "user-2", "Bob")

technologies.set_technology_state(
    conn, session.key, "user-1", Technology.BRONZE_WORKING, State.DONE
)
technologies.set_technology_state(
    conn, session.key, "user-2", Technology.ALPHABET, State.RESEARCHING
)
cities.add_city(conn, session.key, "user-1", "Rome")

print(markdown.technologies_markdown(
    technologies.get_technologies_state(conn, session.key)
))
print(markdown.cities_markdown(cities.get_cities_state(conn, session.key)))
```

`store.connect()` called without a path opens the file named by the
`DB_FILE_PATH` environment variable, or `db.sqlite` if it is unset; a leading
`sqlite://` is accepted and stripped.

`technologies.get_technologies_state` lists technologies in the order of the
`Technology` enum, each with the members that own or research it.
`Technology.from_name` and `State.from_name` look values up by their display
name (for example `"BronzeWorking"`) and raise `ValueError` for unknown names.

Storage failures are raised as `store.SessionError`, `models.MembersError`,
`models.CityError` or `models.TechnologyStateError`, each describing the
underlying `models.DatabaseError`.

## Command logic

`civtracker.commands` holds the logic behind chat commands. Each function
takes a `CommandContext` with the author's user id, the guild id and an
optional database connection (opened with `store.connect()` if missing);
replies are appended to `ctx.replies`.

- `add_city_command`, `remove_city_command`, `list_cities_command`,
  `autocomplete_city_name`
- `set_technology_command`, `list_technologies_command`,
  `autocomplete_technology`

Errors meant for the user are raised as `ManagedError` (for example
"Unknown technology"); other failures raise `CommandError`. A missing author,
guild or session raises `ExtractFromContextError` from `extract_session`.

## Keeping sessions in sync

`civtracker.sync` creates sessions and members from guilds and members that
the caller describes with `GuildInfo` and `DiscordMember`: `sync_all` on
start-up, `sync_new_member` when someone joins, and `handle_event` to dispatch
a `ReadyEvent` or `MemberJoinEvent`. Bot accounts are skipped, and a member's
nickname is preferred over the user name. Failures are collected per guild and
member and raised together as a `SyncError`; `handle_event` prints them to
standard error instead.

## What this package does not do

civtracker does not connect to any chat service and has no command to start
a bot: the caller must receive messages and events, build `CommandContext`,
`ReadyEvent` and `MemberJoinEvent` values, and send the collected replies
back. There is no web interface either; sessions are read and changed only
through the library functions above.

## Running the tests

```
pip install ".[test]"
pytest
```