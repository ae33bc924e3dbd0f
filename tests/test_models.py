import pytest

from civtracker.models import (
    CitiesState,
    City,
    CityError,
    CityInState,
    CityState,
    DatabaseError,
    Member,
    Members,
    MembersError,
    State,
    TechnologiesState,
    Technology,
    TechnologyInState,
    TechnologyStateError,
    UniqueConstraintError,
)


def test_unique_constraint_message():
    assert str(UniqueConstraintError()) == "Unique constraint error"


def test_unique_constraint_is_database_error():
    error = UniqueConstraintError()
    assert isinstance(error, DatabaseError)
    assert error.message == "unique constraint violated"


def test_database_error_keeps_message():
    error = DatabaseError("disk full")
    assert error.message == "disk full"
    assert "disk full" in str(error)
    assert str(error).startswith("Database error")


def test_members_error_wraps_database_error():
    inner = DatabaseError("boom")
    error = MembersError.wrap(inner)
    assert error.cause is inner
    assert str(error).startswith("Database error: `")
    assert str(inner) in str(error)


def test_city_error_wraps_members_error():
    inner = MembersError.wrap(DatabaseError("boom"))
    error = CityError.wrap(inner)
    assert error.cause is inner
    assert str(error).startswith("Members error: `")


def test_technology_state_error_wraps_members_error():
    inner = MembersError.wrap(DatabaseError("x"))
    error = TechnologyStateError.wrap(inner)
    assert str(error).startswith("Session members error: `")


def test_wrap_rejects_unrelated_error():
    with pytest.raises(TypeError):
        MembersError.wrap(ValueError("nope"))


def test_name_already_exists_message():
    assert str(MembersError.name_already_exists()) == "Already exist"
    assert str(CityError.name_already_exists()) == "Already exist"


def test_members_empty():
    members = Members.empty()
    assert len(members) == 0
    assert str(members) == ""


def test_members_add_iterate_and_display():
    members = Members.empty()
    members.add_member(Member("Alice", "1"))
    members.add_member(Member("Bob", "2"))
    assert [m.discord_id for m in members] == ["1", "2"]
    assert len(members) == 2
    assert str(members) == "Alice, Bob"


def test_members_remove_by_name():
    members = Members([Member("Alice", "1"), Member("Bob", "2"), Member("Alice", "3")])
    members.remove_member("Alice")
    assert [m.name for m in members] == ["Bob"]


def test_members_remove_unknown_keeps_all():
    members = Members([Member("Alice", "1")])
    members.remove_member("Zed")
    assert [m.name for m in members] == ["Alice"]


def test_city_in_state_name():
    entry = CityInState(City("Rome"), CityState.NOTHING)
    assert entry.city_name == "Rome"
    assert entry.state is CityState.NOTHING


def test_city_state_display():
    entry = CityInState(City("Rome"), CityState.TRADE_ROUTE_PLANNED_OR_ESTABLISHED)
    assert str(entry.state) == "TradeRoutePlannedOrEstablished"


def test_cities_state_add_cities_keeps_order():
    state = CitiesState()
    alice = Member("Alice", "1")
    bob = Member("Bob", "2")
    state.add_cities(alice, [CityInState(City("Rome"), CityState.NOTHING)])
    state.add_cities(bob, [])
    assert [member for member, _ in state.cities] == [alice, bob]
    assert [c.city_name for c in state.cities[0][1]] == ["Rome"]


def test_technology_iteration_order():
    technologies = list(Technology)
    assert technologies[0] is Technology.from_name("AdvancedFlight")
    assert technologies[-1] is Technology.from_name("Writing")


@pytest.mark.parametrize("technology", list(Technology))
def test_technology_from_name_round_trip(technology):
    assert Technology.from_name(str(technology)) is technology


def test_technology_from_name_is_case_sensitive():
    with pytest.raises(ValueError):
        Technology.from_name("alphabet")


def test_technology_names_are_unique():
    names = [str(t) for t in Technology]
    assert len(names) == len(set(names))
    assert [Technology.from_name(name) for name in names] == list(Technology)


@pytest.mark.parametrize("state", list(State))
def test_state_from_name_round_trip(state):
    assert State.from_name(str(state)) is state


def test_state_values():
    parsed = [State.from_name(name) for name in ["Researching", "Done", "Cancel"]]
    assert parsed == [State.RESEARCHING, State.DONE, State.CANCEL]
    assert parsed == list(State)


def test_state_from_unknown_name():
    with pytest.raises(ValueError):
        State.from_name("Paused")


def test_technology_in_state():
    entry = TechnologyInState(
        Technology.BRONZE_WORKING, [Member("Alice", "1"), Member("Bob", "2")]
    )
    assert entry.technology_name == "BronzeWorking"
    assert entry.member_names() == ["Alice", "Bob"]


def test_technologies_state_add():
    state = TechnologiesState()
    done = TechnologyInState(Technology.ALPHABET, [])
    search = TechnologyInState(Technology.WRITING, [])
    state.add_done(done)
    state.add_search(search)
    assert state.done == [done]
    assert state.search == [search]