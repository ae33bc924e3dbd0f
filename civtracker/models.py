"""Domain objects shared by the bot and the storage layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, TypeVar


class DatabaseError(Exception):
    """A failure reported by the database."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"Database error: `{self.message}`"


class UniqueConstraintError(DatabaseError):
    """A write violated a uniqueness constraint."""

    def __init__(self) -> None:
        super().__init__("unique constraint violated")

    def __str__(self) -> str:
        return "Unique constraint error"


class _WrappingError(Exception):
    """An error that may carry a lower-level error as its cause."""

    _prefixes: ClassVar[tuple[tuple[type, str], ...]] = ()

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @classmethod
    def wrap(cls, error: Exception) -> "_WrappingError":
        """Build an instance describing ``error`` with the matching prefix."""
        for kind, prefix in cls._prefixes:
            if isinstance(error, kind):
                return cls(f"{prefix}: `{error}`", error)
        raise TypeError(f"{cls.__name__} cannot wrap {type(error).__name__}")


class MembersError(_WrappingError):
    """Failure while reading or writing session members."""

    _prefixes = ((DatabaseError, "Database error"),)

    @classmethod
    def name_already_exists(cls) -> "MembersError":
        return cls("Already exist")


class CityError(_WrappingError):
    """Failure while reading or writing cities."""

    _prefixes = (
        (DatabaseError, "Database error"),
        (MembersError, "Members error"),
    )

    @classmethod
    def name_already_exists(cls) -> "CityError":
        return cls("Already exist")


class TechnologyStateError(_WrappingError):
    """Failure while reading or writing technology states."""

    _prefixes = (
        (DatabaseError, "Database error"),
        (MembersError, "Session members error"),
    )


@dataclass
class Session:
    """A game session, bound to one guild."""

    name: str
    key: str


@dataclass
class Member:
    """A player taking part in a session."""

    name: str
    discord_id: str


@dataclass
class Members:
    """An ordered collection of session members."""

    members: list[Member] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Members":
        return cls()

    def add_member(self, member: Member) -> None:
        self.members.append(member)

    def remove_member(self, name: str) -> None:
        """Drop every member called ``name``."""
        self.members = [member for member in self.members if member.name != name]

    def __iter__(self) -> Iterator[Member]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __str__(self) -> str:
        return ", ".join(member.name for member in self.members)


@dataclass
class City:
    """A city founded by a member."""

    name: str


class CityState(Enum):
    NOTHING = "Nothing"
    TRADE_ROUTE_PLANNED_OR_ESTABLISHED = "TradeRoutePlannedOrEstablished"

    def __str__(self) -> str:
        return self.value


@dataclass
class CityInState:
    """A city together with its trade state."""

    city: City
    state: CityState

    @property
    def city_name(self) -> str:
        return self.city.name


@dataclass
class CitiesState:
    """Every member of a session with the cities they own."""

    cities: list[tuple[Member, list[CityInState]]] = field(default_factory=list)

    def add_cities(self, member: Member, cities: list[CityInState]) -> None:
        self.cities.append((member, cities))


_E = TypeVar("_E", bound=Enum)


def _lookup(enum_cls: type[_E], name: str) -> _E:
    for item in enum_cls:
        if item.value == name:
            return item
    raise ValueError(f"unknown {enum_cls.__name__}: {name!r}")


class Technology(Enum):
    ADVANCED_FLIGHT = "AdvancedFlight"
    ALPHABET = "Alphabet"
    AMPHIBIOUS_WARFARE = "AmphibiousWarfare"
    ASTRONOMY = "Astronomy"
    ATOMIC_THEORY = "AtomicTheory"
    AUTOMOBILE = "Automobile"
    AVIONICS = "Avionics"
    BANKING = "Banking"
    BRIDGE_BUILDING = "BridgeBuilding"
    BRONZE_WORKING = "BronzeWorking"
    CEREMONIAL_BURIAL = "CeremonialBurial"
    CHEMISTRY = "Chemistry"
    CHIVALRY = "Chivalry"
    CODE_OF_LAWS = "CodeOfLaws"
    COMBINED_ARMS = "CombinedArms"
    COMBUSTION = "Combustion"
    COMBUSTION_2 = "Combustion2"
    COMMUNISM = "Communism"
    COMPUTERS = "Computers"
    CONSCRIPTION = "Conscription"
    CONSTRUCTION = "Construction"
    CURRENCY = "Currency"
    DEMOCRACY = "Democracy"
    ECONOMICS = "Economics"
    ELECTRICITY = "Electricity"
    ELECTRONICS = "Electronics"
    ENGINEERING = "Engineering"
    ENVIRONMENTALISM = "Environmentalism"
    ESPIONAGE = "Espionage"
    EXPLOSIVES = "Explosives"
    FEUDALISM = "Feudalism"
    FLIGHT = "Flight"
    FLIGHT_2 = "Flight2"
    FUSION_POWER = "FusionPower"
    GUERILLA_WARFARE = "GuerillaWarfare"
    GUNPOWDER = "Gunpowder"
    HORSEBACK_RIDING = "HorsebackRiding"
    INDUSTRIALIZATION = "Industrialization"
    INVENTION = "Invention"
    IRON_WORKING = "IronWorking"
    LASER = "Laser"
    LEADERSHIP = "Leadership"
    LITERACY = "Literacy"
    MACHINE_TOOLS = "MachineTools"
    MAGNETISM = "Magnetism"
    MAP_MAKING = "MapMaking"
    MASONRY = "Masonry"
    MASS_PRODUCTION = "MassProduction"
    MATHEMATICS = "Mathematics"
    MECHANIZATION = "Mechanization"
    MEDICINE = "Medicine"
    METALLURGY = "Metallurgy"
    MICROBIOLOGY = "Microbiology"
    MINIATURIZATION = "Miniaturization"
    MOBILE_WARFARE = "MobileWarfare"
    MONARCHY = "Monarchy"
    MONOTHEISM = "Monotheism"
    MYSTICISM = "Mysticism"
    NATIONALISM = "Nationalism"
    NAVIGATION = "Navigation"
    NUCLEAR_FISSION = "NuclearFission"
    NUCLEAR_POWER = "NuclearPower"
    PHILOSOPHY = "Philosophy"
    PHYSICS = "Physics"
    PLASTICS = "Plastics"
    POLYTHEISM = "Polytheism"
    POTTERY = "Pottery"
    RADAR = "Radar"
    RADIO = "Radio"
    RADIO_2 = "Radio2"
    RAILROAD = "Railroad"
    RECYCLING = "Recycling"
    REFINING = "Refining"
    REFRIGERATION = "Refrigeration"
    ROBOTICS = "Robotics"
    ROCKETRY = "Rocketry"
    SANITATION = "Sanitation"
    SEAFARING = "Seafaring"
    SPACE_FLIGHT = "SpaceFlight"
    SPACE_FLIGHT_2 = "SpaceFlight2"
    STEALTH = "Stealth"
    STEAM_ENGINE = "SteamEngine"
    STEEL = "Steel"
    SUPERCONDUCTORS = "Superconductors"
    TACTICS = "Tactics"
    THE_CORPORATION = "TheCorporation"
    THE_REPUBLIC = "TheRepublic"
    THE_WHEEL = "TheWheel"
    THEOCRACY = "Theocracy"
    THEOLOGY = "Theology"
    THEORY_OF_GRAVITY = "TheoryOfGravity"
    TRADE = "Trade"
    UNIVERSITY = "University"
    WARRIOR_CODE = "WarriorCode"
    WRITING = "Writing"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Technology":
        """Look a technology up by its exact display name."""
        return _lookup(cls, name)


class State(Enum):
    RESEARCHING = "Researching"
    DONE = "Done"
    CANCEL = "Cancel"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "State":
        """Look a state up by its exact display name."""
        return _lookup(cls, name)


@dataclass
class TechnologyInState:
    """A technology with the members that share a given state for it."""

    technology: Technology
    members: list[Member] = field(default_factory=list)

    @property
    def technology_name(self) -> str:
        return self.technology.value

    def member_names(self) -> list[str]:
        return [member.name for member in self.members]


@dataclass
class TechnologiesState:
    """Technologies done and being researched across a session."""

    done: list[TechnologyInState] = field(default_factory=list)
    search: list[TechnologyInState] = field(default_factory=list)

    def add_done(self, value: TechnologyInState) -> None:
        self.done.append(value)

    def add_search(self, value: TechnologyInState) -> None:
        self.search.append(value)