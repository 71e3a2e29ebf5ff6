"""
Core domain models for Profile Mapper.

These records describe intended mappings, the properties an external builder
produces from them, and the callbacks a profile defers until that builder
runs. None of them copy data or inspect live objects.
"""

import inspect
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from ..exceptions import ConfigurationError, ProfileSealedError


logger = logging.getLogger(__name__)


class Side(Enum):
    """Which end of a mapping a member name belongs to."""

    SOURCE = "source"
    DESTINATION = "destination"

    @property
    def opposite(self) -> "Side":
        return Side.DESTINATION if self is Side.SOURCE else Side.SOURCE


class MemberList(Enum):
    """Which side's members must all be satisfied when a map is validated."""

    SOURCE = "source"
    DESTINATION = "destination"
    NONE = "none"


# --- Generic type helpers ---


def is_generic_type_definition(type_: Any) -> bool:
    """
    Check whether a type still has unbound type parameters.

    ``Box`` (declared as ``class Box(Generic[T])``) and ``Box[T]`` are open;
    ``Box[int]`` and plain classes are not.
    """
    return bool(getattr(type_, "__parameters__", ()))


def generic_origin(type_: Any) -> Any:
    """Return the generic definition of a parameterized type, or the type itself."""
    return typing.get_origin(type_) or type_


def type_name(type_: Any) -> str:
    """Readable name for logs and CLI output."""
    if isinstance(type_, type) and not typing.get_args(type_):
        return type_.__qualname__
    return repr(type_)


@dataclass(frozen=True)
class TypePair:
    """A (source type, destination type) key."""

    source_type: Any
    destination_type: Any

    @property
    def is_open_generic(self) -> bool:
        return (is_generic_type_definition(self.source_type)
                or is_generic_type_definition(self.destination_type))

    def open_generic_type_pair(self) -> "TypePair":
        """The pair of generic definitions this (possibly closed) pair specializes."""
        return TypePair(generic_origin(self.source_type), generic_origin(self.destination_type))

    def __str__(self) -> str:
        return f"{type_name(self.source_type)} -> {type_name(self.destination_type)}"


class MappingExpression:
    """
    Type map configuration record returned by ``Profile.create_map``.

    The record keeps registration order significance inside the owning
    profile. Only a small fluent surface is offered here; per-member
    overrides and converters belong to the engine that consumes the profile.
    """

    def __init__(self, type_pair: TypePair, member_list: MemberList = MemberList.DESTINATION):
        self.type_pair = type_pair
        self.member_list = member_list
        self._ignored_members: List[str] = []
        self._included_bases: List[TypePair] = []
        self._reverse: Optional["MappingExpression"] = None
        self._sealed = False

    @property
    def source_type(self) -> Any:
        return self.type_pair.source_type

    @property
    def destination_type(self) -> Any:
        return self.type_pair.destination_type

    @property
    def is_open_generic(self) -> bool:
        return self.type_pair.is_open_generic

    @property
    def ignored_members(self) -> Tuple[str, ...]:
        return tuple(self._ignored_members)

    @property
    def included_bases(self) -> Tuple[TypePair, ...]:
        return tuple(self._included_bases)

    @property
    def reverse_type_map(self) -> Optional["MappingExpression"]:
        return self._reverse

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def _check_not_sealed(self, operation: str) -> None:
        if self._sealed:
            raise ProfileSealedError(
                f"Type map {self.type_pair} is sealed and cannot be changed",
                operation=operation,
            )

    def ignore_member(self, destination_member: str) -> "MappingExpression":
        """Exclude a destination member from automatic matching for this map."""
        self._check_not_sealed("ignore_member")
        self._ignored_members.append(destination_member)
        return self

    def include_base(self, source_base: Any, destination_base: Any) -> "MappingExpression":
        """Inherit configuration from the map registered for the base types."""
        self._check_not_sealed("include_base")
        self._included_bases.append(TypePair(source_base, destination_base))
        return self

    def reverse_map(self, member_list: MemberList = MemberList.NONE) -> "MappingExpression":
        """Record the opposite direction as well and return its record."""
        self._check_not_sealed("reverse_map")
        if self._reverse is None:
            reverse_pair = TypePair(self.destination_type, self.source_type)
            self._reverse = MappingExpression(reverse_pair, member_list)
        return self._reverse

    def seal(self) -> None:
        self._sealed = True
        if self._reverse is not None:
            self._reverse.seal()

    def __repr__(self) -> str:
        return f"MappingExpression({self.type_pair}, member_list={self.member_list.name})"


# Alias matching the glossary name of a registered mapping intent
TypeMapConfigRecord = MappingExpression


@dataclass
class PropertyMapRecord:
    """
    A destination member of a type map, as the external builder sees it.

    Per-property hooks receive this record and may adjust it, for example by
    marking it ignored.
    """

    type_pair: TypePair
    destination_name: str
    source_member_names: Tuple[str, ...] = ()
    ignored: bool = False

    @property
    def name(self) -> str:
        return self.destination_name


TypeMapHook = Callable[[MappingExpression], None]
PropertyCondition = Callable[[PropertyMapRecord], bool]
PropertyAction = Callable[[PropertyMapRecord], None]


@dataclass(frozen=True)
class PropertyMapHook:
    """Per-property deferred hook; ``condition`` is evaluated on each call, never at registration."""

    condition: PropertyCondition
    action: PropertyAction

    def __call__(self, property_map: PropertyMapRecord) -> bool:
        """Run ``action`` if ``condition`` holds for this record. Returns whether it ran."""
        if self.condition(property_map):
            self.action(property_map)
            return True
        return False


@dataclass(frozen=True)
class ValueTransformerConfiguration:
    """Transform applied to every mapped value of ``value_type``."""

    value_type: type
    transformer: Callable[[Any], Any]

    def is_match(self, member_type: Any) -> bool:
        return isinstance(member_type, type) and issubclass(member_type, self.value_type)


@dataclass(frozen=True)
class SourceResolver:
    """Fallback source-value provider: a single-argument function looked up by name."""

    name: str
    function: Callable[[Any], Any] = field(compare=False)

    def __post_init__(self):
        if not callable(self.function):
            raise ConfigurationError(
                f"Source resolver '{self.name}' is not callable",
                context={"resolver": repr(self.function)},
            )
        try:
            signature = inspect.signature(self.function)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Cannot inspect source resolver '{self.name}': {e}",
                context={"resolver": repr(self.function)},
            ) from e
        if not _accepts_single_argument(signature):
            raise ConfigurationError(
                f"Source resolver '{self.name}' must take exactly one positional argument",
                context={"signature": str(signature)},
                suggestions=["Wrap the function in a lambda taking only the source object"],
            )


def _accepts_single_argument(signature: inspect.Signature) -> bool:
    """True when exactly one positional parameter has no default value."""
    positional = [
        p for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    required = [p for p in positional if p.default is p.empty]
    required_keyword = [
        p for p in signature.parameters.values()
        if p.kind is p.KEYWORD_ONLY and p.default is p.empty
    ]
    return len(required) == 1 and not required_keyword
