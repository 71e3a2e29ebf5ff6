"""
Profiles: named scopes of naming rules and type map registrations.

A ``Profile`` is populated from one thread during startup. ``seal()`` then
copies everything it collected into a ``ProfileConfiguration``, an immutable
snapshot the external mapping builder and any number of concurrent readers
share without locking. Once sealed, the profile rejects further mutation
with ``ProfileSealedError``.

Example:
    >>> profile = Profile("Orders")
    >>> profile.recognize_alias("Id", "Identifier")
    >>> profile.create_map(OrderDto, Order)
    >>> configuration = profile.seal()
    >>> configuration.default_member_configuration.resolve("GetId", Side.DESTINATION)
    'Identifier'
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union
)

from .constants import ProfileDefaults
from .domain.member_configuration import MemberConfiguration
from .domain.models import (
    MappingExpression,
    MemberList,
    PropertyAction,
    PropertyCondition,
    PropertyMapHook,
    PropertyMapRecord,
    SourceResolver,
    TypeMapHook,
    TypePair,
    ValueTransformerConfiguration,
    generic_origin,
)
from .domain.naming import NamingConvention, PascalCaseNamingConvention
from .domain.transformers import NameSplitMember
from .exceptions import ConfigurationError, ProfileSealedError


logger = logging.getLogger(__name__)

MemberPredicate = Callable[[Any], bool]

OVERRIDE_NAMES = (
    "allow_null_destination_values",
    "allow_null_collections",
    "enable_null_propagation_for_query_mapping",
    "constructor_mapping_enabled",
)


@dataclass(frozen=True, eq=False)
class ProfileConfiguration:
    """
    Read-only snapshot of a sealed profile.

    Every collection is a tuple (or a read-only mapping) and every member
    configuration is a sealed copy, so the snapshot is safe to share between
    threads. Unset overrides stay ``None``; use ``resolve_override`` to fall
    back to the consumer's global default.
    """

    profile_name: str
    member_configurations: Tuple[MemberConfiguration, ...]
    type_map_configs: Tuple[MappingExpression, ...]
    open_type_map_configs: Tuple[MappingExpression, ...]
    global_ignores: Tuple[str, ...]
    all_type_map_actions: Tuple[TypeMapHook, ...]
    all_property_map_actions: Tuple[PropertyMapHook, ...]
    value_transformers: Tuple[ValueTransformerConfiguration, ...]
    source_extension_methods: Tuple[SourceResolver, ...]
    source_member_naming_convention: NamingConvention
    destination_member_naming_convention: NamingConvention
    allow_null_destination_values: Optional[bool] = None
    allow_null_collections: Optional[bool] = None
    enable_null_propagation_for_query_mapping: Optional[bool] = None
    constructor_mapping_enabled: Optional[bool] = None
    should_map_property: Optional[MemberPredicate] = None
    should_map_field: Optional[MemberPredicate] = None
    should_map_method: Optional[MemberPredicate] = None
    should_use_constructor: Optional[MemberPredicate] = None

    @property
    def default_member_configuration(self) -> MemberConfiguration:
        return self.member_configurations[0]

    @property
    def source_resolvers(self) -> Mapping[str, SourceResolver]:
        """Resolvers by name; a later registration under the same name wins."""
        return MappingProxyType({r.name: r for r in self.source_extension_methods})

    def is_ignored(self, member_name: str) -> bool:
        """True if the name starts with any global ignore prefix (case-sensitive)."""
        return any(member_name.startswith(prefix) for prefix in self.global_ignores)

    def find_open_generic(self, type_pair: TypePair) -> Optional[MappingExpression]:
        """
        Find the open generic record a closed pair specializes.

        Each side matches either the record's exact type or the generic
        definition of the requested type. A record registered as ``Box[T]``
        is compared through its definition ``Box``. Registration order
        decides ties.
        """
        generic_pair = type_pair.open_generic_type_pair()
        for record in self.open_type_map_configs:
            source_ok = generic_origin(record.source_type) in (
                type_pair.source_type, generic_pair.source_type
            )
            destination_ok = generic_origin(record.destination_type) in (
                type_pair.destination_type, generic_pair.destination_type
            )
            if source_ok and destination_ok:
                return record
        return None

    def resolve_override(self, name: str, global_default: bool) -> bool:
        """
        Resolve a tri-state override against the consumer's global default.

        Args:
            name: One of the override attribute names
            global_default: Value used when the profile leaves the override unset

        Raises:
            ValueError: If ``name`` is not an override
        """
        if name not in OVERRIDE_NAMES:
            raise ValueError(f"Unknown override '{name}'. Expected one of: {', '.join(OVERRIDE_NAMES)}")
        value = getattr(self, name)
        return global_default if value is None else value

    def run_type_map_hooks(self, type_map: MappingExpression) -> None:
        """Invoke every whole-type-map hook, in registration order."""
        for hook in self.all_type_map_actions:
            hook(type_map)

    def run_property_map_hooks(self, property_map: PropertyMapRecord) -> int:
        """Invoke every per-property hook whose condition holds. Returns how many ran."""
        return sum(1 for hook in self.all_property_map_actions if hook(property_map))


class Profile:
    """
    Named, mutable registry of naming rules and type map registrations.

    The first member configuration is the default and receives every
    prefix/postfix/alias convenience call. A new profile splits and joins
    names with the configured conventions (Pascal case unless told
    otherwise) and strips a destination-side ``Get`` prefix.

    Subclasses may override ``configure()`` to register their rules; it runs
    at the end of construction, before ``configuration_action``.
    """

    def __init__(
        self,
        profile_name: Optional[str] = None,
        configuration_action: Optional[Callable[["Profile"], None]] = None,
        *,
        allow_null_destination_values: Optional[bool] = None,
        allow_null_collections: Optional[bool] = None,
        enable_null_propagation_for_query_mapping: Optional[bool] = None,
        should_map_property: Optional[MemberPredicate] = None,
        should_map_field: Optional[MemberPredicate] = None,
        should_map_method: Optional[MemberPredicate] = None,
        should_use_constructor: Optional[MemberPredicate] = None,
        source_member_naming_convention: Optional[NamingConvention] = None,
        destination_member_naming_convention: Optional[NamingConvention] = None,
    ):
        cls = type(self)
        self._profile_name = profile_name or f"{cls.__module__}.{cls.__qualname__}"

        self._member_configurations: List[MemberConfiguration] = []
        self._type_map_configs: List[MappingExpression] = []
        self._open_type_map_configs: List[MappingExpression] = []
        self._global_ignores: List[str] = []
        self._all_type_map_actions: List[TypeMapHook] = []
        self._all_property_map_actions: List[PropertyMapHook] = []
        self._value_transformers: List[ValueTransformerConfiguration] = []
        self._source_extension_methods: List[SourceResolver] = []
        self._constructor_mapping_enabled: Optional[bool] = None
        self._snapshot: Optional[ProfileConfiguration] = None

        self._allow_null_destination_values = allow_null_destination_values
        self._allow_null_collections = allow_null_collections
        self._enable_null_propagation_for_query_mapping = enable_null_propagation_for_query_mapping
        self._should_map_property = should_map_property
        self._should_map_field = should_map_field
        self._should_map_method = should_map_method
        self._should_use_constructor = should_use_constructor

        self._source_member_naming_convention = (
            source_member_naming_convention or PascalCaseNamingConvention.instance()
        )
        self._destination_member_naming_convention = (
            destination_member_naming_convention or PascalCaseNamingConvention.instance()
        )

        self.add_member_configuration() \
            .use_naming_conventions(self._source_member_naming_convention,
                                    self._destination_member_naming_convention) \
            .recognize_destination_prefixes(*ProfileDefaults.DESTINATION_PREFIXES)

        self.configure()
        if configuration_action is not None:
            configuration_action(self)

    def configure(self) -> None:
        """Hook for subclasses; registers nothing by default."""

    # --- Sealing ---

    @property
    def is_sealed(self) -> bool:
        return self._snapshot is not None

    def _check_not_sealed(self, operation: str) -> None:
        if self._snapshot is not None:
            raise ProfileSealedError(
                f"Profile '{self._profile_name}' is sealed; '{operation}' is no longer allowed",
                profile_name=self._profile_name,
                operation=operation,
            )

    def seal(self) -> ProfileConfiguration:
        """
        Freeze the profile and return its read-only snapshot.

        Calling ``seal()`` again returns the same snapshot.
        """
        if self._snapshot is not None:
            return self._snapshot

        for record in self._type_map_configs:
            record.seal()
        for configuration in self._member_configurations:
            configuration.seal()

        self._snapshot = ProfileConfiguration(
            profile_name=self._profile_name,
            member_configurations=tuple(m.sealed_copy() for m in self._member_configurations),
            type_map_configs=tuple(self._type_map_configs),
            open_type_map_configs=tuple(self._open_type_map_configs),
            global_ignores=tuple(self._global_ignores),
            all_type_map_actions=tuple(self._all_type_map_actions),
            all_property_map_actions=tuple(self._all_property_map_actions),
            value_transformers=tuple(self._value_transformers),
            source_extension_methods=tuple(self._source_extension_methods),
            source_member_naming_convention=self._source_member_naming_convention,
            destination_member_naming_convention=self._destination_member_naming_convention,
            allow_null_destination_values=self._allow_null_destination_values,
            allow_null_collections=self._allow_null_collections,
            enable_null_propagation_for_query_mapping=self._enable_null_propagation_for_query_mapping,
            constructor_mapping_enabled=self._constructor_mapping_enabled,
            should_map_property=self._should_map_property,
            should_map_field=self._should_map_field,
            should_map_method=self._should_map_method,
            should_use_constructor=self._should_use_constructor,
        )
        logger.info(
            f"Sealed profile '{self._profile_name}': "
            f"{len(self._type_map_configs)} type maps "
            f"({len(self._open_type_map_configs)} open generic), "
            f"{len(self._member_configurations)} member configurations"
        )
        return self._snapshot

    # --- Read side (live, unsealed views) ---

    @property
    def profile_name(self) -> str:
        return self._profile_name

    @property
    def default_member_configuration(self) -> MemberConfiguration:
        return self._member_configurations[0]

    @property
    def member_configurations(self) -> Tuple[MemberConfiguration, ...]:
        return tuple(self._member_configurations)

    @property
    def type_map_configs(self) -> Tuple[MappingExpression, ...]:
        return tuple(self._type_map_configs)

    @property
    def open_type_map_configs(self) -> Tuple[MappingExpression, ...]:
        return tuple(self._open_type_map_configs)

    @property
    def global_ignores(self) -> Tuple[str, ...]:
        return tuple(self._global_ignores)

    @property
    def all_type_map_actions(self) -> Tuple[TypeMapHook, ...]:
        return tuple(self._all_type_map_actions)

    @property
    def all_property_map_actions(self) -> Tuple[PropertyMapHook, ...]:
        return tuple(self._all_property_map_actions)

    @property
    def value_transformers(self) -> Tuple[ValueTransformerConfiguration, ...]:
        return tuple(self._value_transformers)

    @property
    def source_extension_methods(self) -> Tuple[SourceResolver, ...]:
        return tuple(self._source_extension_methods)

    @property
    def constructor_mapping_enabled(self) -> Optional[bool]:
        return self._constructor_mapping_enabled

    # --- Scalar overrides ---

    @property
    def allow_null_destination_values(self) -> Optional[bool]:
        return self._allow_null_destination_values

    @allow_null_destination_values.setter
    def allow_null_destination_values(self, value: Optional[bool]) -> None:
        self._check_not_sealed("allow_null_destination_values")
        self._allow_null_destination_values = value

    @property
    def allow_null_collections(self) -> Optional[bool]:
        return self._allow_null_collections

    @allow_null_collections.setter
    def allow_null_collections(self, value: Optional[bool]) -> None:
        self._check_not_sealed("allow_null_collections")
        self._allow_null_collections = value

    @property
    def enable_null_propagation_for_query_mapping(self) -> Optional[bool]:
        return self._enable_null_propagation_for_query_mapping

    @enable_null_propagation_for_query_mapping.setter
    def enable_null_propagation_for_query_mapping(self, value: Optional[bool]) -> None:
        self._check_not_sealed("enable_null_propagation_for_query_mapping")
        self._enable_null_propagation_for_query_mapping = value

    @property
    def should_map_property(self) -> Optional[MemberPredicate]:
        return self._should_map_property

    @should_map_property.setter
    def should_map_property(self, predicate: Optional[MemberPredicate]) -> None:
        self._check_not_sealed("should_map_property")
        self._should_map_property = predicate

    @property
    def should_map_field(self) -> Optional[MemberPredicate]:
        return self._should_map_field

    @should_map_field.setter
    def should_map_field(self, predicate: Optional[MemberPredicate]) -> None:
        self._check_not_sealed("should_map_field")
        self._should_map_field = predicate

    @property
    def should_map_method(self) -> Optional[MemberPredicate]:
        return self._should_map_method

    @should_map_method.setter
    def should_map_method(self, predicate: Optional[MemberPredicate]) -> None:
        self._check_not_sealed("should_map_method")
        self._should_map_method = predicate

    @property
    def should_use_constructor(self) -> Optional[MemberPredicate]:
        return self._should_use_constructor

    @should_use_constructor.setter
    def should_use_constructor(self, predicate: Optional[MemberPredicate]) -> None:
        self._check_not_sealed("should_use_constructor")
        self._should_use_constructor = predicate

    @property
    def source_member_naming_convention(self) -> NamingConvention:
        return self._source_member_naming_convention

    @source_member_naming_convention.setter
    def source_member_naming_convention(self, convention: NamingConvention) -> None:
        self._check_not_sealed("source_member_naming_convention")
        self._source_member_naming_convention = convention
        self._sync_default_conventions()

    @property
    def destination_member_naming_convention(self) -> NamingConvention:
        return self._destination_member_naming_convention

    @destination_member_naming_convention.setter
    def destination_member_naming_convention(self, convention: NamingConvention) -> None:
        self._check_not_sealed("destination_member_naming_convention")
        self._destination_member_naming_convention = convention
        self._sync_default_conventions()

    def _sync_default_conventions(self) -> None:
        self.default_member_configuration.add_member(NameSplitMember(
            self._source_member_naming_convention,
            self._destination_member_naming_convention,
        ))

    def disable_constructor_mapping(self) -> None:
        self._check_not_sealed("disable_constructor_mapping")
        self._constructor_mapping_enabled = False

    # --- Type maps ---

    def create_map(
        self,
        source_type: Any,
        destination_type: Any,
        member_list: MemberList = MemberList.DESTINATION,
    ) -> MappingExpression:
        """
        Register the intent to map ``source_type`` to ``destination_type``.

        Args:
            source_type: Source class (may be an unbound generic)
            destination_type: Destination class (may be an unbound generic)
            member_list: Side whose members must all be satisfied on validation

        Returns:
            The mapping expression, open for further configuration until sealing
        """
        self._check_not_sealed("create_map")
        mapping = MappingExpression(TypePair(source_type, destination_type), member_list)
        self._type_map_configs.append(mapping)
        if mapping.is_open_generic:
            self._open_type_map_configs.append(mapping)
            logger.debug(f"Registered open generic map {mapping.type_pair}")
        else:
            logger.debug(f"Registered map {mapping.type_pair}")
        return mapping

    # --- Member configurations ---

    def add_member_configuration(self) -> MemberConfiguration:
        """Append an empty member configuration. The first one stays the default."""
        self._check_not_sealed("add_member_configuration")
        configuration = MemberConfiguration()
        self._member_configurations.append(configuration)
        return configuration

    def clear_prefixes(self) -> None:
        """Empty the default configuration's source prefix list."""
        self._check_not_sealed("clear_prefixes")
        self.default_member_configuration.clear_prefixes()

    def recognize_prefixes(self, *prefixes: str) -> None:
        self._check_not_sealed("recognize_prefixes")
        self.default_member_configuration.recognize_prefixes(*prefixes)

    def recognize_postfixes(self, *postfixes: str) -> None:
        self._check_not_sealed("recognize_postfixes")
        self.default_member_configuration.recognize_postfixes(*postfixes)

    def recognize_destination_prefixes(self, *prefixes: str) -> None:
        self._check_not_sealed("recognize_destination_prefixes")
        self.default_member_configuration.recognize_destination_prefixes(*prefixes)

    def recognize_destination_postfixes(self, *postfixes: str) -> None:
        self._check_not_sealed("recognize_destination_postfixes")
        self.default_member_configuration.recognize_destination_postfixes(*postfixes)

    def recognize_alias(self, original: str, alias: str) -> None:
        """Treat ``original`` as ``alias`` when resolving member names."""
        self._check_not_sealed("recognize_alias")
        self.default_member_configuration.add_replacement(original, alias)

    def replace_member_name(self, original: str, new_value: str) -> None:
        """Replace ``original`` by ``new_value`` when resolving member names."""
        self._check_not_sealed("replace_member_name")
        self.default_member_configuration.add_replacement(original, new_value)

    def add_global_ignore(self, property_name_starting_with: str) -> None:
        self._check_not_sealed("add_global_ignore")
        if property_name_starting_with in self._global_ignores:
            logger.warning(
                f"Global ignore prefix '{property_name_starting_with}' is already registered "
                f"in profile '{self._profile_name}'"
            )
        self._global_ignores.append(property_name_starting_with)

    # --- Deferred hooks ---

    def for_all_maps(self, configuration: TypeMapHook) -> None:
        """Run ``configuration`` on every type map the builder constructs."""
        self._check_not_sealed("for_all_maps")
        self._all_type_map_actions.append(configuration)

    def for_all_property_maps(self, condition: PropertyCondition, configuration: PropertyAction) -> None:
        """Run ``configuration`` on every property map for which ``condition`` holds."""
        self._check_not_sealed("for_all_property_maps")
        self._all_property_map_actions.append(PropertyMapHook(condition, configuration))

    # --- Value transformers and source resolvers ---

    def add_value_transformer(self, value_type: type, transformer: Callable[[Any], Any]) -> None:
        self._check_not_sealed("add_value_transformer")
        self._value_transformers.append(ValueTransformerConfiguration(value_type, transformer))

    def include_source_extension_methods(
        self,
        resolvers: Union[Mapping[str, Callable[[Any], Any]], Iterable[Callable[[Any], Any]]],
    ) -> None:
        """
        Register fallback source-value providers.

        Args:
            resolvers: Mapping of name to single-argument callable, or an
                iterable of named single-argument functions

        Raises:
            ConfigurationError: If a resolver is not a single-argument callable
        """
        self._check_not_sealed("include_source_extension_methods")
        if isinstance(resolvers, Mapping):
            items = list(resolvers.items())
        else:
            items = []
            for function in resolvers:
                name = getattr(function, "__name__", None)
                if not name or name == "<lambda>":
                    raise ConfigurationError(
                        "Unnamed source resolver; pass a mapping of name to function instead",
                        context={"resolver": repr(function)},
                    )
                items.append((name, function))

        added = [SourceResolver(name, function) for name, function in items]
        self._source_extension_methods.extend(added)
        logger.debug(f"Registered {len(added)} source resolvers in profile '{self._profile_name}'")

    def __repr__(self) -> str:
        state = "sealed" if self.is_sealed else "unsealed"
        return f"{type(self).__name__}({self._profile_name!r}, {state})"
