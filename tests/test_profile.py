"""
Unit tests for the Profile registry and its sealed snapshot.
"""
import unittest
from concurrent.futures import ThreadPoolExecutor
from typing import Generic, TypeVar
from unittest.mock import Mock

from profile_mapper.domain.models import (
    MemberList,
    PropertyMapRecord,
    Side,
    TypePair,
)
from profile_mapper.domain.naming import (
    LowerUnderscoreNamingConvention,
    PascalCaseNamingConvention,
)
from profile_mapper.domain.transformers import NameSplitMember
from profile_mapper.exceptions import ConfigurationError, ProfileSealedError
from profile_mapper.profile import Profile, ProfileConfiguration


T = TypeVar("T")


class Box(Generic[T]):
    pass


class BoxDto(Generic[T]):
    pass


class Order:
    pass


class OrderDto:
    pass


class OrderProfile(Profile):
    def configure(self):
        self.recognize_prefixes("Src")
        self.create_map(Order, OrderDto)


def simulate_builder(configuration, properties_by_map):
    """Walk type maps the way an external builder would, running every hook."""
    for type_map in configuration.type_map_configs:
        configuration.run_type_map_hooks(type_map)
        for name in properties_by_map.get(type_map.type_pair, []):
            configuration.run_property_map_hooks(PropertyMapRecord(type_map.type_pair, name))


class TestProfileDefaults(unittest.TestCase):
    """State of a freshly constructed profile."""

    def setUp(self):
        self.profile = Profile("Orders")

    def test_profile_name(self):
        self.assertEqual(self.profile.profile_name, "Orders")

    def test_default_name_is_qualified_class_name(self):
        self.assertEqual(OrderProfile().profile_name, f"{__name__}.OrderProfile")

    def test_one_default_member_configuration(self):
        self.assertEqual(len(self.profile.member_configurations), 1)
        default = self.profile.default_member_configuration
        split = default.get_transformer(NameSplitMember)
        self.assertIs(split.source_convention, PascalCaseNamingConvention.instance())
        self.assertIs(split.destination_convention, PascalCaseNamingConvention.instance())

    def test_get_is_a_destination_prefix(self):
        default = self.profile.default_member_configuration
        self.assertEqual(default.destination_prefixes, ("Get",))
        self.assertEqual(default.prefixes, ())

    def test_overrides_unset(self):
        self.assertIsNone(self.profile.allow_null_destination_values)
        self.assertIsNone(self.profile.allow_null_collections)
        self.assertIsNone(self.profile.enable_null_propagation_for_query_mapping)
        self.assertIsNone(self.profile.constructor_mapping_enabled)

    def test_constructor_options(self):
        predicate = Mock(return_value=True)
        profile = Profile(
            "Custom",
            allow_null_collections=False,
            should_map_field=predicate,
            source_member_naming_convention=LowerUnderscoreNamingConvention.instance(),
        )
        self.assertFalse(profile.allow_null_collections)
        self.assertIs(profile.should_map_field, predicate)
        self.assertEqual(profile.default_member_configuration.resolve("user_id", Side.SOURCE), "UserId")

    def test_configure_and_configuration_action(self):
        action = Mock()
        profile = OrderProfile("Orders", action)
        action.assert_called_once_with(profile)
        self.assertEqual(profile.default_member_configuration.prefixes, ("Src",))
        self.assertEqual(len(profile.type_map_configs), 1)


class TestNameResolution(unittest.TestCase):
    """Convenience registrations flow into the default member configuration."""

    def setUp(self):
        self.profile = Profile("Naming")

    def test_get_prefix_and_alias(self):
        self.profile.replace_member_name("Id", "Identifier")
        default = self.profile.default_member_configuration
        self.assertEqual(default.resolve("GetId", Side.DESTINATION), "Identifier")

    def test_source_prefix_matches_default_get_prefix(self):
        self.profile.recognize_prefixes("Src")
        default = self.profile.seal().default_member_configuration
        self.assertTrue(default.is_match("SrcName", "GetName"))
        self.assertEqual(default.find_match("SrcName", ["GetName"]), "GetName")

    def test_alias_and_replace_are_synonyms(self):
        other = Profile("Other")
        self.profile.recognize_alias("ID", "Id")
        other.replace_member_name("ID", "Id")
        self.assertEqual(self.profile.default_member_configuration.replacements,
                         other.default_member_configuration.replacements)

    def test_clear_prefixes_only_touches_source_prefixes(self):
        self.profile.recognize_prefixes("Src")
        self.profile.recognize_postfixes("Dto")
        self.profile.recognize_destination_postfixes("Model")
        self.profile.clear_prefixes()

        default = self.profile.default_member_configuration
        self.assertEqual(default.prefixes, ())
        self.assertEqual(default.postfixes, ("Dto",))
        self.assertEqual(default.destination_prefixes, ("Get",))
        self.assertEqual(default.destination_postfixes, ("Model",))

    def test_added_member_configuration_is_not_default(self):
        extra = self.profile.add_member_configuration()
        self.profile.recognize_prefixes("Src")
        self.assertEqual(len(self.profile.member_configurations), 2)
        self.assertIs(self.profile.member_configurations[1], extra)
        self.assertEqual(extra.prefixes, ())
        self.assertEqual(extra.transformers, ())
        self.assertEqual(self.profile.default_member_configuration.prefixes, ("Src",))

    def test_changing_conventions_updates_default_configuration(self):
        self.profile.source_member_naming_convention = LowerUnderscoreNamingConvention.instance()
        default = self.profile.default_member_configuration
        self.assertIs(default.source_convention, LowerUnderscoreNamingConvention.instance())
        self.assertEqual(default.destination_prefixes, ("Get",))


class TestTypeMaps(unittest.TestCase):
    """create_map records and the open generic index."""

    def setUp(self):
        self.profile = Profile("Maps")

    def test_records_keep_insertion_order(self):
        first = self.profile.create_map(Order, OrderDto)
        second = self.profile.create_map(OrderDto, Order, MemberList.SOURCE)
        self.assertEqual(self.profile.type_map_configs, (first, second))
        self.assertEqual(first.member_list, MemberList.DESTINATION)
        self.assertEqual(second.member_list, MemberList.SOURCE)

    def test_open_generic_on_either_side(self):
        both = self.profile.create_map(Box, BoxDto)
        source_only = self.profile.create_map(Box, OrderDto)
        destination_only = self.profile.create_map(Order, BoxDto)
        self.assertEqual(self.profile.open_type_map_configs, (both, source_only, destination_only))
        self.assertTrue(all(r in self.profile.type_map_configs
                            for r in (both, source_only, destination_only)))

    def test_closed_generic_is_not_open(self):
        closed = self.profile.create_map(Box[int], BoxDto[int])
        self.assertIn(closed, self.profile.type_map_configs)
        self.assertNotIn(closed, self.profile.open_type_map_configs)

    def test_find_open_generic_for_closed_pair(self):
        self.profile.create_map(Order, OrderDto)
        open_map = self.profile.create_map(Box, BoxDto)
        configuration = self.profile.seal()
        self.assertIs(configuration.find_open_generic(TypePair(Box[int], BoxDto[int])), open_map)
        self.assertIsNone(configuration.find_open_generic(TypePair(Order, OrderDto)))

    def test_find_open_generic_for_subscripted_type_var_record(self):
        open_map = self.profile.create_map(Box[T], OrderDto)
        self.assertIn(open_map, self.profile.open_type_map_configs)
        configuration = self.profile.seal()
        self.assertIs(configuration.find_open_generic(TypePair(Box[int], OrderDto)), open_map)
        self.assertIsNone(configuration.find_open_generic(TypePair(BoxDto[int], OrderDto)))

    def test_mapping_expression_fluent_surface(self):
        mapping = self.profile.create_map(Order, OrderDto).ignore_member("Secret")
        reverse = mapping.reverse_map()
        self.assertEqual(mapping.ignored_members, ("Secret",))
        self.assertEqual(reverse.type_pair, TypePair(OrderDto, Order))
        self.assertEqual(reverse.member_list, MemberList.NONE)
        self.assertIs(mapping.reverse_map(), reverse)

    def test_include_base_records_pair(self):
        mapping = self.profile.create_map(Order, OrderDto).include_base(object, object)
        self.assertEqual(mapping.included_bases, (TypePair(object, object),))

    def test_reverse_map_sealed_with_parent(self):
        reverse = self.profile.create_map(Order, OrderDto).reverse_map()
        self.profile.seal()
        with self.assertRaises(ProfileSealedError):
            reverse.ignore_member("Secret")


class TestGlobalIgnores(unittest.TestCase):
    """Global ignore rules are ordinal prefix tests."""

    def test_prefix_not_substring(self):
        profile = Profile("Ignores")
        profile.add_global_ignore("Internal")
        configuration = profile.seal()
        self.assertTrue(configuration.is_ignored("InternalCache"))
        self.assertFalse(configuration.is_ignored("MyInternalCache"))
        self.assertFalse(configuration.is_ignored("internalCache"))

    def test_duplicate_prefix_logs_warning(self):
        profile = Profile("Ignores")
        profile.add_global_ignore("Internal")
        with self.assertLogs("profile_mapper.profile", level="WARNING"):
            profile.add_global_ignore("Internal")
        self.assertEqual(profile.global_ignores, ("Internal", "Internal"))


class TestDeferredHooks(unittest.TestCase):
    """Hooks run only when the builder invokes them."""

    def test_property_hook_runs_once_per_matching_property(self):
        profile = Profile("Hooks")
        condition = Mock(side_effect=lambda p: p.name == "X")
        action = Mock()
        profile.for_all_property_maps(condition, action)
        profile.create_map(Order, OrderDto)
        profile.create_map(Box[int], BoxDto[int])

        condition.assert_not_called()

        configuration = profile.seal()
        simulate_builder(configuration, {
            TypePair(Order, OrderDto): ["X", "Y", "Z"],
            TypePair(Box[int], BoxDto[int]): ["X", "XY"],
        })

        self.assertEqual(condition.call_count, 5)
        self.assertEqual(action.call_count, 2)
        self.assertEqual([c.args[0].name for c in action.call_args_list], ["X", "X"])

    def test_property_hook_can_adjust_record(self):
        profile = Profile("Hooks")
        profile.for_all_property_maps(lambda p: p.name.startswith("Audit"),
                                      lambda p: setattr(p, "ignored", True))
        configuration = profile.seal()
        record = PropertyMapRecord(TypePair(Order, OrderDto), "AuditTrail")
        self.assertEqual(configuration.run_property_map_hooks(record), 1)
        self.assertTrue(record.ignored)

    def test_type_map_hooks_run_in_registration_order(self):
        profile = Profile("Hooks")
        calls = []
        profile.for_all_maps(lambda m: calls.append(("first", m.type_pair)))
        profile.for_all_maps(lambda m: calls.append(("second", m.type_pair)))
        profile.create_map(Order, OrderDto)
        simulate_builder(profile.seal(), {})
        pair = TypePair(Order, OrderDto)
        self.assertEqual(calls, [("first", pair), ("second", pair)])


class TestSourceResolvers(unittest.TestCase):
    """Explicit registry of fallback source-value providers."""

    def setUp(self):
        self.profile = Profile("Resolvers")

    def test_mapping_registration(self):
        self.profile.include_source_extension_methods({"full_name": lambda o: "x"})
        resolvers = self.profile.seal().source_resolvers
        self.assertEqual(list(resolvers), ["full_name"])
        self.assertEqual(resolvers["full_name"].function(object()), "x")

    def test_named_functions(self):
        def total(order):
            return 1

        def count(order, extra=None):
            return 2

        self.profile.include_source_extension_methods([total, count])
        names = [r.name for r in self.profile.source_extension_methods]
        self.assertEqual(names, ["total", "count"])

    def test_lambda_in_iterable_rejected(self):
        with self.assertRaises(ConfigurationError):
            self.profile.include_source_extension_methods([lambda o: o])

    def test_two_argument_function_rejected(self):
        def pair(a, b):
            return a

        with self.assertRaises(ConfigurationError):
            self.profile.include_source_extension_methods({"pair": pair})

    def test_non_callable_rejected(self):
        with self.assertRaises(ConfigurationError):
            self.profile.include_source_extension_methods({"value": 42})


class TestValueTransformers(unittest.TestCase):
    def test_registered_in_order(self):
        profile = Profile("Values")
        profile.add_value_transformer(str, str.strip)
        profile.add_value_transformer(int, abs)
        transformers = profile.seal().value_transformers
        self.assertEqual([t.value_type for t in transformers], [str, int])
        self.assertTrue(transformers[0].is_match(str))
        self.assertFalse(transformers[0].is_match(int))
        self.assertTrue(transformers[1].is_match(bool))


class TestSealing(unittest.TestCase):
    """seal() produces a read-only snapshot and locks the profile."""

    def setUp(self):
        self.profile = Profile("Sealed")
        self.mapping = self.profile.create_map(Order, OrderDto)
        self.profile.add_global_ignore("Internal")
        self.configuration = self.profile.seal()

    def test_snapshot_contents(self):
        self.assertIsInstance(self.configuration, ProfileConfiguration)
        self.assertEqual(self.configuration.profile_name, "Sealed")
        self.assertEqual(self.configuration.type_map_configs, (self.mapping,))
        self.assertEqual(self.configuration.global_ignores, ("Internal",))
        self.assertIsInstance(self.configuration.member_configurations, tuple)

    def test_seal_is_idempotent(self):
        self.assertIs(self.profile.seal(), self.configuration)
        self.assertTrue(self.profile.is_sealed)

    def test_snapshot_is_frozen(self):
        with self.assertRaises(AttributeError):
            self.configuration.profile_name = "Other"

    def test_snapshot_member_configuration_is_a_sealed_copy(self):
        snapshot_default = self.configuration.default_member_configuration
        self.assertIsNot(snapshot_default, self.profile.default_member_configuration)
        self.assertTrue(snapshot_default.is_sealed)
        with self.assertRaises(ProfileSealedError):
            snapshot_default.recognize_prefixes("Get")

    def test_profile_mutation_rejected(self):
        operations = [
            lambda: self.profile.create_map(OrderDto, Order),
            lambda: self.profile.recognize_alias("A", "B"),
            lambda: self.profile.replace_member_name("A", "B"),
            lambda: self.profile.recognize_prefixes("Get"),
            lambda: self.profile.clear_prefixes(),
            lambda: self.profile.add_global_ignore("X"),
            lambda: self.profile.add_member_configuration(),
            lambda: self.profile.for_all_maps(print),
            lambda: self.profile.for_all_property_maps(bool, print),
            lambda: self.profile.disable_constructor_mapping(),
            lambda: setattr(self.profile, "allow_null_collections", True),
            lambda: self.profile.default_member_configuration.recognize_prefixes("Get"),
            lambda: self.mapping.ignore_member("Secret"),
        ]
        for operation in operations:
            with self.subTest(operation=operation):
                with self.assertRaises(ProfileSealedError):
                    operation()

    def test_sealed_error_names_operation(self):
        with self.assertRaises(ProfileSealedError) as ctx:
            self.profile.create_map(OrderDto, Order)
        self.assertEqual(ctx.exception.context["operation"], "create_map")
        self.assertEqual(ctx.exception.context["profile_name"], "Sealed")

    def test_concurrent_reads(self):
        names = [f"GetField{i}" for i in range(200)]
        default = self.configuration.default_member_configuration
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda n: default.resolve(n, Side.DESTINATION), names))
        self.assertEqual(results, [n[3:] for n in names])


class TestOverrides(unittest.TestCase):
    """Tri-state overrides resolve against the consumer's global default."""

    def test_unset_falls_back_to_global_default(self):
        configuration = Profile("Overrides").seal()
        self.assertTrue(configuration.resolve_override("allow_null_collections", True))
        self.assertFalse(configuration.resolve_override("constructor_mapping_enabled", False))

    def test_explicit_values_win(self):
        profile = Profile("Overrides")
        profile.allow_null_destination_values = False
        profile.disable_constructor_mapping()
        configuration = profile.seal()
        self.assertFalse(configuration.resolve_override("allow_null_destination_values", True))
        self.assertFalse(configuration.resolve_override("constructor_mapping_enabled", True))
        self.assertFalse(configuration.constructor_mapping_enabled)

    def test_unknown_override(self):
        with self.assertRaises(ValueError):
            Profile("Overrides").seal().resolve_override("profile_name", True)


if __name__ == "__main__":
    unittest.main()
