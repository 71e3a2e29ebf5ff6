import argparse
import logging
import sys
from typing import List, Optional

from profile_mapper.colored_logging import (
    setup_colored_logging,
    get_colored_logger,
    log_highlight,
    log_progress,
    log_section,
    log_success,
)
from profile_mapper.config import load_profile
from profile_mapper.constants import CliDefaults
from profile_mapper.domain.models import Side
from profile_mapper.exceptions import ProfileMapperError
from profile_mapper.profile import Profile, ProfileConfiguration

# Configured in main() once the verbosity flags are known
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=CliDefaults.PROG_NAME,
        description="Resolve member names and inspect mapping profiles.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a YAML profile settings file. Uses a default profile when omitted.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the candidate name each member name resolves to."
    )
    resolve_parser.add_argument("names", nargs="+", help="Member names to resolve.")
    resolve_parser.add_argument(
        "--side",
        choices=sorted(CliDefaults.SIDES),
        default="source",
        help="Side the names belong to (default: source).",
    )

    subparsers.add_parser("inspect", help="Print a summary of the profile.")
    return parser


def _load(config_path: Optional[str]) -> ProfileConfiguration:
    if config_path:
        log_progress(logger, f"Loading profile settings from {config_path}")
        profile = load_profile(config_path)
    else:
        profile = Profile("default")
    return profile.seal()


def run_resolve(configuration: ProfileConfiguration, names: List[str], side_name: str) -> None:
    side = Side[CliDefaults.SIDES[side_name]]
    member_configuration = configuration.default_member_configuration
    for name in names:
        if configuration.is_ignored(name):
            log_highlight(logger, f"{name} is ignored by a global ignore rule")
            print(f"{name}\t<ignored>")
            continue
        print(f"{name}\t{member_configuration.resolve(name, side)}")


def run_inspect(configuration: ProfileConfiguration) -> None:
    log_section(logger, f"Profile {configuration.profile_name}")
    default = configuration.default_member_configuration
    print(f"profile_name: {configuration.profile_name}")
    print(f"source_convention: {type(default.source_convention).__name__}")
    print(f"destination_convention: {type(default.destination_convention).__name__}")
    print(f"prefixes: {list(default.prefixes)}")
    print(f"postfixes: {list(default.postfixes)}")
    print(f"destination_prefixes: {list(default.destination_prefixes)}")
    print(f"destination_postfixes: {list(default.destination_postfixes)}")
    print("aliases: " + str([(r.original_value, r.new_value) for r in default.replacements]))
    print(f"global_ignores: {list(configuration.global_ignores)}")
    print(f"member_configurations: {len(configuration.member_configurations)}")
    for name in ("allow_null_destination_values", "allow_null_collections",
                 "enable_null_propagation_for_query_mapping", "constructor_mapping_enabled"):
        print(f"{name}: {getattr(configuration, name)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_colored_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        use_colors=not args.no_color,
    )
    global logger
    logger = get_colored_logger(__name__)
    if args.verbose:
        logger.debug("Verbose mode enabled. DEBUG level logging activated.")

    try:
        configuration = _load(args.config)
        if args.command == "resolve":
            run_resolve(configuration, args.names, args.side)
        else:
            run_inspect(configuration)
    except ProfileMapperError as e:
        logger.error(str(e))
        return 1

    log_success(logger, "Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
