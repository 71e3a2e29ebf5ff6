"""
Centralized constants for Profile Mapper.

Default naming rules and convention identifiers live here so the profile,
the settings loader and the CLI agree on them.
"""

from typing import Dict, List


# =============================================================================
# PROFILE DEFAULTS
# =============================================================================

class ProfileDefaults:
    """Defaults applied to every newly constructed profile."""

    # Destination-side prefix stripped by the default member configuration
    DESTINATION_PREFIXES: List[str] = ["Get"]

    DEFAULT_NAMING_CONVENTION = "pascal"


# =============================================================================
# NAMING CONVENTIONS
# =============================================================================

class NamingConventionNames:
    """Identifiers accepted wherever a built-in convention is named."""

    PASCAL = "pascal"
    LOWER_UNDERSCORE = "lower_underscore"
    EXACT = "exact"

    ALL = [PASCAL, LOWER_UNDERSCORE, EXACT]


class NamingPatterns:
    """Token-matching expressions of the built-in conventions."""

    # Upper-case runs before a new word, or an optional capital followed by lower case/digits
    PASCAL_CASE = r"[A-Z]+(?=$|[A-Z][a-z0-9])|[A-Z]?[a-z0-9]+|[A-Z]+"
    LOWER_UNDERSCORE = r"[A-Za-z0-9]+"
    EXACT_MATCH = r"^.*$"


# =============================================================================
# CLI
# =============================================================================

class CliDefaults:
    """Defaults for the command line entry point."""

    PROG_NAME = "profile-mapper"
    SIDES: Dict[str, str] = {
        "source": "SOURCE",
        "destination": "DESTINATION",
    }
