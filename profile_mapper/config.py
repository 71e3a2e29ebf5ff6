"""
Profile settings files.

A profile can be described in YAML and validated with pydantic before it is
turned into a ``Profile``. Validation problems are logged one location at a
time and surfaced as a single ``ConfigurationError``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .constants import NamingConventionNames, ProfileDefaults
from .domain.naming import NamingConvention, get_naming_convention
from .exceptions import ConfigurationError
from .profile import Profile


logger = logging.getLogger(__name__)


# --- Pydantic Models for the Settings Schema ---


class CustomConventionSettings(BaseModel):
    """A user-defined naming convention: token regex plus separator."""

    model_config = ConfigDict(extra="forbid")

    pattern: str = Field(..., min_length=1, description="Regular expression matching one token.")
    separator: str = Field("", description="String placed between tokens when joining.")


class AliasSettings(BaseModel):
    """One alias (substitution) pair."""

    model_config = ConfigDict(extra="forbid")

    original: str = Field(..., min_length=1, description="Name as it appears on the member.")
    alias: str = Field(..., min_length=1, description="Name it should be compared as.")


ConventionSetting = Union[str, CustomConventionSettings]


class ProfileSettings(BaseModel):
    """Pydantic schema for a profile settings file."""

    model_config = ConfigDict(extra="ignore")

    profile_name: str = Field(..., min_length=1, description="Name of the profile.")
    allow_null_destination_values: Optional[bool] = Field(
        None, description="Override for null destination values; unset defers to the global default."
    )
    allow_null_collections: Optional[bool] = Field(
        None, description="Override for null collections; unset defers to the global default."
    )
    enable_null_propagation_for_query_mapping: Optional[bool] = Field(
        None, description="Override for null propagation in query projections."
    )
    source_member_naming_convention: ConventionSetting = Field(
        ProfileDefaults.DEFAULT_NAMING_CONVENTION,
        description="Built-in convention name or {pattern, separator}.",
    )
    destination_member_naming_convention: ConventionSetting = Field(
        ProfileDefaults.DEFAULT_NAMING_CONVENTION,
        description="Built-in convention name or {pattern, separator}.",
    )
    clear_prefixes: bool = Field(False, description="Empty the source prefix list before adding prefixes.")
    prefixes: List[str] = Field(default_factory=list, description="Source-side prefixes to strip.")
    postfixes: List[str] = Field(default_factory=list, description="Source-side postfixes to strip.")
    destination_prefixes: List[str] = Field(
        default_factory=list, description="Destination-side prefixes to strip (in addition to 'Get')."
    )
    destination_postfixes: List[str] = Field(
        default_factory=list, description="Destination-side postfixes to strip."
    )
    aliases: List[AliasSettings] = Field(default_factory=list, description="Alias pairs, first match wins.")
    global_ignores: List[str] = Field(
        default_factory=list, description="Member name prefixes excluded from automatic matching."
    )
    disable_constructor_mapping: bool = Field(False, description="Turn constructor mapping off.")

    @field_validator("source_member_naming_convention", "destination_member_naming_convention")
    @classmethod
    def check_known_convention(cls, v: ConventionSetting) -> ConventionSetting:
        if isinstance(v, str) and v not in NamingConventionNames.ALL:
            raise ValueError(
                f"Unknown naming convention '{v}'. Use one of: {', '.join(NamingConventionNames.ALL)}"
            )
        return v

    @field_validator("prefixes", "postfixes", "destination_prefixes", "destination_postfixes",
                     "global_ignores")
    @classmethod
    def check_non_empty_strings(cls, v: List[str]) -> List[str]:
        for item in v:
            if not item:
                raise ValueError("Prefix, postfix and ignore entries cannot be empty strings.")
        return v


def build_naming_convention(setting: ConventionSetting) -> NamingConvention:
    """Turn a convention setting into a convention instance."""
    if isinstance(setting, CustomConventionSettings):
        return NamingConvention(setting.pattern, setting.separator)
    return get_naming_convention(setting)


def build_profile(settings: ProfileSettings) -> Profile:
    """
    Create an unsealed profile from validated settings.

    Args:
        settings: Validated settings model

    Returns:
        A profile with every listed rule registered on its default member configuration
    """
    profile = Profile(
        settings.profile_name,
        allow_null_destination_values=settings.allow_null_destination_values,
        allow_null_collections=settings.allow_null_collections,
        enable_null_propagation_for_query_mapping=settings.enable_null_propagation_for_query_mapping,
        source_member_naming_convention=build_naming_convention(settings.source_member_naming_convention),
        destination_member_naming_convention=build_naming_convention(
            settings.destination_member_naming_convention
        ),
    )

    if settings.clear_prefixes:
        profile.clear_prefixes()
    if settings.prefixes:
        profile.recognize_prefixes(*settings.prefixes)
    if settings.postfixes:
        profile.recognize_postfixes(*settings.postfixes)
    if settings.destination_prefixes:
        profile.recognize_destination_prefixes(*settings.destination_prefixes)
    if settings.destination_postfixes:
        profile.recognize_destination_postfixes(*settings.destination_postfixes)
    for alias in settings.aliases:
        profile.recognize_alias(alias.original, alias.alias)
    for prefix in settings.global_ignores:
        profile.add_global_ignore(prefix)
    if settings.disable_constructor_mapping:
        profile.disable_constructor_mapping()

    logger.debug(f"Built profile '{profile.profile_name}' from settings")
    return profile


def parse_profile_settings(raw: Dict[str, Any], config_file: Optional[str] = None) -> ProfileSettings:
    """
    Validate a raw settings dictionary.

    Raises:
        ConfigurationError: With every validation problem listed in its context
    """
    try:
        settings = ProfileSettings.model_validate(raw)
        logger.debug("Profile settings parsed and validated successfully.")
        return settings
    except ValidationError as e:
        logger.error("Profile settings validation failed.")
        problems = {}
        for error in e.errors():
            loc_parts = [str(loc_item) for loc_item in error.get("loc", ())]
            loc_str = " -> ".join(loc_parts) if loc_parts else "Top Level"
            msg = error.get("msg", "Unknown error")
            logger.error(f"  - Location: '{loc_str}': {msg}")
            problems[loc_str] = msg
        raise ConfigurationError(
            "Invalid profile settings",
            config_file=config_file,
            context={"errors": problems},
        ) from e


def load_profile_settings(config_path: Union[str, Path]) -> ProfileSettings:
    """Read and validate a YAML profile settings file."""
    config_file = Path(config_path)
    if not config_file.is_file():
        raise ConfigurationError(
            f"Profile settings file not found: {config_file}",
            config_file=str(config_file),
        )

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Error parsing YAML file {config_file}: {e}",
            config_file=str(config_file),
        ) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            "Profile settings file must contain a mapping at the top level",
            config_file=str(config_file),
        )

    logger.info(f"Loaded profile settings from {config_file}")
    return parse_profile_settings(raw, config_file=str(config_file))


def load_profile(config_path: Union[str, Path]) -> Profile:
    """Load a YAML settings file and build the (unsealed) profile it describes."""
    return build_profile(load_profile_settings(config_path))
