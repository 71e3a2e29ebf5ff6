"""
Profile Mapper.

Configuration-time engine that resolves which destination member corresponds
to which source member, and collects per-profile mapping registrations for an
external mapping builder.
"""

from .domain import (
    Side,
    MemberList,
    TypePair,
    MappingExpression,
    TypeMapConfigRecord,
    PropertyMapRecord,
    PropertyMapHook,
    ValueTransformerConfiguration,
    SourceResolver,
    NamingConvention,
    ExactMatchNamingConvention,
    PascalCaseNamingConvention,
    LowerUnderscoreNamingConvention,
    get_naming_convention,
    NameTransformer,
    NameSplitMember,
    PrePostfixName,
    ReplaceName,
    MemberNameReplacer,
    MemberConfiguration,
)
from .exceptions import (
    ProfileMapperError,
    ConfigurationError,
    NamingConventionError,
    ProfileSealedError,
)
from .profile import Profile, ProfileConfiguration

__version__ = "0.1.0"

__all__ = [
    'Profile',
    'ProfileConfiguration',
    'MemberConfiguration',
    'Side',
    'MemberList',
    'TypePair',
    'MappingExpression',
    'TypeMapConfigRecord',
    'PropertyMapRecord',
    'PropertyMapHook',
    'ValueTransformerConfiguration',
    'SourceResolver',
    'NamingConvention',
    'ExactMatchNamingConvention',
    'PascalCaseNamingConvention',
    'LowerUnderscoreNamingConvention',
    'get_naming_convention',
    'NameTransformer',
    'NameSplitMember',
    'PrePostfixName',
    'ReplaceName',
    'MemberNameReplacer',
    'ProfileMapperError',
    'ConfigurationError',
    'NamingConventionError',
    'ProfileSealedError',
]
