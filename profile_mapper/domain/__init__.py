"""
Domain module for Profile Mapper.

Naming conventions, name transformers, the member resolution pipeline and the
records a profile collects for the external mapping builder.
"""

from .models import (
    Side,
    MemberList,
    TypePair,
    MappingExpression,
    TypeMapConfigRecord,
    PropertyMapRecord,
    PropertyMapHook,
    TypeMapHook,
    ValueTransformerConfiguration,
    SourceResolver,
    is_generic_type_definition,
    generic_origin,
)

from .naming import (
    NamingConvention,
    ExactMatchNamingConvention,
    PascalCaseNamingConvention,
    LowerUnderscoreNamingConvention,
    get_naming_convention,
)

from .transformers import (
    NameTransformer,
    NameSplitMember,
    PrePostfixName,
    ReplaceName,
    MemberNameReplacer,
)

from .member_configuration import MemberConfiguration

__all__ = [
    # Core models
    'Side',
    'MemberList',
    'TypePair',
    'MappingExpression',
    'TypeMapConfigRecord',
    'PropertyMapRecord',
    'PropertyMapHook',
    'TypeMapHook',
    'ValueTransformerConfiguration',
    'SourceResolver',
    'is_generic_type_definition',
    'generic_origin',

    # Naming
    'NamingConvention',
    'ExactMatchNamingConvention',
    'PascalCaseNamingConvention',
    'LowerUnderscoreNamingConvention',
    'get_naming_convention',

    # Transformers
    'NameTransformer',
    'NameSplitMember',
    'PrePostfixName',
    'ReplaceName',
    'MemberNameReplacer',

    # Pipeline
    'MemberConfiguration',
]
