"""
Naming convention utilities for Profile Mapper.

A naming convention knows how to split a member name into tokens and how to
join tokens back into a member name. Source and destination sides of a
profile each carry one, which is how ``user_id`` on one side becomes
comparable with ``UserId`` on the other.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence, Union

from ..constants import NamingConventionNames, NamingPatterns
from ..exceptions import NamingConventionError


logger = logging.getLogger(__name__)


class NamingConvention:
    """
    Regex driven split/join rule.

    ``split`` returns every match of the splitting expression, each passed
    through ``normalize_token``; ``join`` normalizes the tokens and glues them
    with the separator. Splitting the output of ``join`` yields the same
    tokens again; variants whose normalization can merge tokens override
    ``split`` to keep that true.

    Example:
        >>> convention = NamingConvention(r"[a-z]+", "-")
        >>> convention.split("alpha.beta")
        ['alpha', 'beta']
        >>> convention.join(["alpha", "beta"])
        'alpha-beta'
    """

    def __init__(self, pattern: Union[str, "re.Pattern[str]"], separator: str = ""):
        """
        Compile the token-matching rule.

        Args:
            pattern: Regular expression (or compiled pattern) matching one token
            separator: String placed between tokens by ``join``

        Raises:
            NamingConventionError: If the pattern is not a valid regular expression
        """
        if isinstance(pattern, re.Pattern):
            self._splitting_expression = pattern
        else:
            if not isinstance(pattern, str) or not pattern:
                raise NamingConventionError(
                    "Token pattern must be a non-empty string",
                    pattern=pattern,
                )
            try:
                self._splitting_expression = re.compile(pattern)
            except re.error as e:
                raise NamingConventionError(
                    f"Invalid token pattern: {e}",
                    pattern=pattern,
                ) from e

        if not isinstance(separator, str):
            raise NamingConventionError(
                f"Separator must be a string, got {type(separator).__name__}",
                pattern=self._splitting_expression.pattern,
            )
        self._separator_character = separator

    @property
    def splitting_expression(self) -> "re.Pattern[str]":
        return self._splitting_expression

    @property
    def separator_character(self) -> str:
        return self._separator_character

    def normalize_token(self, token: str) -> str:
        """Return the canonical spelling of a single token."""
        return token

    def split(self, name: str) -> List[str]:
        """Split a member name into normalized tokens."""
        return [
            self.normalize_token(match.group(0))
            for match in self._splitting_expression.finditer(name)
            if match.group(0)
        ]

    def join(self, tokens: Sequence[str]) -> str:
        """Join tokens into a member name."""
        return self._separator_character.join(self.normalize_token(t) for t in tokens)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(pattern={self._splitting_expression.pattern!r}, "
            f"separator={self._separator_character!r})"
        )


class ExactMatchNamingConvention(NamingConvention):
    """Never decomposes a name: ``split(x) == [x]`` and ``join([x]) == x``."""

    _instance: Optional["ExactMatchNamingConvention"] = None

    def __init__(self):
        super().__init__(NamingPatterns.EXACT_MATCH, "")

    @classmethod
    def instance(cls) -> "ExactMatchNamingConvention":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def split(self, name: str) -> List[str]:
        return [name]


class PascalCaseNamingConvention(NamingConvention):
    """
    Splits on upper-case boundaries and joins with no separator.

    Example:
        >>> PascalCaseNamingConvention.instance().split("XMLHttpRequest")
        ['XML', 'Http', 'Request']
        >>> PascalCaseNamingConvention.instance().join(["user", "id"])
        'UserId'
    """

    _instance: Optional["PascalCaseNamingConvention"] = None

    def __init__(self):
        super().__init__(NamingPatterns.PASCAL_CASE, "")

    @classmethod
    def instance(cls) -> "PascalCaseNamingConvention":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def normalize_token(self, token: str) -> str:
        return token[:1].upper() + token[1:]

    def split(self, name: str) -> List[str]:
        """
        Split a member name into capitalized tokens.

        Tokens are read back from the joined form, so a lone lower-case
        letter that capitalizes into a neighbouring capital run (``aBC``,
        ``x_y``) comes out as the single token a later split would see.

        Example:
            >>> PascalCaseNamingConvention.instance().split("x_y")
            ['XY']
        """
        return super().split(self.join(super().split(name)))


class LowerUnderscoreNamingConvention(NamingConvention):
    """
    Splits on anything that is not a letter or digit and joins with ``_``.

    Example:
        >>> LowerUnderscoreNamingConvention.instance().join(["User", "Id"])
        'user_id'
    """

    _instance: Optional["LowerUnderscoreNamingConvention"] = None

    def __init__(self):
        super().__init__(NamingPatterns.LOWER_UNDERSCORE, "_")

    @classmethod
    def instance(cls) -> "LowerUnderscoreNamingConvention":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def normalize_token(self, token: str) -> str:
        return token.lower()


_BUILT_IN_CONVENTIONS: Dict[str, type] = {
    NamingConventionNames.PASCAL: PascalCaseNamingConvention,
    NamingConventionNames.LOWER_UNDERSCORE: LowerUnderscoreNamingConvention,
    NamingConventionNames.EXACT: ExactMatchNamingConvention,
}


def get_naming_convention(name: str) -> NamingConvention:
    """
    Look up a built-in naming convention by name.

    Args:
        name: One of ``pascal``, ``lower_underscore`` or ``exact``

    Returns:
        The shared instance of the matching convention

    Raises:
        NamingConventionError: If the name is unknown
    """
    convention_cls = _BUILT_IN_CONVENTIONS.get(name)
    if convention_cls is None:
        raise NamingConventionError(
            f"Unknown naming convention: {name}",
            context={"supported_conventions": NamingConventionNames.ALL},
        )
    return convention_cls.instance()
