"""
Name transformers applied by a member configuration.

The set is closed: split/join, prefix/postfix stripping and substitution.
Each variant is an immutable value; registering more strings produces a new
instance, so a configuration can hand its transformers to any number of
readers without copying.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import ClassVar, Iterable, Optional, Tuple

from .models import Side
from .naming import NamingConvention, PascalCaseNamingConvention


class NameTransformer(ABC):
    """Base class for the three transformer kinds."""

    # Position in the pipeline; lower runs first
    STAGE: ClassVar[int]

    @abstractmethod
    def apply(self, name: str, side: Side, output_convention: NamingConvention) -> str:
        """
        Transform a candidate member name.

        Args:
            name: Candidate produced by the previous stage
            side: Side the original member belongs to
            output_convention: Convention the name is expressed in after splitting

        Returns:
            The transformed name (unchanged when nothing applies)
        """


def _clean_strings(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(v for v in values if isinstance(v, str) and v)


@dataclass(frozen=True)
class PrePostfixName(NameTransformer):
    """Removes at most one prefix and one postfix, first registered match wins."""

    STAGE: ClassVar[int] = 0

    prefixes: Tuple[str, ...] = ()
    postfixes: Tuple[str, ...] = ()
    destination_prefixes: Tuple[str, ...] = ()
    destination_postfixes: Tuple[str, ...] = ()

    def with_strings(self, attribute: str, values: Iterable[str]) -> "PrePostfixName":
        """Return a copy with ``values`` appended to one of the four lists."""
        current = getattr(self, attribute)
        return replace(self, **{attribute: current + _clean_strings(values)})

    def cleared(self, attribute: str) -> "PrePostfixName":
        return replace(self, **{attribute: ()})

    def _lists_for(self, side: Side) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        if side is Side.SOURCE:
            return self.prefixes, self.postfixes
        return self.destination_prefixes, self.destination_postfixes

    def apply(self, name: str, side: Side, output_convention: NamingConvention) -> str:
        prefixes, postfixes = self._lists_for(side)
        # A value equal to the whole name is skipped, never stripped to ""
        for prefix in prefixes:
            if name.startswith(prefix) and len(name) > len(prefix):
                name = name[len(prefix):]
                break
        for postfix in postfixes:
            if name.endswith(postfix) and len(name) > len(postfix):
                name = name[:-len(postfix)]
                break
        return name


@dataclass(frozen=True)
class NameSplitMember(NameTransformer):
    """Tokenizes with the member's own side convention and rejoins with the other side's."""

    STAGE: ClassVar[int] = 1

    source_convention: NamingConvention = PascalCaseNamingConvention.instance()
    destination_convention: NamingConvention = PascalCaseNamingConvention.instance()

    def convention_for(self, side: Side) -> NamingConvention:
        return self.source_convention if side is Side.SOURCE else self.destination_convention

    def apply(self, name: str, side: Side, output_convention: NamingConvention) -> str:
        tokens = self.convention_for(side).split(name)
        if not tokens:
            return name
        return self.convention_for(side.opposite).join(tokens)


@dataclass(frozen=True)
class MemberNameReplacer:
    """One (original, replacement) substitution pair."""

    original_value: str
    new_value: str


@dataclass(frozen=True)
class ReplaceName(NameTransformer):
    """Alias substitution; whole-name matches beat token matches, first pair wins."""

    STAGE: ClassVar[int] = 2

    replacements: Tuple[MemberNameReplacer, ...] = ()

    def with_replacement(self, original: str, new_value: str) -> "ReplaceName":
        return replace(self, replacements=self.replacements + (MemberNameReplacer(original, new_value),))

    def _whole_name_match(self, name: str) -> Optional[str]:
        for replacer in self.replacements:
            if replacer.original_value == name:
                return replacer.new_value
        return None

    def apply(self, name: str, side: Side, output_convention: NamingConvention) -> str:
        whole = self._whole_name_match(name)
        if whole is not None:
            return whole

        tokens = output_convention.split(name)
        for replacer in self.replacements:
            if replacer.original_value in tokens:
                return output_convention.join([
                    replacer.new_value if token == replacer.original_value else token
                    for token in tokens
                ])
        return name
