"""
Member configuration: the name resolution pipeline of a profile.

A member configuration holds at most one transformer of each kind and always
runs them in the same order: strip, then split/join, then substitute. The
external mapping engine asks it for the candidate name a member would have on
the other side and compares candidates with plain string equality.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from ..exceptions import ProfileSealedError
from .models import Side
from .naming import ExactMatchNamingConvention, NamingConvention
from .transformers import NameSplitMember, NameTransformer, PrePostfixName, ReplaceName


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=NameTransformer)


class MemberConfiguration:
    """
    Ordered pipeline of name transformers plus the conventions driving them.

    Example:
        >>> config = (MemberConfiguration()
        ...           .add_member(NameSplitMember())
        ...           .recognize_destination_prefixes("Get"))
        >>> config.resolve("GetUserId", Side.DESTINATION)
        'UserId'
    """

    def __init__(self):
        self._transformers: Dict[Type[NameTransformer], NameTransformer] = {}
        self._sealed = False

    # --- Read side ---

    @property
    def transformers(self) -> Tuple[NameTransformer, ...]:
        """Registered transformers in pipeline order."""
        return tuple(sorted(self._transformers.values(), key=lambda t: t.STAGE))

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def get_transformer(self, kind: Type[T]) -> Optional[T]:
        return self._transformers.get(kind)

    @property
    def source_convention(self) -> NamingConvention:
        split = self.get_transformer(NameSplitMember)
        return split.source_convention if split else ExactMatchNamingConvention.instance()

    @property
    def destination_convention(self) -> NamingConvention:
        split = self.get_transformer(NameSplitMember)
        return split.destination_convention if split else ExactMatchNamingConvention.instance()

    def convention_for(self, side: Side) -> NamingConvention:
        return self.source_convention if side is Side.SOURCE else self.destination_convention

    @property
    def prefixes(self) -> Tuple[str, ...]:
        return self._strip().prefixes

    @property
    def postfixes(self) -> Tuple[str, ...]:
        return self._strip().postfixes

    @property
    def destination_prefixes(self) -> Tuple[str, ...]:
        return self._strip().destination_prefixes

    @property
    def destination_postfixes(self) -> Tuple[str, ...]:
        return self._strip().destination_postfixes

    @property
    def replacements(self):
        replace_name = self.get_transformer(ReplaceName)
        return replace_name.replacements if replace_name else ()

    def _strip(self) -> PrePostfixName:
        return self.get_transformer(PrePostfixName) or PrePostfixName()

    # --- Resolution ---

    def resolve(self, name: str, side: Side) -> str:
        """
        Produce the candidate name a member would have on the other side.

        Args:
            name: Raw member name
            side: Side the member belongs to

        Returns:
            The normalized candidate; an unmatched name passes through unchanged
        """
        output_convention = self.convention_for(side.opposite)
        candidate = name
        for transformer in self.transformers:
            candidate = transformer.apply(candidate, side, output_convention)
        return candidate

    def candidate_names(self, name: str, side: Side) -> List[str]:
        """Resolved candidate first, then the raw name if it differs."""
        resolved = self.resolve(name, side)
        return [resolved] if resolved == name else [resolved, name]

    def is_match(self, source_name: str, destination_name: str) -> bool:
        """True if the two sides' candidate sets share a name (ordinal comparison)."""
        source_candidates = self.candidate_names(source_name, Side.SOURCE)
        return any(candidate in source_candidates
                   for candidate in self.candidate_names(destination_name, Side.DESTINATION))

    def find_match(self, source_name: str, destination_names: Iterable[str]) -> Optional[str]:
        """First destination name matching ``source_name``, in the order given."""
        for destination_name in destination_names:
            if self.is_match(source_name, destination_name):
                return destination_name
        return None

    # --- Mutation ---

    def _check_not_sealed(self, operation: str) -> None:
        if self._sealed:
            raise ProfileSealedError(
                "Member configuration is sealed and cannot be changed",
                operation=operation,
            )

    def add_member(self, transformer: NameTransformer) -> "MemberConfiguration":
        """Install a transformer, replacing any existing one of the same kind."""
        self._check_not_sealed("add_member")
        self._transformers[type(transformer)] = transformer
        logger.debug(f"Installed {type(transformer).__name__} transformer")
        return self

    def add_name(self, kind: Type[T], configure: Callable[[T], T]) -> "MemberConfiguration":
        """
        Get-or-create the transformer of ``kind`` and replace it by ``configure(existing)``.

        Transformers are immutable, so ``configure`` returns the updated value.
        """
        self._check_not_sealed("add_name")
        existing = self._transformers.get(kind) or kind()
        self._transformers[kind] = configure(existing)
        return self

    def use_naming_conventions(self, source: NamingConvention,
                               destination: NamingConvention) -> "MemberConfiguration":
        return self.add_member(NameSplitMember(source, destination))

    def recognize_prefixes(self, *prefixes: str) -> "MemberConfiguration":
        return self.add_name(PrePostfixName, lambda p: p.with_strings("prefixes", prefixes))

    def recognize_postfixes(self, *postfixes: str) -> "MemberConfiguration":
        return self.add_name(PrePostfixName, lambda p: p.with_strings("postfixes", postfixes))

    def recognize_destination_prefixes(self, *prefixes: str) -> "MemberConfiguration":
        return self.add_name(PrePostfixName, lambda p: p.with_strings("destination_prefixes", prefixes))

    def recognize_destination_postfixes(self, *postfixes: str) -> "MemberConfiguration":
        return self.add_name(PrePostfixName, lambda p: p.with_strings("destination_postfixes", postfixes))

    def clear_prefixes(self) -> "MemberConfiguration":
        # Source prefixes only; destination and postfix lists stay as they are
        return self.add_name(PrePostfixName, lambda p: p.cleared("prefixes"))

    def add_replacement(self, original: str, new_value: str) -> "MemberConfiguration":
        return self.add_name(ReplaceName, lambda r: r.with_replacement(original, new_value))

    # --- Sealing ---

    def seal(self) -> None:
        self._sealed = True

    def sealed_copy(self) -> "MemberConfiguration":
        """Independent copy that rejects every further mutation."""
        copy = MemberConfiguration()
        copy._transformers = dict(self._transformers)
        copy._sealed = True
        return copy

    def __repr__(self) -> str:
        kinds = ", ".join(type(t).__name__ for t in self.transformers)
        return f"MemberConfiguration([{kinds}], sealed={self._sealed})"
