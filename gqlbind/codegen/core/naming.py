"""
Naming utilities for safe code generation.

Handles name sanitization, case conversions, keyword conflicts
and sibling collisions for generated identifiers.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Set, Union

_INVALID_PACKAGE_CHAR = re.compile(r"[^\w]", re.ASCII)
_INVALID_IDENTIFIER_CHAR = re.compile(r"[^a-zA-Z0-9_]")


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    PRESERVE = "preserve"  # as written, illegal characters replaced


def sanitize_package_name(path: Union[str, Path]) -> str:
    """
    Derive a package identifier from the final segment of ``path``.

    Every character outside the ASCII word set becomes ``_``.
    """
    return _INVALID_PACKAGE_CHAR.sub("_", Path(path).name)


class NameSanitizer:
    """
    Turns arbitrary names into legal, unique identifiers within one scope.

    A sanitizer instance represents a single namespace (a module, a class
    body, a parameter list); names handed out are remembered so siblings
    never collide.
    """

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
        keyword_check: Optional[Callable[[str], bool]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin names that must not be shadowed
            keyword_check: Extra predicate for names that need a suffix
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self.keyword_check = keyword_check
        self._used_names: Set[str] = set()

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved words

        Returns:
            Sanitized name, unique within this sanitizer's scope
        """
        converted = self._convert_case(name, target_case)
        cleaned = self._clean_basic(converted)
        final_name = self._resolve_conflicts(cleaned, suffix_on_conflict)
        self._used_names.add(final_name)
        return final_name

    def _clean_basic(self, name: str) -> str:
        """Replace illegal characters and make sure the name can start an identifier."""
        cleaned = _INVALID_IDENTIFIER_CHAR.sub("_", name)

        if cleaned and cleaned[0].isdigit():
            cleaned = f"_{cleaned}"

        if not cleaned:
            cleaned = "field"

        return cleaned

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case, keeping leading underscores."""
        stripped = name.lstrip("_")
        prefix = name[: len(name) - len(stripped)]

        converted = stripped.replace("-", "_")
        converted = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", converted)
        converted = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", converted)
        converted = re.sub(r"_+", "_", converted.lower())

        return prefix + converted.strip("_")

    def is_reserved(self, name: str) -> bool:
        if name in self.reserved_words or name in self.builtin_types:
            return True
        return bool(self.keyword_check and self.keyword_check(name))

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Resolve naming conflicts with reserved words and existing names."""
        if self.is_reserved(name):
            name = f"{name}{suffix}"

        original_name = name
        counter = 1
        while name in self._used_names or self.is_reserved(name):
            name = f"{original_name}_{counter}"
            counter += 1

        return name

    def add_used_name(self, name: str):
        """Manually add a name to the used names set."""
        self._used_names.add(name)

    def add_used_names(self, names: Iterable[str]):
        self._used_names.update(names)

    def is_used(self, name: str) -> bool:
        return name in self._used_names


class NamingConvention:
    """
    Case rules a target language applies to each kind of identifier.

    The plan builders ask for a fresh sanitizer per namespace so names
    are unique where the target language requires it.
    """

    type_case = NamingCase.PRESERVE
    field_case = NamingCase.SNAKE_CASE
    enum_value_case = NamingCase.PRESERVE
    method_case = NamingCase.SNAKE_CASE
    argument_case = NamingCase.SNAKE_CASE

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
        keyword_check: Optional[Callable[[str], bool]] = None,
    ):
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self.keyword_check = keyword_check

    def module_scope(self) -> NameSanitizer:
        """Namespace for top-level declarations; builtins must not be shadowed."""
        return NameSanitizer(self.reserved_words, self.builtin_types, self.keyword_check)

    def member_scope(self) -> NameSanitizer:
        """Namespace inside a class body or parameter list."""
        return NameSanitizer(self.reserved_words, set(), self.keyword_check)

    def enum_scope(self) -> NameSanitizer:
        """Namespace for the members of one enum."""
        return self.member_scope()

    def convert(self, name: str, case: NamingCase) -> str:
        """Case conversion alone, without reserving the result anywhere."""
        return NameSanitizer()._convert_case(name, case)
