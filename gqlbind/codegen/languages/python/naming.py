"""
Python-specific naming utilities and sanitization.

Handles Python reserved words, builtins, and naming conventions.
"""

import keyword
import re

from ...core.naming import NameSanitizer, NamingConvention

# Python reserved keywords
PYTHON_RESERVED_WORDS = set(keyword.kwlist) | set(keyword.softkwlist)

# Python built-in types and functions
PYTHON_BUILTIN_TYPES = {
    # Types
    "int",
    "float",
    "str",
    "bool",
    "list",
    "dict",
    "set",
    "tuple",
    "bytes",
    "bytearray",
    "frozenset",
    "range",
    "object",
    "type",
    "complex",
    "memoryview",
    # Special attributes
    "property",
    "staticmethod",
    "classmethod",
    "super",
    # Common functions
    "len",
    "print",
    "input",
    "open",
    "all",
    "any",
    "abs",
    "min",
    "max",
    "sum",
    "sorted",
    "reversed",
    "enumerate",
    "zip",
    "map",
    "filter",
    "isinstance",
    "issubclass",
    "hasattr",
    "getattr",
    "setattr",
    "delattr",
    "dir",
    "vars",
    "id",
    "hash",
    "repr",
    "format",
    "iter",
    "next",
    "slice",
    "callable",
    # Exceptions
    "Exception",
    "BaseException",
    "ValueError",
    "TypeError",
    "KeyError",
    "AttributeError",
    "IndexError",
    "RuntimeError",
    "NotImplementedError",
    "StopIteration",
}

# Names the model template imports at module level
MODEL_MODULE_NAMES = {"annotations", "dataclass", "Enum", "Protocol", "Union"}

# Enum machinery that members must not shadow
ENUM_RESERVED_NAMES = {"name", "value", "mro"}

_SUNDER = re.compile(r"^_[^_].*[^_]_$|^_[^_]_$")


def _is_sunder(name: str) -> bool:
    return bool(_SUNDER.match(name))


class PythonNaming(NamingConvention):
    """Naming rules for generated Python modules."""

    def __init__(self):
        super().__init__(
            reserved_words=set(PYTHON_RESERVED_WORDS),
            builtin_types=PYTHON_BUILTIN_TYPES | MODEL_MODULE_NAMES,
            keyword_check=keyword.iskeyword,
        )

    def member_scope(self) -> NameSanitizer:
        # Soft keywords are legal attribute names
        return NameSanitizer(set(keyword.kwlist), set(), keyword.iskeyword)

    def enum_scope(self) -> NameSanitizer:
        return NameSanitizer(
            set(keyword.kwlist) | ENUM_RESERVED_NAMES,
            set(),
            _is_sunder,
        )
