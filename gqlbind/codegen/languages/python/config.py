"""
Python-specific configuration and type mappings.

Provides the built-in TypeMap for the Python target and the options that
shape generated dataclasses.
"""

from types import MappingProxyType
from typing import Any, Dict

from ...core.typemap import TypeMapEntry

# Schema built-ins and their Python counterparts
PYTHON_BUILTIN_TYPE_MAP = MappingProxyType(
    {
        "Int": TypeMapEntry("int"),
        "Float": TypeMapEntry("float"),
        "String": TypeMapEntry("str"),
        "Boolean": TypeMapEntry("bool"),
        "ID": TypeMapEntry("str"),
        "Time": TypeMapEntry("datetime", "datetime"),
        "Map": TypeMapEntry("dict"),
        # Introspection meta-types
        "__Schema": TypeMapEntry("GraphQLSchema", "graphql"),
        "__Type": TypeMapEntry("GraphQLNamedType", "graphql"),
        "__Field": TypeMapEntry("GraphQLField", "graphql"),
        "__EnumValue": TypeMapEntry("GraphQLEnumValue", "graphql"),
        "__InputValue": TypeMapEntry("GraphQLArgument", "graphql"),
        "__Directive": TypeMapEntry("GraphQLDirective", "graphql"),
    }
)


class PythonConfig:
    """Python-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Python configuration."""
        # Dataclass-specific options
        self.dataclass_frozen = bool(kwargs.get("dataclass_frozen", False))
        self.dataclass_slots = bool(kwargs.get("dataclass_slots", False))  # Python 3.10+

        # Descriptions as docstrings and comments
        self.add_comments = bool(kwargs.get("add_comments", True))

    def dataclass_arguments(self) -> str:
        """Arguments for the ``@dataclass(...)`` decorator of generated models."""
        arguments = ["kw_only=True"]
        if self.dataclass_frozen:
            arguments.append("frozen=True")
        if self.dataclass_slots:
            arguments.append("slots=True")
        return ", ".join(arguments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dataclass_frozen": self.dataclass_frozen,
            "dataclass_slots": self.dataclass_slots,
            "add_comments": self.add_comments,
        }
