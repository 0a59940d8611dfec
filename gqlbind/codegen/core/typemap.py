"""
TypeMap: bindings from schema type names to native types.

The built-in table is supplied by the target language and merged with the
user's entries by :func:`resolve_type_map`. User entries always win and no
entry is ever removed.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Optional

from .errors import ConfigError


@dataclass(frozen=True)
class TypeMapEntry:
    """A native type identifier plus the module that defines it."""

    type_name: str
    module: str = "builtins"
    fields: Mapping = field(
        default_factory=lambda: MappingProxyType({}), hash=False, repr=False
    )

    @property
    def qualified_name(self) -> str:
        if self.module == "builtins":
            return self.type_name
        return f"{self.module}.{self.type_name}"

    def field_override(self, schema_field: str) -> Optional[str]:
        """Native member name the user bound to ``schema_field``, if any."""
        return self.fields.get(schema_field)

    @classmethod
    def parse(cls, schema_type: str, raw: Any) -> "TypeMapEntry":
        """
        Build an entry from its configuration form.

        Accepted forms are ``"package.module.Type"``, ``"Type"`` (a builtin),
        ``{"model": "package.module.Type", "fields": {"name": "member"}}`` or
        an existing :class:`TypeMapEntry`.
        """
        if isinstance(raw, TypeMapEntry):
            return raw

        overrides: Dict[str, str] = {}
        if isinstance(raw, Mapping):
            model = raw.get("model")
            raw_fields = raw.get("fields") or {}
            if not isinstance(raw_fields, Mapping):
                raise ConfigError(
                    f"type map entry {schema_type!r}: 'fields' must be an object"
                )
            for schema_field, member in raw_fields.items():
                if not isinstance(member, str) or not member.isidentifier():
                    raise ConfigError(
                        f"type map entry {schema_type!r}: field override "
                        f"{schema_field!r} must name a native member, got {member!r}"
                    )
                overrides[str(schema_field)] = member
        else:
            model = raw

        if not isinstance(model, str) or not model.strip():
            raise ConfigError(
                f"type map entry {schema_type!r} must name a native type, got {raw!r}"
            )

        module, _, type_name = model.strip().rpartition(".")
        if not type_name.isidentifier() or (
            module and not all(part.isidentifier() for part in module.split("."))
        ):
            raise ConfigError(
                f"type map entry {schema_type!r}: {model!r} is not a dotted native type path"
            )
        return cls(
            type_name=type_name,
            module=module or "builtins",
            fields=MappingProxyType(overrides),
        )


class TypeMap(Mapping):
    """Read-only mapping of schema type name to :class:`TypeMapEntry`."""

    def __init__(self, entries: Optional[Mapping] = None):
        self._entries: Dict[str, TypeMapEntry] = dict(entries or {})

    def __getitem__(self, key: str) -> TypeMapEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TypeMap({self._entries!r})"

    def exists(self, key: str) -> bool:
        return key in self._entries

    def with_entries(self, entries: Mapping) -> "TypeMap":
        """Return a new map with ``entries`` added; existing keys are kept."""
        merged = dict(self._entries)
        for key, entry in entries.items():
            if key not in merged:
                merged[key] = entry
        return TypeMap(merged)


def parse_type_map(raw: Optional[Mapping]) -> Dict[str, TypeMapEntry]:
    """Parse a user-supplied raw type map into entries, preserving order."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"type map must be an object, got {type(raw).__name__}")
    return {
        str(schema_type): TypeMapEntry.parse(str(schema_type), value)
        for schema_type, value in raw.items()
    }


def resolve_type_map(user: Optional[Mapping], builtins: Mapping) -> TypeMap:
    """
    Complete a user type map with built-in bindings.

    Args:
        user: User entries (raw configuration values or TypeMapEntry), may be None
        builtins: Immutable built-in table of the target language

    Returns:
        New TypeMap where every user key is preserved verbatim and every
        built-in key is present unless shadowed by a user key.
    """
    resolved = TypeMap(parse_type_map(user))
    missing = {name: entry for name, entry in builtins.items() if not resolved.exists(name)}
    return resolved.with_entries(missing)
