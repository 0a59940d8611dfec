"""
Python annotations and imports for native types.

Imports are collected from a plan before rendering and then frozen, so
every annotation a template writes names something the module imports.
"""

import json
import keyword
import sys
from typing import Dict, Iterable, List, Optional, Tuple

from graphql import (
    BooleanValueNode,
    EnumValueNode,
    FloatValueNode,
    GraphQLError,
    IntValueNode,
    ListValueNode,
    NullValueNode,
    StringValueNode,
    ValueNode,
    parse_value,
)

from ...core.binding import Argument, EnumBinding
from ...core.errors import TemplateError
from ...core.types import (
    EnumType,
    ListOf,
    NativeType,
    OptionalOf,
    ScalarType,
    StructType,
    named_type,
)

BUILTIN_MODULE = "builtins"


class ImportSet:
    """Names a generated module imports, with aliases for collisions."""

    def __init__(self, module: str, reserved: Iterable[str] = (), local: Iterable[str] = ()):
        """
        Args:
            module: Dotted path of the module being generated
            reserved: Names the module declares itself
            local: Other modules of the same project
        """
        self.module = module
        self._local = {m.split(".")[0] for m in (module, *local)}
        self._reserved = set(reserved)
        self._aliases: Dict[Tuple[str, str], str] = {}
        self._taken: Dict[str, Tuple[str, str]] = {}
        self._frozen = False

    def add(self, module: str, name: str) -> str:
        """Import ``name`` from ``module`` and return the local name for it."""
        if module in (BUILTIN_MODULE, self.module):
            return name

        key = (module, name)
        if key in self._aliases:
            return self._aliases[key]
        if self._frozen:
            raise TemplateError(f"{module}.{name} was not collected before rendering")

        alias = name
        if alias in self._reserved or alias in self._taken:
            base = f"{module.replace('.', '_')}_{name}"
            alias = base
            counter = 1
            while alias in self._reserved or alias in self._taken:
                alias = f"{base}_{counter}"
                counter += 1

        self._aliases[key] = alias
        self._taken[alias] = key
        return alias

    def add_native(self, native: NativeType) -> str:
        named = named_type(native)
        return self.add(named.module, named.name)

    def collect(self, natives: Iterable[NativeType]) -> "ImportSet":
        for native in natives:
            self.add_native(native)
        return self

    def freeze(self) -> "ImportSet":
        self._frozen = True
        return self

    def _group(self, module: str) -> int:
        top = module.split(".")[0]
        if top in self._local:
            return 2
        if top in sys.stdlib_module_names:
            return 0
        return 1

    def groups(self) -> List[List[str]]:
        """``from`` statements grouped stdlib, third-party, local; sorted."""
        by_module: Dict[str, List[Tuple[str, str]]] = {}
        for (module, name), alias in self._aliases.items():
            by_module.setdefault(module, []).append((name, alias))

        grouped: Dict[int, List[str]] = {}
        for module in sorted(by_module):
            names = sorted(by_module[module])
            imported = ", ".join(
                name if name == alias else f"{name} as {alias}" for name, alias in names
            )
            grouped.setdefault(self._group(module), []).append(
                f"from {module} import {imported}"
            )
        return [grouped[key] for key in sorted(grouped)]


class TypeRenderer:
    """Renders native types as annotations using the names an ImportSet chose."""

    def __init__(self, imports: ImportSet):
        self.imports = imports

    def annotation(self, native: NativeType) -> str:
        if isinstance(native, OptionalOf):
            return f"{self.annotation(native.inner)} | None"
        if isinstance(native, ListOf):
            return f"list[{self.annotation(native.item)}]"
        if isinstance(native, (ScalarType, StructType, EnumType)):
            return self.imports.add(native.module, native.name)
        raise TemplateError(f"unsupported native type {native!r}")

    def name(self, native: NativeType) -> str:
        """The bare class name, for runtime references."""
        return self.imports.add_native(native)


def member_access(owner: str, member: str) -> str:
    """``Owner.member``, or a subscript when ``member`` is no attribute name."""
    if member.isidentifier() and not keyword.iskeyword(member):
        return f"{owner}.{member}"
    return f"{owner}[{json.dumps(member)}]"


class DefaultRenderer:
    """
    Python literals for schema argument defaults, as graphql-core passes them.

    Only builtin scalars, bound enums and lists of those are rendered.
    Anything else (input objects, user-bound scalars) has no literal, and a
    nullable argument then falls back to ``None``.
    """

    def __init__(self, types: TypeRenderer, enums: Iterable[EnumBinding] = ()):
        self.types = types
        self._members = {
            (enum.native.module, enum.native.name): dict(enum.values) for enum in enums
        }

    def default(self, argument: Argument) -> Optional[str]:
        literal = None
        if argument.default_value is not None:
            try:
                literal = self.literal(parse_value(argument.default_value), argument.type)
            except GraphQLError:
                literal = None
        if literal is None and argument.optional:
            return "None"
        return literal

    def literal(self, node: ValueNode, native: NativeType) -> Optional[str]:
        if isinstance(node, NullValueNode):
            return "None"
        if isinstance(native, OptionalOf):
            return self.literal(node, native.inner)
        if isinstance(native, ListOf):
            nodes = node.values if isinstance(node, ListValueNode) else [node]
            items = [self.literal(item, native.item) for item in nodes]
            if any(item is None for item in items):
                return None
            return f"[{', '.join(items)}]"
        if isinstance(native, EnumType) and isinstance(node, EnumValueNode):
            if native.module == BUILTIN_MODULE:
                return json.dumps(node.value)
            member = self._members.get((native.module, native.name), {}).get(node.value)
            if member is None:
                return None
            return member_access(self.types.name(native), member)
        if isinstance(native, ScalarType) and native.module == BUILTIN_MODULE:
            return self._scalar(node, native.name)
        return None

    @staticmethod
    def _scalar(node: ValueNode, name: str) -> Optional[str]:
        if name == "bool" and isinstance(node, BooleanValueNode):
            return "True" if node.value else "False"
        if name == "int" and isinstance(node, IntValueNode):
            return str(int(node.value))
        if name == "float" and isinstance(node, (IntValueNode, FloatValueNode)):
            return repr(float(node.value))
        if name == "str" and isinstance(node, (StringValueNode, IntValueNode)):
            return json.dumps(node.value)
        return None
