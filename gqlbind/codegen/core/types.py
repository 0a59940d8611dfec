"""
Native type system for code generation.

A native type is one of a closed set of shapes: a scalar, a named struct, an
enum, a list of another native type or an optional wrapper around one. The
wrapping rule applied to every schema reference is: nullable becomes
:class:`OptionalOf`, a list becomes :class:`ListOf`, and the innermost named
type resolves through the TypeMap.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import BindingError
from .schema import SchemaDocument, TypeKind, TypeRef
from .typemap import TypeMap, TypeMapEntry


@dataclass(frozen=True)
class ScalarType:
    """A leaf value type such as ``int`` or ``datetime.datetime``."""

    name: str
    module: str = "builtins"


@dataclass(frozen=True)
class StructType:
    """A named composite type: object, input object, interface or union."""

    name: str
    module: str


@dataclass(frozen=True)
class EnumType:
    name: str
    module: str


@dataclass(frozen=True)
class ListOf:
    item: "NativeType"


@dataclass(frozen=True)
class OptionalOf:
    inner: "NativeType"


NativeType = Union[ScalarType, StructType, EnumType, ListOf, OptionalOf]
NamedNativeType = Union[ScalarType, StructType, EnumType]


class MemberKind(Enum):
    ATTRIBUTE = "attribute"
    METHOD = "method"


@dataclass(frozen=True)
class Member:
    """
    A member a native class exposes.

    Attributes and properties have arity 0; a method's arity is the number
    of positional parameters after ``self``.
    """

    name: str
    kind: MemberKind = MemberKind.ATTRIBUTE
    arity: int = 0


def named_type(native: NativeType) -> NamedNativeType:
    """Strip list and optional wrappers."""
    while isinstance(native, (ListOf, OptionalOf)):
        native = native.item if isinstance(native, ListOf) else native.inner
    return native


def is_optional(native: NativeType) -> bool:
    return isinstance(native, OptionalOf)


class NativeTypeResolver:
    """
    Maps schema type references to native types through a TypeMap.

    The kind of the schema type decides which named shape is produced, so a
    user binding of an enum yields :class:`EnumType` and a binding of an
    object yields :class:`StructType`.
    """

    def __init__(self, schema: SchemaDocument, type_map: TypeMap):
        self.schema = schema
        self.type_map = type_map

    def resolve_named(self, name: str) -> NamedNativeType:
        if not self.type_map.exists(name):
            raise BindingError(
                f"no native type bound for schema type {name!r}", schema_type=name
            )
        return self.native_for_entry(name, self.type_map[name])

    def native_for_entry(self, name: str, entry: TypeMapEntry) -> NamedNativeType:
        definition = self.schema.get_type(name)
        kind = definition.kind if definition else TypeKind.SCALAR
        if kind == TypeKind.SCALAR:
            return ScalarType(entry.type_name, entry.module)
        if kind == TypeKind.ENUM:
            return EnumType(entry.type_name, entry.module)
        return StructType(entry.type_name, entry.module)

    def resolve(self, ref: TypeRef) -> NativeType:
        """
        Resolve a schema reference, applying the wrapping rule.

        Raises:
            BindingError: if the innermost named type has no TypeMap entry
        """
        if ref.is_list:
            native: NativeType = ListOf(self.resolve(ref.of_type))
        else:
            native = self.resolve_named(ref.name)
        return native if ref.non_null else OptionalOf(native)

    def resolve_field(self, ref: TypeRef, type_name: str, field_name: str) -> NativeType:
        """Resolve a field or argument type, naming the field on failure."""
        try:
            return self.resolve(ref)
        except BindingError as e:
            raise BindingError(
                f"no native type bound for schema type {e.schema_type!r}",
                type_name=type_name,
                field_name=field_name,
                schema_type=e.schema_type,
            ) from e
