"""
Core schema representation for code generation.

Parses GraphQL SDL with graphql-core into a normalized, ordered internal
format that the plan builders work with consistently.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

from graphql import (
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    GraphQLError,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    Source,
    TypeNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    build_ast_schema,
    parse,
    print_ast,
)

from ...logging_config import get_logger
from .errors import SchemaError

logger = get_logger(__name__)


class TypeKind(Enum):
    """Kinds of named types a schema can declare."""

    OBJECT = "object"
    INTERFACE = "interface"
    INPUT_OBJECT = "input"
    ENUM = "enum"
    UNION = "union"
    SCALAR = "scalar"


@dataclass(frozen=True)
class TypeRef:
    """
    Reference to a schema type as written on a field or argument.

    Named references carry ``name``; list references carry ``of_type``.
    """

    name: Optional[str] = None
    non_null: bool = False
    of_type: Optional["TypeRef"] = None

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def named_type(self) -> str:
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        return ref.name

    def __str__(self) -> str:
        inner = f"[{self.of_type}]" if self.of_type is not None else str(self.name)
        return f"{inner}!" if self.non_null else inner


@dataclass
class InputValue:
    """An argument or an input object field."""

    name: str
    type: TypeRef
    description: Optional[str] = None
    default_value: Optional[str] = None


@dataclass
class FieldDefinition:
    """A field of an object or interface type."""

    name: str
    type: TypeRef
    arguments: List[InputValue] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class EnumValueDefinition:
    name: str
    description: Optional[str] = None


@dataclass
class TypeDefinition:
    """A named type declared by the schema."""

    name: str
    kind: TypeKind
    description: Optional[str] = None
    fields: List[FieldDefinition] = field(default_factory=list)
    input_fields: List[InputValue] = field(default_factory=list)
    enum_values: List[EnumValueDefinition] = field(default_factory=list)
    interfaces: List[str] = field(default_factory=list)
    members: List[str] = field(default_factory=list)

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        """Get field by name."""
        for type_field in self.fields:
            if type_field.name == name:
                return type_field
        return None


@dataclass
class SchemaDocument:
    """Parsed schema: named types in declaration order plus root operations."""

    source: str
    types: List[TypeDefinition] = field(default_factory=list)
    query: Optional[str] = None
    mutation: Optional[str] = None
    subscription: Optional[str] = None

    def __post_init__(self):
        self._by_name: Dict[str, TypeDefinition] = {t.name: t for t in self.types}

    def get_type(self, name: str) -> Optional[TypeDefinition]:
        return self._by_name.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[TypeDefinition]:
        return iter(self.types)

    @property
    def root_operations(self) -> Dict[str, str]:
        """Map of root type name to operation (query/mutation/subscription)."""
        roots = {}
        for operation in ("query", "mutation", "subscription"):
            type_name = getattr(self, operation)
            if type_name:
                roots[type_name] = operation
        return roots

    def is_root(self, name: str) -> bool:
        return name in self.root_operations

    def implementations(self, interface: str) -> List[TypeDefinition]:
        """Object types implementing ``interface``, in declaration order."""
        return [
            t
            for t in self.types
            if t.kind == TypeKind.OBJECT and interface in t.interfaces
        ]


_DEFINITION_KINDS = {
    ObjectTypeDefinitionNode: TypeKind.OBJECT,
    ObjectTypeExtensionNode: TypeKind.OBJECT,
    InterfaceTypeDefinitionNode: TypeKind.INTERFACE,
    InterfaceTypeExtensionNode: TypeKind.INTERFACE,
    InputObjectTypeDefinitionNode: TypeKind.INPUT_OBJECT,
    InputObjectTypeExtensionNode: TypeKind.INPUT_OBJECT,
    EnumTypeDefinitionNode: TypeKind.ENUM,
    EnumTypeExtensionNode: TypeKind.ENUM,
    UnionTypeDefinitionNode: TypeKind.UNION,
    UnionTypeExtensionNode: TypeKind.UNION,
    ScalarTypeDefinitionNode: TypeKind.SCALAR,
}

_EXTENSION_NODES = (
    ObjectTypeExtensionNode,
    InterfaceTypeExtensionNode,
    InputObjectTypeExtensionNode,
    EnumTypeExtensionNode,
    UnionTypeExtensionNode,
)


def convert_type_node(node: TypeNode, non_null: bool = False) -> TypeRef:
    """Convert a graphql-core type AST node into a :class:`TypeRef`."""
    if isinstance(node, NonNullTypeNode):
        return convert_type_node(node.type, non_null=True)
    if isinstance(node, ListTypeNode):
        return TypeRef(non_null=non_null, of_type=convert_type_node(node.type))
    if isinstance(node, NamedTypeNode):
        return TypeRef(name=node.name.value, non_null=non_null)
    raise SchemaError(f"unsupported type node {type(node).__name__}")


def _description(node) -> Optional[str]:
    description = getattr(node, "description", None)
    return description.value if description is not None else None


def _input_value(node) -> InputValue:
    default = node.default_value
    return InputValue(
        name=node.name.value,
        type=convert_type_node(node.type),
        description=_description(node),
        default_value=print_ast(default) if default is not None else None,
    )


def _merge_definition(target: TypeDefinition, node) -> None:
    """Append the members declared by ``node`` to ``target`` in order."""
    if target.kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
        for field_node in node.fields or ():
            target.fields.append(
                FieldDefinition(
                    name=field_node.name.value,
                    type=convert_type_node(field_node.type),
                    arguments=[_input_value(arg) for arg in field_node.arguments or ()],
                    description=_description(field_node),
                )
            )
        target.interfaces.extend(i.name.value for i in node.interfaces or ())
    elif target.kind == TypeKind.INPUT_OBJECT:
        target.input_fields.extend(_input_value(f) for f in node.fields or ())
    elif target.kind == TypeKind.ENUM:
        target.enum_values.extend(
            EnumValueDefinition(name=v.name.value, description=_description(v))
            for v in node.values or ()
        )
    elif target.kind == TypeKind.UNION:
        target.members.extend(t.name.value for t in node.types or ())


def load_schema(source: str, source_name: str = "schema.graphql") -> SchemaDocument:
    """
    Parse raw SDL text into a :class:`SchemaDocument`.

    The document is also built into a graphql-core schema so that unknown
    types, duplicate names and other SDL errors are rejected here rather than
    producing a partial plan.

    Raises:
        SchemaError: on any syntax or SDL validation error
    """
    try:
        document = parse(Source(source, source_name))
    except GraphQLError as e:
        location = e.locations[0] if e.locations else None
        raise SchemaError(
            e.message,
            line=location.line if location else None,
            column=location.column if location else None,
            source_name=source_name,
        ) from e

    try:
        built = build_ast_schema(document)
    except GraphQLError as e:
        location = e.locations[0] if e.locations else None
        raise SchemaError(
            e.message,
            line=location.line if location else None,
            column=location.column if location else None,
            source_name=source_name,
        ) from e
    except TypeError as e:
        # graphql-core reports SDL validation failures as TypeError
        raise SchemaError(str(e), source_name=source_name) from e

    types: Dict[str, TypeDefinition] = {}
    for node in document.definitions:
        kind = _DEFINITION_KINDS.get(type(node))
        if kind is None:
            continue
        name = node.name.value
        if isinstance(node, _EXTENSION_NODES) and name not in types:
            # Extensions of types defined later still land on the definition
            types[name] = TypeDefinition(name=name, kind=kind)
        target = types.get(name)
        if target is None:
            target = types[name] = TypeDefinition(
                name=name, kind=kind, description=_description(node)
            )
        elif target.description is None:
            target.description = _description(node)
        _merge_definition(target, node)

    schema = SchemaDocument(
        source=source,
        types=list(types.values()),
        query=built.query_type.name if built.query_type else None,
        mutation=built.mutation_type.name if built.mutation_type else None,
        subscription=built.subscription_type.name if built.subscription_type else None,
    )
    logger.debug(
        "Loaded schema %s: %d types, roots %s",
        source_name,
        len(schema.types),
        schema.root_operations,
    )
    return schema
