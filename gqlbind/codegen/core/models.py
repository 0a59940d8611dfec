"""
Model plan: the native declarations the data-model module must contain.

A schema type is generated when nothing in the TypeMap already stands for
it, it is not a root operation type and it is not an introspection type.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from ...logging_config import get_logger
from .config import OutputTarget
from .errors import BindingError
from .naming import NamingConvention
from .schema import SchemaDocument, TypeDefinition, TypeKind
from .typemap import TypeMap, TypeMapEntry
from .types import Member, MemberKind, NativeType, NativeTypeResolver, OptionalOf

logger = get_logger(__name__)


@dataclass
class ModelField:
    name: str
    py_name: str
    type: NativeType
    description: Optional[str] = None

    @property
    def optional(self) -> bool:
        return isinstance(self.type, OptionalOf)


@dataclass
class ModelDecl:
    """An object, input object or interface declaration."""

    name: str
    class_name: str
    kind: TypeKind
    fields: List[ModelField] = field(default_factory=list)
    description: Optional[str] = None

    def get_field(self, schema_field: str) -> Optional[ModelField]:
        for model_field in self.fields:
            if model_field.name == schema_field:
                return model_field
        return None


@dataclass
class EnumValue:
    name: str
    py_name: str
    description: Optional[str] = None


@dataclass
class EnumDecl:
    name: str
    class_name: str
    values: List[EnumValue] = field(default_factory=list)
    description: Optional[str] = None
    kind: TypeKind = TypeKind.ENUM

    def member_for(self, schema_value: str) -> Optional[str]:
        for value in self.values:
            if value.name == schema_value:
                return value.py_name
        return None


@dataclass
class UnionDecl:
    name: str
    class_name: str
    members: List[NativeType] = field(default_factory=list)
    description: Optional[str] = None
    kind: TypeKind = TypeKind.UNION


Declaration = Union[ModelDecl, EnumDecl, UnionDecl]


@dataclass
class ModelPlan:
    """Ordered declarations for one model module."""

    module: str
    package: str
    declarations: List[Declaration] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.declarations

    def get(self, schema_type: str) -> Optional[Declaration]:
        for decl in self.declarations:
            if decl.name == schema_type:
                return decl
        return None

    def generated_entries(self) -> Dict[str, TypeMapEntry]:
        """TypeMap entries standing for the generated declarations."""
        return {
            decl.name: TypeMapEntry(type_name=decl.class_name, module=self.module)
            for decl in self.declarations
        }

    def member_for(self, schema_type: str, schema_field: str) -> Optional[Member]:
        """The attribute a generated class declares for ``schema_field``."""
        decl = self.get(schema_type)
        if not isinstance(decl, ModelDecl):
            return None
        model_field = decl.get_field(schema_field)
        if model_field is None:
            return None
        return Member(model_field.py_name, MemberKind.ATTRIBUTE, 0)

    def iter_native_types(self) -> Iterator[NativeType]:
        for decl in self.declarations:
            if isinstance(decl, ModelDecl):
                for model_field in decl.fields:
                    yield model_field.type
            elif isinstance(decl, UnionDecl):
                yield from decl.members


def needs_generation(definition: TypeDefinition, schema: SchemaDocument, type_map: TypeMap) -> bool:
    if definition.name.startswith("__"):
        return False
    if type_map.exists(definition.name) or schema.is_root(definition.name):
        return False
    return True


def build_model_plan(
    schema: SchemaDocument,
    type_map: TypeMap,
    target: OutputTarget,
    naming: NamingConvention,
) -> ModelPlan:
    """
    Derive the model plan from the schema and the completed TypeMap.

    Raises:
        BindingError: a custom scalar has no TypeMap entry, or a field type
            cannot be resolved
    """
    plan = ModelPlan(module=target.module, package=target.package)
    module_names = naming.module_scope()

    pending: List[TypeDefinition] = []
    class_names: Dict[str, str] = {}
    for definition in schema:
        if not needs_generation(definition, schema, type_map):
            continue
        if definition.kind == TypeKind.SCALAR:
            raise BindingError(
                f"custom scalar {definition.name!r} must be bound in the type map",
                type_name=definition.name,
                schema_type=definition.name,
            )
        class_names[definition.name] = module_names.sanitize_name(
            definition.name, naming.type_case
        )
        pending.append(definition)

    # Generated types reference each other, so resolve against the map
    # that already knows every class name planned above.
    entries = {
        name: TypeMapEntry(type_name=class_name, module=target.module)
        for name, class_name in class_names.items()
    }
    resolver = NativeTypeResolver(schema, type_map.with_entries(entries))

    for definition in pending:
        class_name = class_names[definition.name]
        if definition.kind == TypeKind.ENUM:
            plan.declarations.append(_enum_decl(definition, class_name, naming))
        elif definition.kind == TypeKind.UNION:
            plan.declarations.append(
                UnionDecl(
                    name=definition.name,
                    class_name=class_name,
                    members=[resolver.resolve_named(m) for m in definition.members],
                    description=definition.description,
                )
            )
        else:
            plan.declarations.append(_model_decl(definition, class_name, resolver, naming))

    logger.debug(
        "Model plan for %s: %d declarations", target.module, len(plan.declarations)
    )
    return plan


def _model_decl(
    definition: TypeDefinition,
    class_name: str,
    resolver: NativeTypeResolver,
    naming: NamingConvention,
) -> ModelDecl:
    names = naming.member_scope()
    decl = ModelDecl(
        name=definition.name,
        class_name=class_name,
        kind=definition.kind,
        description=definition.description,
    )
    schema_fields = (
        definition.input_fields
        if definition.kind == TypeKind.INPUT_OBJECT
        else definition.fields
    )
    for schema_field in schema_fields:
        decl.fields.append(
            ModelField(
                name=schema_field.name,
                py_name=names.sanitize_name(schema_field.name, naming.field_case),
                type=resolver.resolve_field(
                    schema_field.type, definition.name, schema_field.name
                ),
                description=schema_field.description,
            )
        )
    return decl


def _enum_decl(definition: TypeDefinition, class_name: str, naming: NamingConvention) -> EnumDecl:
    names = naming.enum_scope()
    return EnumDecl(
        name=definition.name,
        class_name=class_name,
        description=definition.description,
        values=[
            EnumValue(
                name=value.name,
                py_name=names.sanitize_name(value.name, naming.enum_value_case),
                description=value.description,
            )
            for value in definition.enum_values
        ],
    )
