"""
Exec plan: how every schema field is satisfied at runtime.

Each field of each object type is either bound directly to a member the
native type already exposes (an attribute, or a method whose arity matches
the field's argument count) or recorded as a resolver stub whose signature
user code must implement. No field is dropped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ...logging_config import get_logger
from .config import OutputTarget
from .models import EnumDecl, ModelDecl, ModelPlan
from .naming import NamingCase, NamingConvention
from .schema import FieldDefinition, SchemaDocument, TypeDefinition, TypeKind
from .typemap import TypeMap, TypeMapEntry
from .types import (
    EnumType,
    Member,
    MemberKind,
    NamedNativeType,
    NativeType,
    NativeTypeResolver,
    OptionalOf,
    StructType,
)

logger = get_logger(__name__)

MemberLookup = Callable[[TypeMapEntry], Optional[Dict[str, Member]]]


class BindingKind(Enum):
    ATTRIBUTE = "attribute"
    METHOD = "method"
    RESOLVER = "resolver"


@dataclass
class Argument:
    name: str
    py_name: str
    type: NativeType
    default_value: Optional[str] = None

    @property
    def optional(self) -> bool:
        return isinstance(self.type, OptionalOf)


@dataclass
class FieldBinding:
    """
    The decision for one schema field.

    ``py_name`` is the resolver method name for stubs and the native member
    name for direct binds.
    """

    name: str
    py_name: str
    kind: BindingKind
    type: NativeType
    arguments: List[Argument] = field(default_factory=list)
    arity: int = 0
    description: Optional[str] = None
    subscription: bool = False

    @property
    def is_direct(self) -> bool:
        return self.kind != BindingKind.RESOLVER

    @property
    def argument_names(self) -> Tuple[str, ...]:
        return tuple(argument.py_name for argument in self.arguments)


@dataclass
class ObjectBinding:
    name: str
    owner: Optional[NamedNativeType]
    entry: Optional[TypeMapEntry]
    generated: bool
    resolver_name: str
    root_method: str
    local_name: str
    operation: Optional[str] = None
    fields: List[FieldBinding] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def resolvers(self) -> List[FieldBinding]:
        return [f for f in self.fields if f.kind == BindingKind.RESOLVER]


@dataclass
class EnumBinding:
    """Schema enum value to native enum member, in declaration order."""

    name: str
    native: EnumType
    generated: bool
    values: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class InputBinding:
    """Schema input field to native constructor keyword, in declaration order."""

    name: str
    native: StructType
    fields: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class AbstractBinding:
    name: str
    kind: TypeKind
    implementations: List[Tuple[NamedNativeType, str]] = field(default_factory=list)


@dataclass
class ExecPlan:
    """Everything the execution module needs, in schema declaration order."""

    module: str
    package: str
    schema_source: str
    model_module: Optional[str] = None
    operations: Dict[str, str] = field(default_factory=dict)
    objects: List[ObjectBinding] = field(default_factory=list)
    enums: List[EnumBinding] = field(default_factory=list)
    inputs: List[InputBinding] = field(default_factory=list)
    abstracts: List[AbstractBinding] = field(default_factory=list)
    type_names: List[Tuple[NamedNativeType, str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def resolver_objects(self) -> List[ObjectBinding]:
        return [obj for obj in self.objects if obj.resolvers]

    def get_object(self, name: str) -> Optional[ObjectBinding]:
        for obj in self.objects:
            if obj.name == name:
                return obj
        return None

    def bindings(self, kind: BindingKind) -> List[FieldBinding]:
        return [f for obj in self.objects for f in obj.fields if f.kind == kind]

    def iter_native_types(self) -> Iterator[NativeType]:
        """Native types the exec module refers to by name."""
        for obj in self.resolver_objects:
            if obj.owner is not None:
                yield obj.owner
            for binding in obj.resolvers:
                yield binding.type
                for argument in binding.arguments:
                    yield argument.type
        for enum in self.enums:
            yield enum.native
        for input_binding in self.inputs:
            yield input_binding.native
        for native, _ in self.type_names:
            yield native


class ExecPlanBuilder:
    """Walks the schema once and records a binding decision for every field."""

    def __init__(
        self,
        schema: SchemaDocument,
        type_map: TypeMap,
        model_plan: ModelPlan,
        target: OutputTarget,
        naming: NamingConvention,
        member_lookup: MemberLookup,
        reserved_names: Iterable[str] = (),
    ):
        self.schema = schema
        self.model_plan = model_plan
        self.target = target
        self.naming = naming
        self.member_lookup = member_lookup
        # Generated types are bound through the model module
        self.type_map = type_map.with_entries(model_plan.generated_entries())
        self.resolver = NativeTypeResolver(schema, self.type_map)

        self._module_names = naming.module_scope()
        self._module_names.add_used_names(reserved_names)
        self._root_methods = naming.member_scope()
        self._locals = naming.member_scope()
        self._locals.add_used_names(reserved_names)
        self._members_cache: Dict[str, Optional[Dict[str, Member]]] = {}
        self._warnings: List[str] = []

    def build(self) -> ExecPlan:
        plan = ExecPlan(
            module=self.target.module,
            package=self.target.package,
            schema_source=self.schema.source,
            model_module=self.model_plan.module,
            operations={
                operation: name
                for name, operation in self.schema.root_operations.items()
            },
        )

        for definition in self.schema:
            if definition.name.startswith("__"):
                continue
            if definition.kind == TypeKind.OBJECT:
                plan.objects.append(self._bind_object(definition))
            elif definition.kind == TypeKind.ENUM:
                enum_binding = self._bind_enum(definition)
                if enum_binding is not None:
                    plan.enums.append(enum_binding)
            elif definition.kind == TypeKind.INPUT_OBJECT:
                input_binding = self._bind_input(definition)
                if input_binding is not None:
                    plan.inputs.append(input_binding)
            elif definition.kind in (TypeKind.INTERFACE, TypeKind.UNION):
                abstract = self._bind_abstract(definition)
                if abstract.implementations:
                    plan.abstracts.append(abstract)

        plan.type_names = self._collect_type_names(plan.abstracts)
        plan.warnings = list(self._warnings)
        logger.debug(
            "Exec plan for %s: %d objects, %d resolvers",
            self.target.module,
            len(plan.objects),
            len(plan.bindings(BindingKind.RESOLVER)),
        )
        return plan

    def _warn(self, message: str):
        logger.warning(message)
        self._warnings.append(message)

    def _owner(self, name: str) -> Tuple[Optional[NamedNativeType], Optional[TypeMapEntry]]:
        if not self.type_map.exists(name):
            return None, None
        entry = self.type_map[name]
        return self.resolver.native_for_entry(name, entry), entry

    def _members(self, entry: TypeMapEntry) -> Optional[Dict[str, Member]]:
        key = entry.qualified_name
        if key not in self._members_cache:
            members = self.member_lookup(entry)
            if members is None:
                self._warn(
                    f"cannot introspect {key}; every field of it is bound to a resolver"
                )
            self._members_cache[key] = members
        return self._members_cache[key]

    def _bind_object(self, definition: TypeDefinition) -> ObjectBinding:
        owner, entry = self._owner(definition.name)
        generated = isinstance(self.model_plan.get(definition.name), ModelDecl)
        base = self.naming.convert(definition.name, self.naming.type_case)
        root_method = self._root_methods.sanitize_name(definition.name, self.naming.method_case)
        binding = ObjectBinding(
            name=definition.name,
            owner=owner,
            entry=None if generated else entry,
            generated=generated,
            resolver_name=self._module_names.sanitize_name(
                f"{base}Resolver", NamingCase.PRESERVE
            ),
            root_method=root_method,
            local_name=self._locals.sanitize_name(
                f"{root_method}_resolver", NamingCase.PRESERVE
            ),
            operation=self.schema.root_operations.get(definition.name),
            description=definition.description,
        )

        if not definition.fields:
            self._warn(f"type {definition.name!r} has no fields; nothing to bind")
            return binding

        method_names = self.naming.member_scope()
        for schema_field in definition.fields:
            binding.fields.append(
                self._bind_field(binding, schema_field, method_names)
            )
        return binding

    def _find_member(self, binding: ObjectBinding, schema_field: FieldDefinition) -> Optional[Member]:
        if binding.generated:
            return self.model_plan.member_for(binding.name, schema_field.name)
        if binding.entry is None or binding.operation == "subscription":
            return None

        members = self._members(binding.entry)
        if members is None:
            return None

        override = binding.entry.field_override(schema_field.name)
        if override is not None:
            member = members.get(override)
            if member is None:
                self._warn(
                    f"{binding.name}.{schema_field.name}: {binding.entry.qualified_name} "
                    f"has no member {override!r}; a resolver is required"
                )
            return member

        for candidate in (
            schema_field.name,
            self.naming.convert(schema_field.name, self.naming.field_case),
        ):
            if candidate in members:
                return members[candidate]
        return None

    def _bind_field(
        self,
        binding: ObjectBinding,
        schema_field: FieldDefinition,
        method_names,
    ) -> FieldBinding:
        return_type = self.resolver.resolve_field(
            schema_field.type, binding.name, schema_field.name
        )
        argument_names = self.naming.member_scope()
        argument_names.add_used_names(("self", "obj", "info"))
        arguments = [
            Argument(
                name=argument.name,
                py_name=argument_names.sanitize_name(argument.name, self.naming.argument_case),
                type=self.resolver.resolve_field(
                    argument.type, binding.name, f"{schema_field.name}({argument.name})"
                ),
                default_value=argument.default_value,
            )
            for argument in schema_field.arguments
        ]

        member = self._find_member(binding, schema_field)
        if member is not None and member.arity == len(arguments):
            kind = (
                BindingKind.ATTRIBUTE
                if member.kind == MemberKind.ATTRIBUTE
                else BindingKind.METHOD
            )
            return FieldBinding(
                name=schema_field.name,
                py_name=member.name,
                kind=kind,
                type=return_type,
                arguments=arguments,
                arity=member.arity,
                description=schema_field.description,
            )

        if member is not None:
            logger.debug(
                "%s.%s: member %s takes %d arguments, field has %d",
                binding.name,
                schema_field.name,
                member.name,
                member.arity,
                len(arguments),
            )

        return FieldBinding(
            name=schema_field.name,
            py_name=method_names.sanitize_name(schema_field.name, self.naming.method_case),
            kind=BindingKind.RESOLVER,
            type=return_type,
            arguments=arguments,
            description=schema_field.description,
            subscription=binding.operation == "subscription",
        )

    def _bind_enum(self, definition: TypeDefinition) -> Optional[EnumBinding]:
        native, entry = self._owner(definition.name)
        if entry is None or entry.module == "builtins":
            return None

        decl = self.model_plan.get(definition.name)
        generated = isinstance(decl, EnumDecl)
        values = []
        for value in definition.enum_values:
            if generated:
                member = decl.member_for(value.name)
            else:
                member = entry.field_override(value.name) or value.name
            values.append((value.name, member))
        return EnumBinding(
            name=definition.name, native=native, generated=generated, values=values
        )

    def _bind_input(self, definition: TypeDefinition) -> Optional[InputBinding]:
        native, entry = self._owner(definition.name)
        if entry is None or entry.module == "builtins":
            return None

        decl = self.model_plan.get(definition.name)
        names = self.naming.member_scope()
        fields = []
        for input_field in definition.input_fields:
            if isinstance(decl, ModelDecl):
                py_name = decl.get_field(input_field.name).py_name
            else:
                py_name = entry.field_override(input_field.name) or names.sanitize_name(
                    input_field.name, self.naming.field_case
                )
            fields.append((input_field.name, py_name))
        return InputBinding(name=definition.name, native=native, fields=fields)

    def _bind_abstract(self, definition: TypeDefinition) -> AbstractBinding:
        if definition.kind == TypeKind.INTERFACE:
            candidates = [t.name for t in self.schema.implementations(definition.name)]
        else:
            candidates = list(definition.members)

        abstract = AbstractBinding(name=definition.name, kind=definition.kind)
        for name in candidates:
            native, entry = self._owner(name)
            if native is None or entry.module == "builtins":
                continue
            abstract.implementations.append((native, name))
        return abstract

    def _collect_type_names(self, abstracts: List[AbstractBinding]) -> List[Tuple[NamedNativeType, str]]:
        seen: Dict[NamedNativeType, str] = {}
        for abstract in abstracts:
            for native, name in abstract.implementations:
                existing = seen.get(native)
                if existing is None:
                    seen[native] = name
                elif existing != name:
                    self._warn(
                        f"{native.module}.{native.name} is bound to both {existing!r} "
                        f"and {name!r}; abstract types resolve it as {existing!r}"
                    )
        return list(seen.items())


def build_exec_plan(
    schema: SchemaDocument,
    type_map: TypeMap,
    model_plan: ModelPlan,
    target: OutputTarget,
    naming: NamingConvention,
    member_lookup: MemberLookup,
    reserved_names: Iterable[str] = (),
) -> ExecPlan:
    """
    Bind every field of every object type.

    Raises:
        BindingError: a return or argument type cannot be resolved
    """
    builder = ExecPlanBuilder(
        schema, type_map, model_plan, target, naming, member_lookup, reserved_names
    )
    return builder.build()
