"""
Python code generator implementation.

Renders the model plan into dataclasses, enums, protocols and union
aliases, and the exec plan into resolver protocols plus the function that
wires them into an executable graphql-core schema.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ...core.binding import BindingKind, ExecPlan
from ...core.errors import TemplateError
from ...core.generator import CodeGenerator
from ...core.models import EnumDecl, ModelDecl, ModelPlan, UnionDecl
from ...core.schema import TypeKind
from ...core.templates import TemplateEngine, escape_control
from ...core.typemap import TypeMapEntry
from ...core.types import Member
from .config import PYTHON_BUILTIN_TYPE_MAP, PythonConfig
from .formatter import check_syntax
from .introspect import lookup_members
from .naming import PythonNaming
from .types import DefaultRenderer, ImportSet, TypeRenderer, member_access

# Top-level names and make_executable_schema locals of the exec module
EXEC_MODULE_NAMES = (
    "SCHEMA_SOURCE",
    "ResolverRoot",
    "make_executable_schema",
    "build_schema",
    "_attribute",
    "_method",
    "_passthrough",
    "_construct",
    "_TYPE_NAMES",
    "_resolve_type",
    "_refresh_defaults",
    "schema",
    "resolvers",
    "fields",
    "values",
    "input_type",
)

# Reserved against schema-derived names only; the module imports them itself
EXEC_IMPORTED_NAMES = ("build_schema",)


def schema_literal(source: str) -> str:
    """
    Python literal for the embedded schema text.

    A triple-quoted block when the text survives formatting unchanged,
    otherwise an escaped single-line string.
    """
    lines = source.split("\n")
    readable = (
        '"""' not in source
        and "\\" not in source
        and not source.endswith('"')
        and all(ch.isprintable() or ch in "\n\t" for ch in source)
        and all(line == line.rstrip() for line in lines)
        and "\n\n\n\n" not in source
    )
    if readable:
        return f'"""\\\n{source}"""'
    return json.dumps(source)


def _pystring_filter(value: Any) -> str:
    return json.dumps(str(value))


def _pytuple_filter(values: Iterable[Any]) -> str:
    items = [json.dumps(str(v)) for v in values]
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def _docstring_filter(value: Any) -> str:
    text = str(value).strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    text = "\n".join(escape_control(line) for line in text.splitlines())
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    if "\n" in text:
        return f'"""\n{text}\n"""'
    return f'"""{text}"""'


class PythonGenerator(CodeGenerator):
    """Code generator for the Python target."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)
        self.python_config = PythonConfig(**self.config)
        self.naming = PythonNaming()

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def setup_templates(self, engine: TemplateEngine):
        engine.add_filter("pystring", _pystring_filter)
        engine.add_filter("pytuple", _pytuple_filter)
        engine.add_filter("docstring", _docstring_filter)
        engine.add_filter("member", member_access)

    def builtin_types(self) -> Mapping[str, TypeMapEntry]:
        return PYTHON_BUILTIN_TYPE_MAP

    def naming_convention(self) -> PythonNaming:
        return self.naming

    def lookup_members(self, entry: TypeMapEntry) -> Optional[Dict[str, Member]]:
        return lookup_members(entry)

    def reserved_exec_names(self) -> List[str]:
        return list(EXEC_MODULE_NAMES)

    def format_code(self, code: str, filename: str = "<generated>") -> str:
        """Check syntax, then apply the whitespace cleanup."""
        check_syntax(code, filename)
        formatted = super().format_code(code, filename)
        check_syntax(formatted, filename)
        return formatted

    def render(self, template_key: str, plan: Union[ModelPlan, ExecPlan]) -> str:
        if template_key == "models":
            context = self._model_context(plan)
        elif template_key == "generated":
            context = self._exec_context(plan)
        else:
            raise TemplateError(f"unknown template key {template_key!r}")
        return self.template_engine.render_template(self.template_name(template_key), context)

    def _model_context(self, plan: ModelPlan) -> Dict[str, Any]:
        imports = ImportSet(plan.module, reserved=[d.class_name for d in plan.declarations])

        kinds = {decl.kind for decl in plan.declarations if isinstance(decl, ModelDecl)}
        if kinds & {TypeKind.OBJECT, TypeKind.INPUT_OBJECT}:
            imports.add("dataclasses", "dataclass")
        if any(isinstance(decl, EnumDecl) for decl in plan.declarations):
            imports.add("enum", "Enum")
        if TypeKind.INTERFACE in kinds:
            imports.add("typing", "Protocol")
        if any(isinstance(decl, UnionDecl) for decl in plan.declarations):
            imports.add("typing", "Union")

        imports.collect(plan.iter_native_types()).freeze()
        return {
            "plan": plan,
            "package": plan.package,
            "declarations": plan.declarations,
            "import_groups": imports.groups(),
            "types": TypeRenderer(imports),
            "dataclass_arguments": self.python_config.dataclass_arguments(),
            "add_comments": self.python_config.add_comments,
        }

    def _exec_context(self, plan: ExecPlan) -> Dict[str, Any]:
        resolver_objects = plan.resolver_objects
        uses_attribute = bool(plan.bindings(BindingKind.ATTRIBUTE))
        uses_method = bool(plan.bindings(BindingKind.METHOD))
        uses_subscription = any(
            binding.subscription for obj in resolver_objects for binding in obj.resolvers
        )
        uses_helpers = (
            uses_attribute
            or uses_method
            or uses_subscription
            or bool(plan.inputs)
            or bool(plan.type_names)
        )

        reserved = [name for name in EXEC_MODULE_NAMES if name not in EXEC_IMPORTED_NAMES]
        reserved += [obj.resolver_name for obj in plan.objects]
        local = [plan.model_module] if plan.model_module else []
        imports = ImportSet(plan.module, reserved=reserved, local=local)

        imports.add("graphql", "GraphQLSchema")
        build_schema = imports.add("graphql", "build_schema")
        imports.add("typing", "Protocol")
        if resolver_objects or uses_helpers:
            imports.add("graphql", "GraphQLResolveInfo")
        if uses_helpers or any(obj.owner is None for obj in resolver_objects):
            imports.add("typing", "Any")
        if uses_attribute or uses_method or plan.inputs:
            imports.add("collections.abc", "Callable")
        if uses_subscription:
            imports.add("collections.abc", "AsyncIterator")
        refresh_defaults = bool(plan.enums or plan.inputs)
        if refresh_defaults:
            for name in (
                "GraphQLInputObjectType",
                "GraphQLInterfaceType",
                "GraphQLObjectType",
                "value_from_ast",
            ):
                imports.add("graphql", name)

        imports.collect(plan.iter_native_types()).freeze()
        types = TypeRenderer(imports)
        return {
            "plan": plan,
            "package": plan.package,
            "build_schema": build_schema,
            "schema_literal": schema_literal(plan.schema_source),
            "objects": plan.objects,
            "resolver_objects": resolver_objects,
            "enums": plan.enums,
            "inputs": plan.inputs,
            "abstracts": plan.abstracts,
            "type_names": plan.type_names,
            "uses_attribute": uses_attribute,
            "uses_method": uses_method,
            "uses_subscription": uses_subscription,
            "refresh_defaults": refresh_defaults,
            "import_groups": imports.groups(),
            "types": types,
            "defaults": DefaultRenderer(types, plan.enums),
            "add_comments": self.python_config.add_comments,
        }


def create_python_generator(config: Optional[Dict[str, Any]] = None) -> PythonGenerator:
    """Create a Python generator, with optional ``python`` config section."""
    return PythonGenerator(config)
