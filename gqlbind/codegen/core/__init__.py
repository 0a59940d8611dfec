"""
Core components of the generation pipeline.

Language-independent pieces: TypeMap, schema loading, plan building,
templating, validation and writing.
"""

from .config import (
    GeneratorConfig,
    GeneratorInput,
    OutputTarget,
    load_config_file,
    load_type_map_file,
    normalize,
)
from .errors import (
    BindingError,
    ConfigError,
    FormatError,
    GenerationIOError,
    GeneratorError,
    SchemaError,
    TemplateError,
    ValidationError,
)
from .generator import CodeGenerator, Diagnostic, GenerationResult, Severity
from .pipeline import GenerationPipeline, PipelineState, generate
from .schema import SchemaDocument, load_schema
from .typemap import TypeMap, TypeMapEntry, resolve_type_map

__all__ = [
    "BindingError",
    "CodeGenerator",
    "ConfigError",
    "Diagnostic",
    "FormatError",
    "GenerationIOError",
    "GenerationPipeline",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "GeneratorInput",
    "OutputTarget",
    "PipelineState",
    "SchemaDocument",
    "SchemaError",
    "Severity",
    "TemplateError",
    "TypeMap",
    "TypeMapEntry",
    "ValidationError",
    "generate",
    "load_config_file",
    "load_schema",
    "load_type_map_file",
    "normalize",
    "resolve_type_map",
]
