"""
gqlbind code generation.

Turns a GraphQL schema into a Python model module and an execution module
that binds user resolvers to a graphql-core schema.
"""

from .core import (
    BindingError,
    CodeGenerator,
    ConfigError,
    FormatError,
    GenerationIOError,
    GenerationPipeline,
    GenerationResult,
    GeneratorError,
    GeneratorInput,
    PipelineState,
    SchemaError,
    TemplateError,
    ValidationError,
    generate,
)
from .languages.python import PythonGenerator

__all__ = [
    "BindingError",
    "CodeGenerator",
    "ConfigError",
    "FormatError",
    "GenerationIOError",
    "GenerationPipeline",
    "GenerationResult",
    "GeneratorError",
    "GeneratorInput",
    "PipelineState",
    "PythonGenerator",
    "SchemaError",
    "TemplateError",
    "ValidationError",
    "generate",
]
