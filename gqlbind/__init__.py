"""
gqlbind - generate Python models and graphql-core bindings from a schema.

Library usage::

    from gqlbind import GeneratorInput, generate

    result = generate(GeneratorInput(schema_source=sdl))
"""

from .codegen import (
    BindingError,
    ConfigError,
    FormatError,
    GenerationIOError,
    GenerationPipeline,
    GenerationResult,
    GeneratorError,
    GeneratorInput,
    PipelineState,
    PythonGenerator,
    SchemaError,
    TemplateError,
    ValidationError,
    generate,
)
from .logging_config import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "BindingError",
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
    "get_logger",
    "setup_logging",
]
