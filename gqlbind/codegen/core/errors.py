"""
Error taxonomy for the generation pipeline.

Every error carries a chain of contexts added by the stages it passes through,
so the top-level caller can print a stage-qualified message such as
``exec plan failed: Query.user: no native type bound for schema type 'Date'``.
"""

from pathlib import Path
from typing import List, Optional, Union


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.contexts: List[str] = []

    def add_context(self, context: str) -> "GeneratorError":
        """Prefix the error with the name of the stage that produced it."""
        self.contexts.insert(0, context)
        return self

    @property
    def stage(self) -> Optional[str]:
        """Outermost context, normally the pipeline stage."""
        return self.contexts[0] if self.contexts else None

    def __str__(self) -> str:
        return ": ".join([*self.contexts, self.message])


class ConfigError(GeneratorError):
    """Malformed or contradictory configuration."""


class SchemaError(GeneratorError):
    """Schema text could not be parsed or is not a valid SDL document."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        source_name: Optional[str] = None,
    ):
        self.line = line
        self.column = column
        self.source_name = source_name
        location = ""
        if source_name:
            location = source_name
        if line is not None:
            location = f"{location}:{line}:{column}" if location else f"{line}:{column}"
        super().__init__(f"{location}: {message}" if location else message)


class BindingError(GeneratorError):
    """A schema type or field has no resolvable native counterpart."""

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
        schema_type: Optional[str] = None,
    ):
        self.type_name = type_name
        self.field_name = field_name
        self.schema_type = schema_type
        owner = type_name or ""
        if field_name:
            owner = f"{owner}.{field_name}"
        super().__init__(f"{owner}: {message}" if owner else message)


class TemplateError(GeneratorError):
    """Exception raised for template-related errors."""


class FormatError(GeneratorError):
    """Formatting generated source failed. Never fatal."""


class ValidationError(GeneratorError):
    """The two generated artifacts disagree about a type's shape."""

    def __init__(self, message: str, type_name: str, field_name: Optional[str] = None):
        self.type_name = type_name
        self.field_name = field_name
        owner = f"{type_name}.{field_name}" if field_name else type_name
        super().__init__(f"{owner}: {message}")


class GenerationIOError(GeneratorError):
    """Directory or file creation or write failure."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)
