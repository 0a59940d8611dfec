"""
Base generator interface for all code generation targets.

Defines the contract that all language targets must implement: their
built-in TypeMap, naming rules, member introspection, rendering and
formatting.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .binding import ExecPlan, build_exec_plan
from .config import GeneratorConfig
from .models import ModelPlan, build_model_plan
from .naming import NamingConvention
from .templates import TemplateEngine, create_template_engine
from .typemap import TypeMapEntry
from .types import Member


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize generator with optional configuration."""
        self.config = config or {}
        self._template_engine = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py')."""
        pass

    @abstractmethod
    def get_template_directory(self) -> Path:
        """Return the directory containing templates for this generator."""
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine(self.get_template_directory())
            self.setup_templates(self._template_engine)
        return self._template_engine

    def setup_templates(self, engine: TemplateEngine):
        """Hook for registering target-specific filters."""

    def template_name(self, template_key: str) -> str:
        """Template file for ``template_key`` ("models" or "generated")."""
        return f"{template_key}{self.file_extension}.j2"

    @abstractmethod
    def builtin_types(self) -> Mapping[str, TypeMapEntry]:
        """Immutable built-in TypeMap of the target language."""
        pass

    @abstractmethod
    def naming_convention(self) -> NamingConvention:
        pass

    @abstractmethod
    def lookup_members(self, entry: TypeMapEntry) -> Optional[Dict[str, Member]]:
        """
        Members exposed by a user-bound native type.

        Returns None when the type cannot be located, in which case every
        field of it is bound to a resolver.
        """
        pass

    def reserved_exec_names(self) -> List[str]:
        """Top-level names the exec template declares itself."""
        return []

    def build_model_plan(self, config: GeneratorConfig) -> ModelPlan:
        return build_model_plan(
            config.schema, config.type_map, config.model, self.naming_convention()
        )

    def build_exec_plan(self, config: GeneratorConfig, model_plan: ModelPlan) -> ExecPlan:
        return build_exec_plan(
            config.schema,
            config.type_map,
            model_plan,
            config.exec,
            self.naming_convention(),
            self.lookup_members,
            self.reserved_exec_names(),
        )

    @abstractmethod
    def render(self, template_key: str, plan: Union[ModelPlan, ExecPlan]) -> str:
        """
        Render a plan into raw source. Same plan, same text.

        Raises:
            TemplateError: on any rendering failure
        """
        pass

    def format_code(self, code: str, filename: str = "<generated>") -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code
            filename: Destination, used in error messages

        Returns:
            Formatted code

        Raises:
            FormatError: the code could not be formatted
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem reported alongside a successful result."""

    message: str
    severity: Severity = Severity.WARNING
    path: Optional[Path] = None
    stage: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"{self.path}: " if self.path else ""
        return f"{prefix}{self.message}"


@dataclass
class GenerationResult:
    """Container for generation results and metadata."""

    exec_path: Path
    exec_code: str
    model_path: Path
    model_code: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def warnings(self) -> List[str]:
        return [str(d) for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def written(self) -> List[Path]:
        paths = [self.exec_path]
        if self.model_code is not None:
            paths.insert(0, self.model_path)
        return paths
