"""
Generation pipeline.

Runs the stages in order and records where it is::

    UNINITIALIZED -> NORMALIZED -> MODEL_PLANNED -> MODEL_RENDERED
        -> EXEC_PLANNED -> EXEC_RENDERED -> VALIDATED -> DONE

Any error moves the pipeline to FAILED with the stage name added to the
error's context. Nothing on disk changes until every stage before the
write has succeeded.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional

from ...logging_config import get_logger
from .config import GeneratorConfig, GeneratorInput, normalize
from .errors import GeneratorError
from .generator import CodeGenerator, Diagnostic, GenerationResult, Severity
from .validator import validate
from .writer import Artifact, commit, prepare_artifact

logger = get_logger(__name__)


class PipelineState(Enum):
    UNINITIALIZED = "uninitialized"
    NORMALIZED = "normalized"
    MODEL_PLANNED = "model_planned"
    MODEL_RENDERED = "model_rendered"
    EXEC_PLANNED = "exec_planned"
    EXEC_RENDERED = "exec_rendered"
    VALIDATED = "validated"
    DONE = "done"
    FAILED = "failed"


class GenerationPipeline:
    """One generation run for a code generation target."""

    def __init__(self, generator: Optional[CodeGenerator] = None):
        if generator is None:
            from ..languages.python import PythonGenerator

            generator = PythonGenerator()
        self.generator = generator
        self.state = PipelineState.UNINITIALIZED
        self.failure: Optional[GeneratorError] = None
        self.diagnostics: List[Diagnostic] = []

    @contextmanager
    def _stage(self, context: Optional[str], next_state: PipelineState) -> Iterator[None]:
        try:
            yield
        except GeneratorError as e:
            if context:
                e.add_context(context)
            self.state = PipelineState.FAILED
            self.failure = e
            logger.debug("Pipeline failed: %s", e)
            raise
        logger.debug("Pipeline state %s", next_state.value)
        self.state = next_state

    def _prepare(self, path, raw: str) -> Artifact:
        artifact, diagnostic = prepare_artifact(path, raw, self.generator.format_code)
        if diagnostic is not None:
            self.diagnostics.append(diagnostic)
        return artifact

    def run(self, raw: GeneratorInput) -> GenerationResult:
        """
        Generate both artifacts for ``raw``.

        Raises:
            GeneratorError: the first failure, with its stage context
        """
        self.state = PipelineState.UNINITIALIZED
        self.failure = None
        self.diagnostics = []

        with self._stage(None, PipelineState.NORMALIZED):
            config: GeneratorConfig = normalize(raw, self.generator.builtin_types())

        with self._stage("model plan failed", PipelineState.MODEL_PLANNED):
            model_plan = self.generator.build_model_plan(config)

        with self._stage("model generation failed", PipelineState.MODEL_RENDERED):
            if model_plan.is_empty:
                logger.info("No model declarations needed, %s not written", config.model.filename)
                model_artifact = Artifact(config.model.filename, None)
            else:
                model_artifact = self._prepare(
                    config.model.filename, self.generator.render("models", model_plan)
                )

        with self._stage("exec plan failed", PipelineState.EXEC_PLANNED):
            exec_plan = self.generator.build_exec_plan(config, model_plan)
            self.diagnostics.extend(
                Diagnostic(message=w, severity=Severity.WARNING, stage="exec plan")
                for w in exec_plan.warnings
            )

        with self._stage("exec codegen failed", PipelineState.EXEC_RENDERED):
            exec_artifact = self._prepare(
                config.exec.filename, self.generator.render("generated", exec_plan)
            )

        with self._stage("validation failed", PipelineState.VALIDATED):
            validate(exec_plan, model_artifact.content, self.generator.lookup_members)

        with self._stage("write failed", PipelineState.DONE):
            commit([model_artifact, exec_artifact])

        return GenerationResult(
            exec_path=exec_artifact.path,
            exec_code=exec_artifact.content,
            model_path=model_artifact.path,
            model_code=model_artifact.content,
            diagnostics=list(self.diagnostics),
            metadata={
                "language": self.generator.language_name,
                "model_package": config.model.package,
                "exec_package": config.exec.package,
                "model_module": config.model.module,
                "exec_module": config.exec.module,
                "declarations": len(model_plan.declarations),
                "objects": len(exec_plan.objects),
                "resolvers": sum(len(obj.resolvers) for obj in exec_plan.objects),
                "direct_bindings": sum(
                    len(obj.fields) - len(obj.resolvers) for obj in exec_plan.objects
                ),
            },
        )


def generate(raw: GeneratorInput, generator: Optional[CodeGenerator] = None) -> GenerationResult:
    """Run a full generation with the default (Python) target."""
    return GenerationPipeline(generator).run(raw)
