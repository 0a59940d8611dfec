"""
Finalizer: turns rendered source into files on disk.

Artifacts are prepared in memory first (formatted, or kept raw when the
formatter fails) and only committed once every stage has succeeded, so a
failing run never leaves a destination half written.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from ...logging_config import get_logger
from .errors import FormatError, GenerationIOError
from .generator import Diagnostic, Severity

logger = get_logger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o644

Formatter = Callable[[str, str], str]


@dataclass(frozen=True)
class Artifact:
    """A destination path plus its final content; ``None`` means remove only."""

    path: Path
    content: Optional[str]


def prepare_artifact(
    path: Path, raw: str, formatter: Formatter
) -> Tuple[Artifact, Optional[Diagnostic]]:
    """
    Format ``raw`` for ``path``, keeping the raw text if formatting fails.

    Returns the artifact and, on formatter failure, a warning diagnostic.
    """
    try:
        return Artifact(path, formatter(raw, str(path))), None
    except FormatError as e:
        logger.warning("Formatting %s failed, writing unformatted source: %s", path, e)
        return Artifact(path, raw), Diagnostic(
            message=f"formatting failed, unformatted source written: {e}",
            severity=Severity.WARNING,
            path=path,
            stage="format",
        )


def remove_stale(paths: Iterable[Path]):
    """Best-effort removal of previous outputs; a missing file is fine."""
    for path in paths:
        try:
            path.unlink()
            logger.debug("Removed previous output %s", path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove previous output %s: %s", path, e)


def ensure_directory(path: Path):
    try:
        path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise GenerationIOError(
            f"cannot create directory {path.parent}: {e}", path=path.parent
        ) from e


def write_file(path: Path, content: str):
    """Write ``content``, creating the file with owner-rw, group/other-r."""
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except OSError as e:
        raise GenerationIOError(f"cannot write {path}: {e}", path=path) from e
    logger.info("Wrote %s", path)


def finalize(path: Path, content: str):
    ensure_directory(path)
    write_file(path, content)


def commit(artifacts: List[Artifact]):
    """
    Replace every destination with its artifact.

    Stale files are removed first, then each artifact with content is
    written. Artifacts without content are only removed.
    """
    remove_stale(artifact.path for artifact in artifacts)
    for artifact in artifacts:
        if artifact.content is not None:
            finalize(artifact.path, artifact.content)
