"""Utility functions for reading schema files."""

from pathlib import Path
from typing import Tuple, Union

from .codegen.core.errors import ConfigError
from .logging_config import get_logger

logger = get_logger(__name__)

SCHEMA_SUFFIXES = {".graphql", ".graphqls", ".gql"}


def read_schema_file(file_path: Union[str, Path]) -> Tuple[str, str]:
    """Load schema text from a local file.

    Args:
        file_path: Path to the schema file.

    Returns:
        Tuple of (source name, schema text).

    Raises:
        ConfigError: If the file doesn't exist or cannot be read.
    """
    file_path = Path(file_path)
    logger.debug("Reading schema from %s", file_path)

    if not file_path.is_file():
        raise ConfigError(f"Schema file not found: {file_path}")

    if file_path.suffix.lower() not in SCHEMA_SUFFIXES:
        # Don't raise, just warn - might still be valid SDL
        logger.warning("Schema file does not have a GraphQL extension: %s", file_path)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading schema file {file_path}: {e}") from e

    logger.info("Loaded schema from %s", file_path)
    return str(file_path), text
