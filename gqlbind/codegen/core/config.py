"""
Configuration management for code generation.

A run starts from a raw :class:`GeneratorInput` (what the user typed or put
in a config file) and :func:`normalize` turns it into an immutable
:class:`GeneratorConfig`: output targets resolved, TypeMap completed with
the target's built-ins and the schema parsed.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ...logging_config import get_logger
from .errors import ConfigError, GeneratorError
from .naming import sanitize_package_name
from .schema import SchemaDocument, load_schema
from .typemap import TypeMap, TypeMapEntry, parse_type_map, resolve_type_map

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class OutputTarget:
    """A generated file plus the identifiers derived from its location."""

    filename: Path
    package: str
    module: str

    @classmethod
    def normalize(
        cls,
        filename: Optional[PathLike],
        package: Optional[str] = None,
        module: Optional[str] = None,
        module_root: Optional[PathLike] = None,
    ) -> "OutputTarget":
        """
        Resolve the absolute filename, package identifier and import module.

        The package defaults to the sanitized name of the file's directory.
        The module defaults to the dotted path of the file relative to
        ``module_root`` (the working directory when omitted).
        """
        if filename is None or not str(filename).strip():
            raise ConfigError("filename is required")

        path = Path(filename).expanduser().resolve()
        if path.suffix != ".py":
            raise ConfigError(f"{path} must be a .py file")

        if package is not None and not package.isidentifier():
            raise ConfigError(f"package {package!r} is not a valid identifier")

        if module is None:
            root = Path(module_root or Path.cwd()).expanduser().resolve()
            try:
                relative = path.with_suffix("").relative_to(root)
            except ValueError:
                raise ConfigError(
                    f"{path} is outside the module root {root}; set the module explicitly"
                ) from None
            module = ".".join(sanitize_package_name(part) for part in relative.parts)
        elif not all(part.isidentifier() for part in module.split(".")):
            raise ConfigError(f"module {module!r} is not a dotted import path")

        return cls(
            filename=path,
            package=package or sanitize_package_name(path.parent),
            module=module,
        )


@dataclass
class GeneratorInput:
    """Raw, user-supplied input for one generation run."""

    schema_source: str
    exec_filename: PathLike = "generated.py"
    model_filename: PathLike = "models_gen.py"
    exec_package: Optional[str] = None
    model_package: Optional[str] = None
    exec_module: Optional[str] = None
    model_module: Optional[str] = None
    models: Optional[Mapping[str, Any]] = None
    module_root: Optional[PathLike] = None
    schema_name: str = "schema.graphql"


@dataclass(frozen=True)
class GeneratorConfig:
    """Fully normalized configuration; read-only for the rest of the run."""

    schema_source: str
    schema: SchemaDocument
    exec: OutputTarget
    model: OutputTarget
    type_map: TypeMap
    user_types: Tuple[str, ...] = field(default_factory=tuple)


def normalize(raw: GeneratorInput, builtins: Mapping[str, TypeMapEntry]) -> GeneratorConfig:
    """
    Turn raw input into a :class:`GeneratorConfig`.

    Raises:
        ConfigError: malformed or contradictory input, nothing touched on disk
        SchemaError: the schema does not parse, wrapped as "schema load failed"
    """
    try:
        model = OutputTarget.normalize(
            raw.model_filename, raw.model_package, raw.model_module, raw.module_root
        )
    except ConfigError as e:
        raise e.add_context("model")

    try:
        exec_target = OutputTarget.normalize(
            raw.exec_filename, raw.exec_package, raw.exec_module, raw.module_root
        )
    except ConfigError as e:
        raise e.add_context("exec")

    if model.filename == exec_target.filename:
        raise ConfigError(
            f"exec and model outputs must be different files, both are {model.filename}"
        )

    user_entries = parse_type_map(raw.models)
    type_map = resolve_type_map(user_entries, builtins)

    try:
        schema = load_schema(raw.schema_source, raw.schema_name)
    except GeneratorError as e:
        raise e.add_context("schema load failed")

    return GeneratorConfig(
        schema_source=raw.schema_source,
        schema=schema,
        exec=exec_target,
        model=model,
        type_map=type_map,
        user_types=tuple(user_entries),
    )


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ConfigError(f"duplicate binding for {key!r}")
        result[key] = value
    return result


def load_config_file(config_path: PathLike) -> Dict[str, Any]:
    """Load a JSON configuration file, rejecting duplicate keys."""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    if not path.suffix.lower() == ".json":
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    except ConfigError as e:
        raise e.add_context(str(path))
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")

    logger.debug("Loaded configuration from %s", path)
    return config


def load_type_map_file(path: PathLike) -> Dict[str, TypeMapEntry]:
    """
    Load user type bindings from JSON.

    The file is either a bare ``{"SchemaType": "module.Type"}`` object or a
    full project configuration whose ``models`` key holds that object.
    """
    data = load_config_file(path)
    return parse_type_map(data.get("models", data))
