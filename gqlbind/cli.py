"""
Command-line interface for gqlbind.

Reads a schema and optional configuration, runs the generation pipeline
and reports the outcome on the console.
"""

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .codegen.core.config import GeneratorInput, load_config_file, load_type_map_file
from .codegen.core.errors import ConfigError, GeneratorError
from .codegen.core.generator import GenerationResult
from .codegen.core.pipeline import GenerationPipeline
from .codegen.languages.python import create_python_generator
from .logging_config import get_logger, setup_logging
from .utils import read_schema_file

logger = get_logger(__name__)

# Initialize rich console
console = Console()

DEFAULT_SCHEMA = "schema.graphql"
DEFAULT_EXEC = "generated.py"
DEFAULT_MODELS = "models_gen.py"


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gqlbind",
        description="Generate Python models and graphql-core bindings from a GraphQL schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gqlbind --schema schema.graphql
  gqlbind --schema api.graphql --out app/generated.py --models app/models_gen.py
  gqlbind --config gqlbind.json --verbose
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument("--config", metavar="FILE", help="JSON project configuration file")
    parser.add_argument(
        "--schema", metavar="FILE", help=f"Schema file (default: {DEFAULT_SCHEMA})"
    )
    parser.add_argument(
        "--typemap",
        metavar="FILE",
        help="JSON file binding schema types to existing Python types",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--out", metavar="FILE", help=f"Exec module to write (default: {DEFAULT_EXEC})"
    )
    output_group.add_argument(
        "--package", metavar="NAME", help="Package name recorded in the exec module header"
    )
    output_group.add_argument(
        "--models",
        metavar="FILE",
        help=f"Model module to write (default: {DEFAULT_MODELS})",
    )
    output_group.add_argument(
        "--modelpackage", metavar="NAME", help="Package name recorded in the model module header"
    )
    output_group.add_argument(
        "--module-root",
        metavar="DIR",
        help="Directory import paths are derived from (default: current directory)",
    )

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING, or GQLBIND_LOG_LEVEL)",
    )
    logging_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show generation details and debug logging",
    )
    return parser


def _target_section(config: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = config.get(key) or {}
    if isinstance(section, str):
        return {"filename": section}
    if not isinstance(section, dict):
        raise ConfigError(f"'{key}' must be a filename or an object")
    return section


def _resolve(base: Path, value: Optional[str]) -> Optional[Path]:
    if value is None:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def build_input(args: argparse.Namespace) -> Tuple[GeneratorInput, Dict[str, Any]]:
    """
    Merge the project configuration file with command-line flags.

    Paths in the configuration file are relative to the file itself; flags
    are relative to the working directory and always win.

    Returns:
        The raw generator input and the ``python`` option section
    """
    config: Dict[str, Any] = {}
    base = Path.cwd()
    if args.config:
        config = load_config_file(args.config)
        base = Path(args.config).resolve().parent

    exec_section = _target_section(config, "exec")
    model_section = _target_section(config, "model")

    models = config.get("models") or {}
    if not isinstance(models, dict):
        raise ConfigError("'models' must be an object")
    models = dict(models)
    if args.typemap:
        models.update(load_type_map_file(args.typemap))

    python_options = config.get("python") or {}
    if not isinstance(python_options, dict):
        raise ConfigError("'python' must be an object")

    schema_path = (
        Path(args.schema)
        if args.schema
        else _resolve(base, config.get("schema")) or Path(DEFAULT_SCHEMA)
    )
    source_name, schema_source = read_schema_file(schema_path)

    raw = GeneratorInput(
        schema_source=schema_source,
        schema_name=source_name,
        exec_filename=args.out
        or _resolve(base, exec_section.get("filename"))
        or DEFAULT_EXEC,
        exec_package=args.package or exec_section.get("package"),
        exec_module=exec_section.get("module"),
        model_filename=args.models
        or _resolve(base, model_section.get("filename"))
        or DEFAULT_MODELS,
        model_package=args.modelpackage or model_section.get("package"),
        model_module=model_section.get("module"),
        models=models,
        module_root=args.module_root or _resolve(base, config.get("module_root")),
    )
    return raw, python_options


def _print_result(result: GenerationResult, verbose: bool):
    for path in result.written:
        console.print(f"[green]✓[/green] Wrote {escape(str(path))}")

    for diagnostic in result.diagnostics:
        console.print(f"[yellow]⚠ Warning:[/yellow] {escape(str(diagnostic))}")

    if not verbose:
        return

    table = Table(title="Generation Summary", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value", style="green")
    for key, value in result.metadata.items():
        table.add_row(key.replace("_", " ").title(), escape(str(value)))
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run gqlbind.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else args.log_level)

    try:
        raw, python_options = build_input(args)
        pipeline = GenerationPipeline(create_python_generator(python_options))
        result = pipeline.run(raw)
    except GeneratorError as e:
        logger.debug("Generation failed", exc_info=True)
        console.print(
            Panel(escape(str(e)), title="✗ Generation failed", border_style="red")
        )
        return 1

    _print_result(result, args.verbose)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
