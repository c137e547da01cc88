# File: scaffoldgen/cli.py
"""
scaffoldgen - Command-Line Interface
======================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # One entity, columns inline
    python -m scaffoldgen --entity Product --columns id,name,cover_img,price

    # Soft-delete lifecycle routes as well
    python -m scaffoldgen -e Post -c id,title,body,deleted_at --soft-delete-routes

    # Many entities from a definition file, against another project root
    python -m scaffoldgen --definition entities.yaml --base-path ../shop -v

    # Show what would be written without touching the disk
    python -m scaffoldgen -d entities.yaml --dry-run

Exit codes:
    0 — success (created, skipped and unchanged are all success)
    1 — invalid input (bad entity/column names or configuration)
    2 — emission error (at least one artifact failed to write)
    4 — argument or definition-file error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_EMIT_ERROR: int = 2
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root scaffoldgen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR only, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("scaffoldgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _split_columns(value: str) -> List[str]:
    """Parse ``a,b,c`` into ``["a", "b", "c"]`` (blanks dropped)."""
    return [part.strip() for part in value.split(",") if part.strip()]


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from scaffoldgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="scaffoldgen",
        description=(
            "scaffoldgen — CRUD boilerplate generator for Laravel projects.\n\n"
            "Writes store/update form requests, a JSON resource and route "
            "declarations for each entity. Existing files are never "
            "overwritten and routes are only ever appended."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -e Product -c id,name,cover_img,price\n"
            "  %(prog)s -e Post -c id,title,deleted_at --soft-delete-routes\n"
            "  %(prog)s -d entities.yaml --base-path ../shop -v\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"scaffoldgen v{__version__}",
    )

    # --- Input ---
    input_group = parser.add_argument_group("input")
    source = input_group.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-e", "--entity",
        type=str,
        default=None,
        metavar="NAME",
        help="Entity name, e.g. 'Product' (requires --columns).",
    )
    source.add_argument(
        "-d", "--definition",
        type=str,
        default=None,
        metavar="PATH",
        help="Definition file (YAML or JSON) with 'entities' and 'config'.",
    )
    input_group.add_argument(
        "-c", "--columns",
        type=_split_columns,
        default=None,
        metavar="COLS",
        help="Comma-separated column names, in table order.",
    )
    input_group.add_argument(
        "--soft-delete-routes",
        action="store_true",
        default=False,
        help="Also declare trashed/restore/forceDelete routes.",
    )

    # --- Locations ---
    location_group = parser.add_argument_group("locations")
    location_group.add_argument(
        "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Root of the host project (default: current directory).",
    )
    location_group.add_argument(
        "--app-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Application directory relative to the base path (default: app).",
    )
    location_group.add_argument(
        "--routes-file",
        type=str,
        default=None,
        metavar="PATH",
        help="Route file relative to the base path (default: routes/api.php).",
    )

    # --- Artifact toggles ---
    toggle_group = parser.add_argument_group("artifact toggles")
    for flag, help_text in (
        ("--no-store-request", "Skip the store (create) form request."),
        ("--no-update-request", "Skip the update form request."),
        ("--no-resource", "Skip the JSON resource."),
        ("--no-routes", "Skip merging route declarations."),
    ):
        toggle_group.add_argument(
            flag, action="store_true", default=False, help=help_text
        )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Report what would be written without touching the disk.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.base_path is not None:
        overrides["base_path"] = args.base_path
    if args.app_dir is not None:
        overrides["app_dir"] = args.app_dir
    if args.routes_file is not None:
        overrides["routes_file"] = args.routes_file

    if args.no_store_request:
        overrides["generate_store_request"] = False
    if args.no_update_request:
        overrides["generate_update_request"] = False
    if args.no_resource:
        overrides["generate_resource"] = False
    if args.no_routes:
        overrides["generate_routes"] = False

    if args.dry_run:
        overrides["dry_run"] = True

    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _exit_code_for(report: Any) -> int:
    """Map a ``GenerationReport`` onto an exit code."""
    if report.success:
        return EXIT_SUCCESS
    if report.invalid_entities or report.errors:
        return EXIT_VALIDATION_ERROR
    return EXIT_EMIT_ERROR


def _run_single(args: argparse.Namespace, overrides: Dict[str, Any]) -> int:
    """Scaffold the one entity given with --entity/--columns."""
    from pydantic import ValidationError as PydanticValidationError

    from scaffoldgen.generator import GenerationReport, ScaffoldGenerator
    from scaffoldgen.models import EntityDefinition, GenerationConfig

    try:
        config: GenerationConfig = GenerationConfig(**overrides)
        entity: EntityDefinition = EntityDefinition(
            name=args.entity,
            columns=args.columns,
            soft_delete_routes=args.soft_delete_routes,
        )
    except PydanticValidationError as exc:
        logger.error("Invalid arguments: %s", exc)
        return EXIT_INPUT_ERROR

    report: GenerationReport = ScaffoldGenerator(config).generate([entity])
    print(report.summary())
    return _exit_code_for(report)


def _run_definition(definition_path: Path, overrides: Dict[str, Any]) -> int:
    """Scaffold every entity listed in a definition file."""
    from scaffoldgen.generator import GenerationReport, ScaffoldGenerator

    report: GenerationReport = ScaffoldGenerator.generate_from_file(
        definition_path,
        config_overrides=overrides if overrides else None,
    )
    print(report.summary())

    # A file that never parsed produced no entity reports at all.
    if report.errors and not report.entities:
        return EXIT_INPUT_ERROR
    return _exit_code_for(report)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    overrides: Dict[str, Any] = _build_config_overrides(args)
    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    if args.definition is not None:
        if args.columns or args.soft_delete_routes:
            logger.error("--columns/--soft-delete-routes only apply to --entity.")
            parser.print_usage(sys.stderr)
            sys.exit(EXIT_INPUT_ERROR)

        definition_path: Path = Path(args.definition).resolve()
        if not definition_path.is_file():
            logger.error("Definition file not found: %s", definition_path)
            sys.exit(EXIT_INPUT_ERROR)

        logger.info("Definition: %s", definition_path)
        exit_code: int = _run_definition(definition_path, overrides)
    else:
        if not args.columns:
            logger.error("--entity requires a non-empty --columns list.")
            parser.print_usage(sys.stderr)
            sys.exit(EXIT_INPUT_ERROR)

        logger.info("Entity:  %s", args.entity)
        logger.info("Columns: %s", ", ".join(args.columns))
        exit_code = _run_single(args, overrides)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_EMIT_ERROR",
    "EXIT_INPUT_ERROR",
]
