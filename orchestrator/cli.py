"""
Orchestrator - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line interface for the document model tooling.

- Provides argparse-based CLI
- Loads configuration from CLI and environment (.env)
- Entry point for the `docmodel` console script

============================================================
USAGE
============================================================
docmodel ids --count 5 --algorithm utc_random
docmodel sync --document post --view by_author --view nearby:spatial
docmodel generate view post by_author --root app/models
docmodel generate config --output .env

============================================================
EXIT CODES
============================================================
0  success
1  invalid arguments or configuration, logical error
2  usage error (argparse)
3  store unavailable

============================================================
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from core.config import AppConfig, KNOWN_ALGORITHMS
from core.exceptions import DocModelException
from design_documents.models import ViewSpec
from identifiers.generator import UUIDGenerator
from storage.database import create_database_engine
from storage.exceptions import StoreException, StoreUnavailable
from storage.sql_store import SqlDocumentStore

from .templates import ENV_TEMPLATE, MAP_TEMPLATE, REDUCE_TEMPLATE
from .warmup import build_synchronizer


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_STORE_UNAVAILABLE = 3


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docmodel",
        description="Document model tooling: identifiers, design documents, generators",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: DOCMODEL_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        metavar="PATH",
        help="Load environment from this file instead of ./.env",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # --------------------------------------------------------
    # ids
    # --------------------------------------------------------
    ids = commands.add_parser("ids", help="Print new identifiers")
    ids.add_argument("--count", "-n", type=int, default=1, help="Number of identifiers")
    ids.add_argument(
        "--algorithm", "-a",
        choices=KNOWN_ALGORITHMS,
        default=None,
        help="Algorithm (default: DOCMODEL_UUID_ALGORITHM or sequential)",
    )
    ids.add_argument("--strong", action="store_true", help="Use the OS CSPRNG")
    ids.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")

    # --------------------------------------------------------
    # sync
    # --------------------------------------------------------
    sync = commands.add_parser("sync", help="Publish a design document if stale")
    sync.add_argument("--document", "-d", required=True, help="Design document identifier")
    sync.add_argument(
        "--view", "-v",
        dest="views",
        action="append",
        required=True,
        metavar="NAME[:spatial]",
        help="View to include, in order (repeatable)",
    )
    sync.add_argument(
        "--path", "-p",
        dest="paths",
        action="append",
        default=None,
        metavar="DIR",
        help="View source root, highest precedence first (repeatable)",
    )
    sync.add_argument("--database-url", default=None, help="Override DOCMODEL_DATABASE_URL")

    # --------------------------------------------------------
    # generate
    # --------------------------------------------------------
    generate = commands.add_parser("generate", help="Write skeleton files")
    targets = generate.add_subparsers(dest="target", required=True)

    view = targets.add_parser("view", help="map.js/reduce.js skeletons for a view")
    view.add_argument("model", help="Design document identifier, e.g. post")
    view.add_argument("view", help="View name, e.g. by_author")
    view.add_argument("--root", default=None, help="Source root (default: first configured path)")
    view.add_argument("--force", action="store_true", help="Overwrite existing files")

    config = targets.add_parser("config", help="Environment template")
    config.add_argument("--output", "-o", default=".env", help="Output file (default: .env)")
    config.add_argument("--force", action="store_true", help="Overwrite an existing file")

    return parser


# ============================================================
# CLI VALIDATION
# ============================================================

def validate_args(args: argparse.Namespace) -> List[str]:
    """
    Validate CLI arguments.

    Returns:
        List of validation errors
    """
    errors = []

    if args.command == "ids" and args.count < 1:
        errors.append("--count must be at least 1")

    if args.command == "sync":
        for view in args.views:
            try:
                ViewSpec.parse(view)
            except ValueError as e:
                errors.append(str(e))

    if args.command == "generate" and args.target == "view":
        for value, label in ((args.model, "model"), (args.view, "view")):
            if not value or value.startswith(("/", ".")) or ".." in value.split("/"):
                errors.append(f"invalid {label} name: {value!r}")

    return errors


# ============================================================
# CLI CONFIGURATION BUILDER
# ============================================================

def build_config(args: argparse.Namespace) -> AppConfig:
    """Build configuration from the environment and CLI overrides."""
    config = AppConfig.from_env(args.env_file)

    if args.log_level:
        config.log_level = args.log_level

    if args.command == "ids":
        if args.algorithm:
            config.identifiers.default_algorithm = args.algorithm
        if args.strong:
            config.identifiers.strong_random = True

    if args.command == "sync":
        if args.paths:
            config.sync.design_documents_paths = list(args.paths)
        if args.database_url:
            config.store.database_url = args.database_url

    return config


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


# ============================================================
# COMMANDS
# ============================================================

def run_ids(args: argparse.Namespace, config: AppConfig) -> int:
    generator = UUIDGenerator(seed=args.seed, strong=config.identifiers.strong_random)
    uuids = generator.next(args.count, config.identifiers.default_algorithm)
    for uuid in ([uuids] if isinstance(uuids, str) else uuids):
        print(uuid)
    return EXIT_OK


def run_sync(args: argparse.Namespace, config: AppConfig) -> int:
    errors = config.store.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return EXIT_ERROR

    engine = create_database_engine(config.store)
    try:
        store = SqlDocumentStore(engine, create_tables=True)
        synchronizer = build_synchronizer(store, config.sync)
        views = [ViewSpec.parse(v) for v in args.views]
        result = synchronizer.synchronize(args.document, views)
    finally:
        engine.dispose()

    print(json.dumps(result.to_dict(), indent=2))
    return EXIT_OK


def _write(path: Path, content: str, force: bool) -> bool:
    if path.exists() and not force:
        print(f"skip    {path}")
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    print(f"create  {path}")
    return True


def run_generate(args: argparse.Namespace, config: AppConfig) -> int:
    if args.target == "config":
        paths = os.pathsep.join(config.sync.design_documents_paths) or "models"
        _write(Path(args.output), ENV_TEMPLATE.format(paths=paths), args.force)
        return EXIT_OK

    root = args.root or next(iter(config.sync.design_documents_paths), "models")
    directory = Path(root) / args.model / args.view
    context = {"model": args.model, "view": args.view}
    _write(directory / "map.js", MAP_TEMPLATE.format(**context), args.force)
    _write(directory / "reduce.js", REDUCE_TEMPLATE.format(**context), args.force)
    return EXIT_OK


COMMANDS = {
    "ids": run_ids,
    "sync": run_sync,
    "generate": run_generate,
}


# ============================================================
# MAIN ENTRY POINT
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    errors = validate_args(args)
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return EXIT_ERROR

    config = build_config(args)
    setup_logging(config.log_level)

    try:
        return COMMANDS[args.command](args, config)
    except StoreUnavailable as e:
        logger.error(f"Store unavailable: {e}")
        return EXIT_STORE_UNAVAILABLE
    except (DocModelException, StoreException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


# ============================================================
# MODULE EXECUTION
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
