"""apiterm: browse an API description in the terminal.

Loading and sending are delegated to collaborators named on the command line:

    apiterm petstore.yaml --loader mypkg.loader:load_spec --sender mypkg.http:sender
"""

from __future__ import annotations

import argparse
import curses
import os
import sys
from pathlib import Path
from typing import Sequence

from apiterm import __version__
from apiterm.cli.collaborators import RequestSender, SpecLoader, import_collaborator
from apiterm.cli.models import ParsedSpec
from apiterm.cli.tui.app import ApitermApp
from apiterm.config import load_config
from apiterm.config.schema import AppConfig
from apiterm.errors import CollaboratorImportError, ConfigError, SpecLoadError, SpecParseError
from apiterm.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apiterm", description="Browse and exercise an API description.")
    parser.add_argument("source", help="File path or URL of the API description")
    parser.add_argument(
        "--loader",
        required=True,
        metavar="MODULE:CALLABLE",
        help="Callable turning SOURCE into a ParsedSpec",
    )
    parser.add_argument("--sender", metavar="MODULE:ATTR", help="Object with an async send(draft) method")
    parser.add_argument("--config", type=Path, help="Config file (default: $APITERM_CONFIG or ~/.config/apiterm/apiterm.yml)")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--version", action="version", version=f"apiterm {__version__}")
    return parser


def load_spec(loader: SpecLoader, source: str) -> tuple[ParsedSpec | None, str | None]:
    """Run the loader, turning its failures into a message the UI can show."""
    try:
        return loader(source), None
    except SpecParseError as e:
        logger.error("Failed to parse {}: {}", source, e)
        return None, f"Failed to parse {source}: {e}"
    except SpecLoadError as e:
        logger.error("Failed to load {}: {}", source, e)
        return None, f"Failed to load {source}: {e}"
    except Exception as e:
        logger.error("Loader failed for {}: {}", source, e)
        return None, f"Failed to load {source}: {e}"


def resolve_collaborators(args: argparse.Namespace) -> tuple[SpecLoader, RequestSender | None]:
    loader = import_collaborator(args.loader)
    if not callable(loader):
        raise CollaboratorImportError(args.loader, "not callable")
    sender = import_collaborator(args.sender) if args.sender else None
    if sender is not None and not isinstance(sender, RequestSender):
        raise CollaboratorImportError(args.sender, "has no async send(draft) method")
    return loader, sender  # type: ignore[return-value]


def _main_impl(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config: AppConfig = load_config(args.config)
    except ConfigError as e:
        print(f"apiterm: invalid configuration: {e}", file=sys.stderr)
        return 1

    level = args.log_level or os.environ.get("APITERM_LOG_LEVEL") or config.logging.level
    log_path = setup_logging(level, config.logging.path)
    logger.info("apiterm {} starting (log: {})", __version__, log_path)

    try:
        loader, sender = resolve_collaborators(args)
    except CollaboratorImportError as e:
        print(f"apiterm: {e}", file=sys.stderr)
        return 1

    spec, load_error = load_spec(loader, args.source)
    app = ApitermApp(spec, sender=sender, config=config, load_error=load_error)
    curses.wrapper(app.run)
    return 0


def main() -> None:
    try:
        sys.exit(_main_impl())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
