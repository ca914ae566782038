"""Entry point for the mdkanban TUI."""

import argparse
import logging
import sys
from pathlib import Path

from mdkanban import __version__
from mdkanban.config import ensure_directories, load_config
from mdkanban.constants import DEFAULT_CONFIG_PATH
from mdkanban.errors import ConfigError, WatcherSetupError
from mdkanban.model.board import Board
from mdkanban.watcher import ChangeWatcher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdkanban",
        description="Kanban board of markdown tickets, one directory per column",
    )
    parser.add_argument("--dir", help="Kanban directory (overrides the config file)")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--log-file", help="Write debug logs to this file")
    parser.add_argument("--version", action="store_true", help="Print the version and exit")
    return parser


def error(message: str) -> int:
    """Print error to stderr and return exit code 1."""
    print(f"error: {message}", file=sys.stderr)
    return 1


def setup_logging(log_file: str | None) -> None:
    # Nothing may be written to the terminal while the TUI owns it
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"mdkanban v{__version__}")
        return 0

    setup_logging(args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        return error(str(e))
    if args.dir:
        config.kanban_dir = str(Path(args.dir).expanduser().absolute())

    try:
        ensure_directories(config)
    except OSError as e:
        return error(f"cannot create kanban directories: {e}")

    board = Board(config)
    board.reload()

    try:
        watcher = ChangeWatcher()
    except WatcherSetupError as e:
        return error(str(e))
    try:
        for i in range(len(board.columns)):
            watcher.watch(board.column_path(i))
    except WatcherSetupError as e:
        watcher.close()
        return error(str(e))

    from mdkanban.ui import KanbanApp

    logger.info("starting with %s", config.kanban_dir)
    try:
        KanbanApp(config, board, watcher).run()
    finally:
        if not watcher.closed:
            watcher.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
