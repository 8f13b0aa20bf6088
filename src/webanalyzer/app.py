from __future__ import annotations

import argparse
import logging
import sys

from webanalyzer.core.command_registry import COMMAND_HELP_TEXTS, CommandRegistry, register_all_commands
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

APP_NAME = "Web Page Analyzer"
__version__ = "1.0.0"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webanalyzer",
        description="Retrieve, parse, analyze, compare and transform web pages.",
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show the available commands.")
    parser.add_argument("-V", "--version", action="store_true", help="Print the version.")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
                        help="Logging level (default: debug.level from settings.json).")
    parser.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                        help="Override a setting for this run, e.g. --set comparator.default_mode=structure.")
    parser.add_argument("command", nargs="?", help="Command to run.")
    parser.add_argument("command_args", nargs=argparse.REMAINDER, help="Arguments for the command.")
    return parser


def _print_help() -> None:
    print(f"{APP_NAME} v{__version__}")
    print("Usage: webanalyzer [--log-level LEVEL] [--set KEY=VALUE ...] <command> [args]\n")
    print("Commands:")
    for name in sorted(CommandRegistry):
        print(COMMAND_HELP_TEXTS.get(name, f"  {name}"))
        print()
    print("Run 'webanalyzer <command> --help' for the options of a command.")


def _apply_overrides(overrides: list[str]) -> None:
    """
    Applies --set overrides to the in-memory configuration.

    Raises:
        ValueError: If an override is not KEY=VALUE or its key path cannot be set.
    """
    for override in overrides:
        key_path, sep, value = override.partition("=")
        key_path = key_path.strip()
        if not sep or not key_path:
            raise ValueError(f"Invalid setting '{override}', expected key=value")
        if not config_manager.set_nested(key_path, value.strip()):
            raise ValueError(f"Cannot set '{key_path}'")


def _setup_logging(log_level: str | None) -> None:
    level = log_level or config_manager.get_nested("debug.level", "WARNING")
    silenced = config_manager.get_nested("logging.silenced_loggers", {})
    configure_logger(level, silenced_loggers=silenced)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the command line tool; returns the process exit code."""
    argv = sys.argv[1:] if argv is None else argv

    try:
        pargs = _build_parser().parse_args(argv)
    except SystemExit as e:
        return 0 if e.code == 0 else 1

    try:
        _apply_overrides(pargs.overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _setup_logging(pargs.log_level)
    register_all_commands()

    if pargs.version:
        print(f"{APP_NAME} v{__version__}")
        return 0

    if pargs.help:
        _print_help()
        return 0

    if not pargs.command:
        print(f"{APP_NAME} v{__version__}")
        print("Use -h or --help to see available commands")
        return 0

    handler = CommandRegistry.get(pargs.command)
    if handler is None:
        print(f"Error: Unknown command '{pargs.command}'. Use --help to see available commands.", file=sys.stderr)
        return 1

    logger.debug("Running command '%s' with args %s", pargs.command, pargs.command_args)
    return handler(pargs.command_args)


if __name__ == "__main__":
    sys.exit(main())
