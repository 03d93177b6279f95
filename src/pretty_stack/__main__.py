"""Command line entry point for pretty-stack.

This module handles:
- Configuration loading and command line overrides
- Logging setup
- Formatting a captured trace read from a file or stdin
- Running a Python script with prettified uncaught exceptions
"""

import argparse
import os
import runpy
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from pretty_stack._version import __version__
from pretty_stack.config.schema import AppConfig, Options

log = structlog.get_logger()


def setup_logging(
    debug: bool = False,
    log_format: str = "console",
    file_path: Path | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging
    """
    from pretty_stack.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.WARNING
    fmt = LogFormat(log_format.lower())

    configure_logging(
        level=level,
        log_format=fmt,
        file_path=file_path,
        file_enabled=file_enabled,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="pretty-stack",
        description="Pretty-print JavaScript-style error stack traces",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="File holding the captured trace (default: read stdin)",
    )

    parser.add_argument(
        "--run",
        metavar="SCRIPT",
        type=Path,
        help="Run a Python script and prettify any exception it raises",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )

    parser.add_argument(
        "--underline",
        metavar="CHAR",
        help="Character used to underline the failing token",
    )

    parser.add_argument(
        "--no-trace",
        action="store_true",
        help="Only show the frame that threw",
    )

    parser.add_argument(
        "--no-smart-underline",
        action="store_true",
        help="Underline a single character instead of the whole token",
    )

    parser.add_argument(
        "--skip-node-files",
        action="store_true",
        help="Hide frames from node: internals",
    )

    parser.add_argument(
        "--skip-module",
        metavar="NAME",
        action="append",
        default=[],
        help="Hide frames from node_modules/NAME (repeatable)",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors (also honored: NO_COLOR)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


def build_options(args: argparse.Namespace, base: Options) -> Options:
    """Apply command line overrides on top of configured options."""
    updates: dict[str, object] = {}

    if args.underline is not None:
        updates["underline"] = args.underline
    if args.no_trace:
        updates["no_trace"] = True
    if args.no_smart_underline:
        updates["smart_underline"] = False
    if args.skip_node_files:
        updates["skip_node_files"] = True
    if args.skip_module:
        updates["skip_modules"] = (*base.skip_modules, *args.skip_module)
    if args.no_color or os.environ.get("NO_COLOR"):
        updates["colors"] = False

    # Re-validate so overrides go through the same checks as the config file
    return Options.model_validate({**base.model_dump(), **updates})


def read_trace(source: str) -> str:
    """Read the captured trace from a path, or stdin for "-"."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def run(args: argparse.Namespace) -> int:
    """Run the command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from pretty_stack.core.formatter import get_prettified
    from pretty_stack.core.hooks import pretty_errors
    from pretty_stack.models.error import ErrorRecord
    from pretty_stack.utils.errors import PrettyStackError

    try:
        if args.config is not None:
            from pretty_stack.config.loader import load_config

            config = load_config(args.config)
            setup_logging(
                debug=args.debug or config.logging.level == "DEBUG",
                log_format=config.logging.format,
                file_path=config.logging.file.path,
                file_enabled=config.logging.file.enabled,
            )
        else:
            config = AppConfig()

        options = build_options(args, config.options)

        if args.run is not None:
            script = str(args.run)
            sys.argv = [script]
            pretty_errors(lambda: runpy.run_path(script, run_name="__main__"), options)
            return 0

        record = ErrorRecord.from_text(read_trace(args.file))
        print(get_prettified(record, options))
        return 0

    except FileNotFoundError as e:
        log.error("file_not_found", error=str(e))
        return 1
    except ValidationError as e:
        log.error("configuration_invalid", error=str(e))
        return 1
    except PrettyStackError as e:
        log.error("trace_not_formatted", error=str(e))
        return 1
    except ValueError as e:
        log.error("invalid_input", error=str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(
        debug=args.debug,
        log_format=args.format,
    )

    try:
        return run(args)
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
