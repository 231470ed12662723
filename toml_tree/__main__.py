"""
Entry point for toml-tree.

Usage:
    python -m toml_tree config.toml
    python -m toml_tree config.toml --json
    python -m toml_tree config.toml --validate --require server.port
    python -m toml_tree --help
"""

import argparse
import asyncio
import sys

from . import __version__
from .bridge import from_json, to_json
from .const import APP_NAME, DEFAULT_POLL_INTERVAL
from .errors import InvalidValueError, TomlError
from .loader import parse_file, parse_file_async, read_document
from .logging import get_logger, setup_logging_from_args
from .models.value import Table
from .validator import validate_file
from .watcher import TomlWatcher, WatchConfig


logger = get_logger("main")


def validate_document(path: str, encoding: str | None, required: list[str]) -> int:
    """Validate a document and print issues with suggestions."""
    issues = validate_file(path, encoding, required)

    if not issues:
        print(f"{path}: OK")
        return 0

    print(f"{path}: {len(issues)} issue(s)")
    for issue in issues:
        print(f"  - {issue}")
        if issue.suggestion:
            print(f"    {issue.suggestion}")
    return 1


async def watch_document(path: str, config: WatchConfig, indent: int | None) -> None:
    """Print the document as JSON now and after every settled change."""
    watcher = TomlWatcher(path, config)

    root = await parse_file_async(path, config.encoding)
    print(to_json(root, indent=indent), flush=True)

    async for root in watcher.run_forever():
        print(to_json(root, indent=indent), flush=True)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Parse TOML documents and print them as flat TOML or JSON",
    )

    parser.add_argument(
        "file",
        help="Path to the TOML document (a JSON document with --from-json)",
    )

    mode = parser.add_mutually_exclusive_group()

    mode.add_argument(
        "--json",
        action="store_true",
        help="Print the document as JSON",
    )

    mode.add_argument(
        "--from-json",
        action="store_true",
        help="Read a JSON document and print it as TOML",
    )

    mode.add_argument(
        "--validate",
        action="store_true",
        help="Validate the document and exit",
    )

    mode.add_argument(
        "--watch",
        action="store_true",
        help="Print the document as JSON on every change until interrupted",
    )

    parser.add_argument(
        "--encoding",
        metavar="ENC",
        help="Text encoding (default: detect from byte-order mark, else UTF-8)",
    )

    parser.add_argument(
        "--require",
        metavar="KEY",
        action="append",
        default=[],
        help="Dotted key that must be present (with --validate, repeatable)",
    )

    parser.add_argument(
        "--interval",
        metavar="SECONDS",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help=f"Polling interval for --watch (default: {DEFAULT_POLL_INTERVAL})",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)",
    )

    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only errors)",
    )

    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to file",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    setup_logging_from_args(
        verbose=args.verbose,
        debug=args.debug,
        quiet=args.quiet,
        no_color=args.no_color,
        log_file=args.log_file,
    )

    try:
        if args.validate:
            return validate_document(args.file, args.encoding, args.require)

        if args.watch:
            config = WatchConfig(poll_interval=args.interval, encoding=args.encoding)
            asyncio.run(watch_document(args.file, config, args.indent))
            return 0

        if args.from_json:
            value = from_json(read_document(args.file, args.encoding))
            if not isinstance(value, Table):
                raise InvalidValueError("JSON document must be an object to convert to TOML")
            print(value.to_toml(), end="")
            return 0

        root = parse_file(args.file, args.encoding)
        if args.json:
            print(to_json(root, indent=args.indent))
        else:
            print(root.to_toml(), end="")
        return 0

    except TomlError as e:
        logger.error(f"{args.file}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
