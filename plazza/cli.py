"""Command-line entry point."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .loggers import ConsoleLogger, DefaultLogger, FileLogger, Logger, LoggerError
from .parsing import LoggerType, ParserError, parse_arguments
from .reception import Reception

LOG_FILE = "plazza.log"
EXIT_FAILURE = 84


def _make_logger(kind: LoggerType) -> Logger:
    if kind is LoggerType.Console:
        return ConsoleLogger()
    if kind is LoggerType.File:
        return FileLogger(LOG_FILE)
    return DefaultLogger(LOG_FILE)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the restaurant: plazza <multiplier> <cooks> <refill_ms> [console|file]."""
    arguments = sys.argv[1:] if argv is None else list(argv)
    try:
        args = parse_arguments(arguments)
    except ParserError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    try:
        logger = _make_logger(args.logger_type)
    except LoggerError as exc:
        print(f"Logger error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    with Reception(
        args.cooking_time, args.max_cooks, args.time_to_wait, logger
    ) as reception:
        reception.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())