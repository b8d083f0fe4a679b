"""Command-line and order parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from .orders import PizzaOrder, PizzaSize, PizzaType


class LoggerType(Enum):
    """Which logger the program uses."""

    Console = "console"
    File = "file"
    Default = "default"


@dataclass(frozen=True)
class PlazzaArguments:
    """Parsed command-line arguments."""

    cooking_time: int
    max_cooks: int
    time_to_wait: int
    logger_type: LoggerType = LoggerType.Default


class ParserError(Exception):
    """Raised for invalid arguments or orders."""


_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_ORDER = re.compile(r"([a-zA-Z]+)\s+(S|M|L|XL|XXL)\s+x([0-9]+)", re.ASCII)

_TYPES = {
    "regina": PizzaType.Regina,
    "margarita": PizzaType.Margarita,
    "americana": PizzaType.Americana,
    "fantasia": PizzaType.Fantasia,
}
_SIZES = {
    "S": PizzaSize.S,
    "M": PizzaSize.M,
    "L": PizzaSize.L,
    "XL": PizzaSize.XL,
    "XXL": PizzaSize.XXL,
}
_LOGGERS = {"console": LoggerType.Console, "file": LoggerType.File}


def _leading_int(text: str) -> int:
    """Read the integer at the start of text, ignoring what follows it."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _argument(text: str, what: str) -> int:
    try:
        return _leading_int(text)
    except ValueError as exc:
        raise ParserError(f"Invalid {what} argument") from exc


def parse_arguments(argv: Sequence[str]) -> PlazzaArguments:
    """Parse the arguments that follow the program name."""
    if len(argv) < 3:
        raise ParserError("Not enough arguments")
    cooking_time = _argument(argv[0], "cooking time")
    max_cooks = _argument(argv[1], "max cooks")
    time_to_wait = _argument(argv[2], "time to wait")
    if cooking_time <= 0 or max_cooks <= 0 or time_to_wait <= 0:
        raise ParserError("Arguments must be positive integers")
    logger_type = LoggerType.Default
    if len(argv) > 3:
        try:
            logger_type = _LOGGERS[argv[3].lower()]
        except KeyError:
            raise ParserError(
                "Invalid logger type argument, must be 'console' or 'file' or 'default'"
            ) from None
    return PlazzaArguments(cooking_time, max_cooks, time_to_wait, logger_type)


def _quantity(text: str) -> int:
    try:
        value = _leading_int(text)
    except ValueError:
        return 0
    return value if value > 0 else 0


def parse_order(text: str) -> PizzaOrder:
    """Parse one order such as 'regina XXL x2'; unknown parts come back as Unknown."""
    match = _ORDER.fullmatch(text)
    if match is None:
        return PizzaOrder(PizzaType.Unknown, PizzaSize.Unknown, 0)
    name, size, quantity = match.groups()
    return PizzaOrder(
        _TYPES.get(name.lower(), PizzaType.Unknown),
        _SIZES.get(size, PizzaSize.Unknown),
        _quantity(quantity),
    )


def parse_orders(text: str) -> List[PizzaOrder]:
    """Parse orders separated by ';', raising ParserError on the first bad one."""
    orders = []
    for part in text.split(";"):
        if not part:
            continue
        order = parse_order(part)
        if (
            order.type is PizzaType.Unknown
            or order.size is PizzaSize.Unknown
            or order.quantity <= 0
        ):
            raise ParserError(f"Invalid order format: {part}")
        orders.append(order)
    return orders