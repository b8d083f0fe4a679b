"""Pizza kinds, sizes and orders."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class PizzaType(IntEnum):
    """Pizza recipes, with the bit values used on the wire."""

    Unknown = 0
    Regina = 1
    Margarita = 2
    Americana = 4
    Fantasia = 8


class PizzaSize(IntEnum):
    """Pizza sizes, with the bit values used on the wire."""

    Unknown = 0
    S = 1
    M = 2
    L = 4
    XL = 8
    XXL = 16


@dataclass(frozen=True)
class PizzaOrder:
    """A number of pizzas of one type and size."""

    type: PizzaType = PizzaType.Unknown
    size: PizzaSize = PizzaSize.Unknown
    quantity: int = 0