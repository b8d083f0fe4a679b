"""Pizzeria simulation: a reception dispatching orders to kitchens of cook threads over named pipes."""

__version__ = "0.1.0"