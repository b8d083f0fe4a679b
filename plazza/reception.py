"""The reception: reads orders, dispatches pizzas to kitchens, reports status."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .kitchen_wrapper import KitchenWrapper
from .loggers import Logger
from .orders import PizzaOrder
from .parsing import parse_orders


class Reception:
    """Takes orders from an input stream and spreads pizzas over kitchen processes.

    Each pizza goes to the running kitchen with the smallest estimated queue;
    a new kitchen is opened when none can take it.
    """

    def __init__(
        self, multiplier: float, cooks: int, refill_time: int, logger: Logger
    ) -> None:
        self.multiplier = multiplier
        self.cooks = cooks
        self.refill_time = refill_time
        self._logger = logger
        self._kitchen_counter = 0
        self._kitchens: List[KitchenWrapper] = []

    def run(self, input_stream: Optional[TextIO] = None) -> None:
        """Read commands line by line until 'exit' or end of input."""
        stream = sys.stdin if input_stream is None else input_stream
        self._logger.info("=== Plazza ===")
        self._logger.info("Commands:")
        self._logger.info("  - Order pizzas: 'regina XXL x2; margarita M x1'")
        self._logger.info("  - Check status: 'status'")
        self._logger.info("  - Exit: 'exit'")
        while True:
            self._process_all_messages()
            sys.stdout.write("> ")
            sys.stdout.flush()
            line = stream.readline()
            at_eof = not line.endswith("\n")
            command = line[:-1] if not at_eof else line
            if command == "exit" or at_eof:
                self._logger.info("Shutting down restaurant...")
                break
            if command == "status":
                self._cleanup_closed_kitchens()
                self.print_status()
                continue
            if not command:
                continue
            try:
                orders = parse_orders(command)
                if not orders:
                    self._logger.warning("No valid pizza orders found in input.")
                    self._logger.info(
                        "Invalid order format. Example: 'regina M x2; margarita L x1'"
                    )
                    self._logger.info("Please try again.")
                    continue
                self._logger.info(f"Processing orders: {len(orders)}")
                for order in orders:
                    self.handle_order(order)
            except Exception as exc:
                self._logger.error(f"Error processing order: {exc}")

    def _process_all_messages(self) -> None:
        for kitchen in self._kitchens:
            if kitchen.is_running():
                kitchen.process_messages()

    def _cleanup_closed_kitchens(self) -> None:
        closed = [kitchen for kitchen in self._kitchens if not kitchen.is_running()]
        self._kitchens = [kitchen for kitchen in self._kitchens if kitchen not in closed]
        for kitchen in closed:
            kitchen.close()

    def _best_kitchen(self) -> Optional[KitchenWrapper]:
        running = [kitchen for kitchen in self._kitchens if kitchen.is_running()]
        if not running:
            return None
        return min(running, key=lambda kitchen: kitchen.queue_size())

    def _create_kitchen(self) -> None:
        kitchen = KitchenWrapper(
            self._kitchen_counter,
            self.cooks,
            self.multiplier,
            self.refill_time,
            self._logger,
        )
        self._kitchen_counter += 1
        self._kitchens.append(kitchen)
        self._logger.info(
            f"Created new kitchen (total kitchens = {len(self._kitchens)})"
        )

    def handle_order(self, order: PizzaOrder) -> None:
        """Dispatch each pizza of the order, opening kitchens as needed."""
        self._cleanup_closed_kitchens()
        single = PizzaOrder(order.type, order.size, 1)
        for _ in range(order.quantity):
            best = self._best_kitchen()
            if best is not None and best.can_accept_more() and best.send_order(single):
                continue
            self._create_kitchen()
            if not (self._kitchens and self._kitchens[-1].send_order(single)):
                self._logger.error("Failed to assign pizza to new kitchen")
        self._logger.info(
            f"Order processed: {order.quantity} pizza(s) distributed"
        )

    def print_status(self) -> None:
        """Log the status of every kitchen."""
        if not self._kitchens:
            self._logger.info("No kitchens currently active.")
            return
        self._logger.info("Current kitchen status:")
        for index, kitchen in enumerate(self._kitchens):
            self._logger.info(f"Kitchen #{index}:")
            kitchen.print_status()
        self._logger.info("---")

    def close(self) -> None:
        """Stop every kitchen."""
        kitchens, self._kitchens = self._kitchens, []
        for kitchen in kitchens:
            kitchen.close()

    def __enter__(self) -> "Reception":
        return self

    def __exit__(self, *args) -> None:
        self.close()