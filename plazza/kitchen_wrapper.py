"""The reception's handle on one kitchen process."""

from __future__ import annotations

from typing import Optional

from .ipc import MessageType
from .kitchen_process import KitchenProcess
from .loggers import Logger
from .orders import PizzaOrder


class KitchenWrapper:
    """Starts a kitchen process and tracks an estimate of its queue."""

    def __init__(
        self,
        kitchen_id: int,
        cooks: int,
        multiplier: float,
        refill_time: int,
        logger: Logger,
    ) -> None:
        self.kitchen_id = kitchen_id
        self.max_queue_size = cooks * 2
        self._logger = logger
        self._estimated_queue_size = 0
        process = KitchenProcess(kitchen_id, cooks, multiplier, refill_time)
        if process.start():
            self._process: Optional[KitchenProcess] = process
        else:
            self._process = None
            logger.error(f"Failed to start kitchen {kitchen_id}")

    @property
    def pid(self) -> int:
        """The kitchen's process id, or -1 when it has none."""
        return self._process.pid if self._process is not None else -1

    def is_running(self) -> bool:
        return self._process is not None and self._process.is_running()

    def send_order(self, order: PizzaOrder) -> bool:
        """Send an order to the kitchen and count it in the estimated queue."""
        if not self.is_running():
            return False
        if self._process.send_order(order):
            self._estimated_queue_size += 1
            self._logger.info(f"Order sent to kitchen {self.kitchen_id}")
            return True
        self._logger.error(f"Failed to send order to kitchen {self.kitchen_id}")
        return False

    def can_accept_more(self) -> bool:
        if not self.is_running():
            return False
        return self._estimated_queue_size < self.max_queue_size

    def queue_size(self) -> int:
        """The estimated number of pizzas sent and not yet reported ready."""
        return self._estimated_queue_size

    def print_status(self) -> None:
        """Log what is known locally and ask the kitchen for its own status."""
        if not self.is_running():
            self._logger.info(f"Kitchen {self.kitchen_id} [CLOSED]")
            return
        self._logger.info(f"Kitchen {self.kitchen_id} [PID: {self.pid}]")
        self._logger.info(
            f"  Estimated queue: {self._estimated_queue_size}/{self.max_queue_size}"
        )
        self._process.request_status()

    def process_messages(self) -> None:
        """Handle every message the kitchen has sent so far."""
        if self._process is None:
            return
        while True:
            message = self._process.receive_message()
            if message is None:
                return
            if message.type is MessageType.PIZZA_READY:
                self._logger.info(
                    f"Pizza ready from kitchen {self.kitchen_id}: {message.content}"
                )
                if self._estimated_queue_size > 0:
                    self._estimated_queue_size -= 1
            elif message.type is MessageType.STATUS_RESPONSE:
                self._logger.info(
                    f"Kitchen {self.kitchen_id} status: {message.content}"
                )

    def close(self) -> None:
        """Stop the kitchen process."""
        if self._process is None:
            return
        self._process.stop()
        self._process = None
        self._logger.info(f"Kitchen {self.kitchen_id} process stopped")