"""A kitchen: a queue of pizzas cooked by a pool of cook threads."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .loggers import Logger
from .orders import PizzaOrder, PizzaSize, PizzaType

PizzaReadyCallback = Callable[[str], None]

RECIPES: Dict[PizzaType, Tuple[str, ...]] = {
    PizzaType.Margarita: ("dough", "tomato", "gruyere"),
    PizzaType.Regina: ("dough", "tomato", "gruyere", "ham", "mushrooms"),
    PizzaType.Americana: ("dough", "tomato", "gruyere", "steak"),
    PizzaType.Fantasia: ("dough", "tomato", "eggplant", "goat_cheese", "chief_love"),
}

COOK_SECONDS: Dict[PizzaType, int] = {
    PizzaType.Margarita: 1,
    PizzaType.Regina: 2,
    PizzaType.Americana: 2,
    PizzaType.Fantasia: 4,
}

INGREDIENTS: Tuple[str, ...] = (
    "dough",
    "tomato",
    "gruyere",
    "ham",
    "mushrooms",
    "steak",
    "eggplant",
    "goat_cheese",
    "chief_love",
)
INITIAL_STOCK = 5
IDLE_TIMEOUT = 5.0
_WAIT_SECONDS = 0.5
_REFILL_TICK = 0.1


class Kitchen:
    """Cooks queued pizzas on `cooks` threads and restocks every `refill_time` ms.

    The queue holds at most twice as many orders as there are cooks. A kitchen
    with nothing to do for `idle_timeout` seconds shuts itself down.
    """

    def __init__(
        self,
        cooks: int,
        multiplier: float,
        refill_time: int,
        logger: Logger,
        on_pizza_ready: Optional[PizzaReadyCallback] = None,
    ) -> None:
        self.cooks = cooks
        self.multiplier = multiplier
        self.refill_time = refill_time
        self.max_queue = cooks * 2
        self.idle_timeout = IDLE_TIMEOUT
        self._logger = logger
        self._on_pizza_ready = on_pizza_ready
        self._orders: Deque[PizzaOrder] = deque()
        self._busy: List[bool] = [False] * cooks
        self._stock: Dict[str, int] = {name: INITIAL_STOCK for name in INGREDIENTS}
        self._lock = threading.Lock()
        self._cv = threading.Condition(self._lock)
        self._running = True
        self._last_active = time.monotonic()
        self._threads = [
            threading.Thread(target=self._cook_loop, args=(cook_id,), daemon=True)
            for cook_id in range(cooks)
        ]
        self._threads.append(threading.Thread(target=self._refill_loop, daemon=True))
        for thread in self._threads:
            thread.start()

    def is_running(self) -> bool:
        return self._running

    def can_accept_more(self) -> bool:
        with self._lock:
            return len(self._orders) < self.max_queue and self._running

    def queue_size(self) -> int:
        with self._lock:
            return len(self._orders)

    def _has_ingredients_for(self, pizza: PizzaType) -> bool:
        recipe = RECIPES.get(pizza)
        if recipe is None:
            return False
        return all(self._stock.get(name, 0) > 0 for name in recipe)

    def _consume_ingredients(self, pizza: PizzaType) -> bool:
        if not self._has_ingredients_for(pizza):
            return False
        for name in RECIPES[pizza]:
            self._stock[name] -= 1
        return True

    def push_order(self, order: PizzaOrder) -> bool:
        """Queue each pizza of the order; refuse when closed, full or out of stock."""
        with self._cv:
            if not self._running or len(self._orders) >= self.max_queue:
                return False
            if not self._has_ingredients_for(order.type):
                self._logger.error(
                    "[ERROR] Not enough ingredients for pizza type: "
                    f"{int(order.type)}"
                )
                return False
            self._orders.extend(
                PizzaOrder(order.type, order.size, 1) for _ in range(order.quantity)
            )
            self._last_active = time.monotonic()
            self._cv.notify_all()
            return True

    def print_status(self) -> None:
        """Log the queue, the cooks and the ingredient stock."""
        with self._lock:
            if not self._running:
                self._logger.info("[CLOSED] Kitchen is shut down")
                return
            self._logger.info(f"[ACTIVE] Queue {len(self._orders)}/{self.max_queue}")
            self._logger.info("Cooks: ")
            self._logger.info(
                "".join(
                    f"C{cook_id}({'busy' if busy else 'idle'}) "
                    for cook_id, busy in enumerate(self._busy)
                )
            )
            self._logger.info(
                "Ingredients: "
                + "".join(f"{name}:{count} " for name, count in self._stock.items())
            )

    def _take_task(self, cook_id: int) -> Tuple[bool, Optional[PizzaOrder]]:
        """Wait for work; return (keep_running, task). Called without the lock."""
        with self._cv:
            self._cv.wait_for(
                lambda: bool(self._orders) or not self._running, _WAIT_SECONDS
            )
            if not self._running:
                return False, None
            if cook_id == 0 and not self._orders and not any(self._busy):
                if time.monotonic() - self._last_active >= self.idle_timeout:
                    self._logger.info(
                        f"[Kitchen{cook_id}] No activity for 5s, shutting down."
                    )
                    self._running = False
                    self._cv.notify_all()
                    return False, None
            if not self._orders:
                return True, None
            task = self._orders[0]
            if not self._consume_ingredients(task.type):
                # Nothing to cook with yet: wait for a refill or a new order.
                self._cv.wait(_REFILL_TICK)
                return True, None
            self._orders.popleft()
            self._busy[cook_id] = True
            self._last_active = time.monotonic()
            return True, task

    def _cook_loop(self, cook_id: int) -> None:
        while self._running:
            keep_running, task = self._take_task(cook_id)
            if not keep_running:
                return
            if task is None:
                continue
            seconds = COOK_SECONDS.get(task.type, 1)
            name = task.type.name if task.type in COOK_SECONDS else "Unknown"
            size = task.size.name if task.size is not PizzaSize.Unknown else "Unknown"
            ms = int(seconds * self.multiplier * 1000)
            time.sleep(ms / 1000)
            with self._lock:
                self._busy[cook_id] = False
                self._last_active = time.monotonic()
            info = f"{name} {size} (Cook {cook_id}, {ms}ms)"
            self._logger.info(f"Pizza ready: {info}")
            if self._on_pizza_ready is not None:
                self._on_pizza_ready(info)

    def _refill_loop(self) -> None:
        last_refill = time.monotonic()
        while self._running:
            time.sleep(_REFILL_TICK)
            if not self._running:
                break
            now = time.monotonic()
            if (now - last_refill) * 1000 < self.refill_time:
                continue
            with self._cv:
                if not self._running:
                    break
                for name in self._stock:
                    self._stock[name] += 1
                if self._orders or any(self._busy):
                    self._logger.info("Ingredients refilled")
                last_refill = now
                self._cv.notify_all()

    def close(self) -> None:
        """Stop the kitchen and wait for its threads, letting current pizzas finish."""
        with self._cv:
            self._running = False
            self._cv.notify_all()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current and thread.is_alive():
                thread.join()

    def __enter__(self) -> "Kitchen":
        return self

    def __exit__(self, *args) -> None:
        self.close()