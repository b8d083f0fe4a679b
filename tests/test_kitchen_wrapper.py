import time

import pytest

from plazza.kitchen_wrapper import KitchenWrapper
from plazza.loggers import Logger
from plazza.orders import PizzaOrder, PizzaSize, PizzaType


class RecordingLogger(Logger):
    def __init__(self):
        self.lines = []

    def log(self, message):
        self.lines.append(("log", message))

    def error(self, message):
        self.lines.append(("error", message))

    def warning(self, message):
        self.lines.append(("warning", message))

    def info(self, message):
        self.lines.append(("info", message))

    def infos(self):
        return [text for level, text in self.lines if level == "info"]


def pump_until(wrapper, logger, predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        wrapper.process_messages()
        if predicate(logger):
            return True
        time.sleep(0.02)
    return False


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def wrapper(logger):
    kitchen = KitchenWrapper(201, 1, 0.01, 1000, logger)
    yield kitchen
    kitchen.close()


def test_new_wrapper_is_running_and_empty(wrapper):
    assert wrapper.is_running() is True
    assert wrapper.pid > 0
    assert wrapper.queue_size() == 0
    assert wrapper.max_queue_size == 2
    assert wrapper.can_accept_more() is True


def test_send_order_counts_and_logs(wrapper, logger):
    assert wrapper.send_order(PizzaOrder(PizzaType.Margarita, PizzaSize.S, 1)) is True
    assert wrapper.queue_size() == 1
    assert "Order sent to kitchen 201" in logger.infos()


def test_pizza_ready_lowers_estimate(wrapper, logger):
    wrapper.send_order(PizzaOrder(PizzaType.Margarita, PizzaSize.S, 1))
    assert pump_until(
        wrapper,
        logger,
        lambda log: any(
            line.startswith("Pizza ready from kitchen 201: Margarita S")
            for line in log.infos()
        ),
    )
    assert wrapper.queue_size() == 0


def test_print_status_and_response(wrapper, logger):
    wrapper.print_status()
    assert f"Kitchen 201 [PID: {wrapper.pid}]" in logger.infos()
    assert "  Estimated queue: 0/2" in logger.infos()
    expected = "Kitchen 201 status: Kitchen 201 - Queue: 0 - Status: ACTIVE"
    assert pump_until(wrapper, logger, lambda log: expected in log.infos())


def test_queue_limit_blocks_new_orders(logger):
    kitchen = KitchenWrapper(202, 1, 1.0, 1000, logger)
    try:
        for _ in range(2):
            assert kitchen.send_order(PizzaOrder(PizzaType.Fantasia, PizzaSize.L, 1))
        assert kitchen.queue_size() == 2
        assert kitchen.can_accept_more() is False
    finally:
        kitchen.close()


def test_close_stops_kitchen(logger):
    kitchen = KitchenWrapper(203, 1, 0.01, 1000, logger)
    kitchen.close()
    assert "Kitchen 203 process stopped" in logger.infos()
    assert kitchen.is_running() is False
    assert kitchen.pid == -1
    assert kitchen.can_accept_more() is False
    assert kitchen.send_order(PizzaOrder(PizzaType.Regina, PizzaSize.M, 1)) is False
    kitchen.print_status()
    assert logger.infos()[-1] == "Kitchen 203 [CLOSED]"


def test_close_twice_logs_once(logger):
    kitchen = KitchenWrapper(204, 1, 0.01, 1000, logger)
    kitchen.close()
    kitchen.close()
    assert logger.infos().count("Kitchen 204 process stopped") == 1