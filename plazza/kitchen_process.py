"""A kitchen running in its own worker, driven over named pipes."""

from __future__ import annotations

import os
import sys
import tempfile
import threading
import time
from typing import Optional

from .ipc import Message, MessageType, NamedPipeChannel
from .kitchen import Kitchen
from .loggers import ConsoleLogger
from .orders import PizzaOrder

_CHILD_START_DELAY = 0.05
_CHILD_POLL = 0.05
_SHUTDOWN_GRACE = 0.1
_JOIN_TIMEOUT = 2.0


class KitchenProcess:
    """Runs a Kitchen in a worker and talks to it through a NamedPipeChannel."""

    def __init__(
        self, kitchen_id: int, cooks: int, multiplier: float, refill_time: int
    ) -> None:
        self.kitchen_id = kitchen_id
        self.cooks = cooks
        self.multiplier = multiplier
        self.refill_time = refill_time
        self.pipe_name = os.path.join(
            tempfile.gettempdir(),
            f"plazza_kitchen_{os.getpid()}_{id(self)}_{kitchen_id}",
        )
        self._pid = -1
        self._running = False
        self._channel: Optional[NamedPipeChannel] = None
        self._worker: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def pid(self) -> int:
        """The worker's native id, or -1 when no worker runs."""
        return self._pid

    def _make_fifos(self) -> None:
        for suffix in ("_in", "_out"):
            try:
                os.mkfifo(self.pipe_name + suffix, 0o666)
            except FileExistsError:
                pass

    def start(self) -> bool:
        """Start the kitchen worker and open the channel to it."""
        if self._running:
            return True
        try:
            self._make_fifos()
        except OSError as exc:
            print(
                f"Failed to create IPC for kitchen {self.kitchen_id}: {exc.strerror}",
                file=sys.stderr,
            )
            return False
        self._stop_event.clear()
        worker = threading.Thread(
            target=self._child_process,
            name=f"kitchen-{self.kitchen_id}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as exc:
            print(f"Start failed for kitchen {self.kitchen_id}: {exc}", file=sys.stderr)
            return False
        channel = NamedPipeChannel(self.pipe_name, is_server=True)
        if not channel.ready:
            print(f"Failed to create IPC for kitchen {self.kitchen_id}", file=sys.stderr)
            self._stop_event.set()
            channel.close()
            worker.join(_JOIN_TIMEOUT)
            return False
        self._channel = channel
        self._worker = worker
        self._pid = worker.native_id if worker.native_id is not None else -1
        self._running = True
        print(f"Kitchen {self.kitchen_id} started with PID {self._pid}", flush=True)
        return True

    def stop(self) -> None:
        """Ask the worker to shut down, force it if it lingers, and clean up."""
        if not self._running or self._pid == -1:
            return
        if self._channel is not None:
            self._channel.send(
                Message(
                    MessageType.SHUTDOWN,
                    sender_pid=os.getpid(),
                    kitchen_id=self.kitchen_id,
                )
            )
        time.sleep(_SHUTDOWN_GRACE)
        if self._worker is not None:
            if self._worker.is_alive():
                self._stop_event.set()
            self._worker.join(_JOIN_TIMEOUT)
            self._worker = None
        if self._channel is not None:
            self._channel.close()
            self._channel = None
        self._running = False
        self._pid = -1

    def is_running(self) -> bool:
        """True while the kitchen worker is alive."""
        if not self._running or self._pid == -1:
            return False
        if self._worker is None or not self._worker.is_alive():
            self._running = False
            return False
        return True

    def _send(self, message: Message) -> bool:
        if not self._running or self._channel is None:
            return False
        return self._channel.send(message)

    def send_order(self, order: PizzaOrder) -> bool:
        """Send an order to the kitchen; return whether it was written."""
        return self._send(
            Message(
                MessageType.ORDER,
                order=order,
                sender_pid=os.getpid(),
                kitchen_id=self.kitchen_id,
            )
        )

    def request_status(self) -> bool:
        """Ask the kitchen for a status report."""
        return self._send(
            Message(
                MessageType.STATUS_REQUEST,
                sender_pid=os.getpid(),
                kitchen_id=self.kitchen_id,
            )
        )

    def receive_message(self) -> Optional[Message]:
        """Return a waiting message from the kitchen, or None."""
        if not self._running or self._channel is None:
            return None
        return self._channel.receive()

    def _child_process(self) -> None:
        time.sleep(_CHILD_START_DELAY)
        channel = NamedPipeChannel(self.pipe_name, is_server=False)
        try:
            if not channel.ready:
                print(
                    f"Child: Failed to create IPC for kitchen {self.kitchen_id}",
                    file=sys.stderr,
                )
                return
            self._serve(channel)
        finally:
            channel.close()

    def _serve(self, channel: NamedPipeChannel) -> None:
        logger = ConsoleLogger()
        send_lock = threading.Lock()
        name = f"Kitchen {self.kitchen_id}"

        def reply(kind: MessageType, content: str) -> None:
            with send_lock:
                channel.send(
                    Message(
                        kind,
                        content=content,
                        sender_pid=os.getpid(),
                        kitchen_id=self.kitchen_id,
                    )
                )

        with Kitchen(
            self.cooks,
            self.multiplier,
            self.refill_time,
            logger,
            lambda info: reply(MessageType.PIZZA_READY, info),
        ) as kitchen:
            logger.info(
                f"{name} child process started (PID: {threading.get_native_id()})"
            )
            while not self._stop_event.is_set():
                message = channel.receive()
                if message is not None:
                    if message.type is MessageType.ORDER:
                        if kitchen.push_order(message.order):
                            logger.info(f"{name}: Order accepted")
                        else:
                            logger.warning(
                                f"{name}: Order refused (full or no ingredients)"
                            )
                    elif message.type is MessageType.STATUS_REQUEST:
                        state = "ACTIVE" if kitchen.is_running() else "CLOSED"
                        reply(
                            MessageType.STATUS_RESPONSE,
                            f"{name} - Queue: {kitchen.queue_size()} - Status: {state}",
                        )
                    elif message.type is MessageType.SHUTDOWN:
                        logger.info(f"{name}: Shutdown requested")
                        return
                if not kitchen.is_running():
                    logger.info(f"{name} shutting down due to inactivity")
                    return
                time.sleep(_CHILD_POLL)