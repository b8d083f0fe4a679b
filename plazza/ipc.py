"""Messages and the named-pipe channel between the reception and kitchens."""

from __future__ import annotations

import os
import struct
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from .orders import PizzaOrder, PizzaSize, PizzaType

_HEADER = struct.Struct("=I")


class MessageType(IntEnum):
    """Kinds of message exchanged over a channel."""

    ORDER = 1
    STATUS_REQUEST = 2
    STATUS_RESPONSE = 3
    PIZZA_READY = 4
    SHUTDOWN = 5


def _stoi(token: bytes) -> int:
    text = token.decode("ascii", errors="replace").strip()
    digits = len(text) - len(text.lstrip("+-"))
    if digits > 1:
        raise ValueError(f"invalid integer field: {token!r}")
    end = digits
    while end < len(text) and text[end].isdigit():
        end += 1
    if end == digits:
        raise ValueError(f"invalid integer field: {token!r}")
    return int(text[:end])


@dataclass
class Message:
    """A message with an order, free text and the sender's identity."""

    type: MessageType
    order: PizzaOrder = field(default_factory=PizzaOrder)
    content: str = ""
    sender_pid: int = 0
    kitchen_id: int = 0

    def serialize(self) -> bytes:
        """Encode as '|'-separated fields followed by the content's byte length and bytes."""
        body = self.content.encode("utf-8")
        head = "|".join(
            str(value)
            for value in (
                int(self.type),
                int(self.order.type),
                int(self.order.size),
                self.order.quantity,
                self.sender_pid,
                self.kitchen_id,
                len(body),
            )
        )
        return head.encode("ascii") + b"|" + body

    @classmethod
    def deserialize(cls, data: bytes) -> "Message":
        """Decode what serialize produced; missing trailing fields keep their defaults."""
        parts = data.split(b"|", 7) if data else []
        numbers = [_stoi(token) for token in parts[:7]]
        values = numbers + [None] * (7 - len(numbers))
        kind, pizza, size, quantity, pid, kitchen, length = values
        if kind is None:
            raise ValueError("empty message")
        order = PizzaOrder(
            PizzaType(pizza) if pizza is not None else PizzaType.Unknown,
            PizzaSize(size) if size is not None else PizzaSize.Unknown,
            quantity if quantity is not None else 0,
        )
        content = b""
        if length is not None and length > 0 and len(parts) > 7:
            content = parts[7][:length]
        return cls(
            type=MessageType(kind),
            order=order,
            content=content.decode("utf-8", errors="replace"),
            sender_pid=pid if pid is not None else 0,
            kitchen_id=kitchen if kitchen is not None else 0,
        )


class NamedPipeChannel:
    """A two-way channel over a pair of FIFOs named '<pipe_name>_in' and '_out'.

    The server creates the FIFOs, reads '_in' and writes '_out'; the client
    does the opposite. Reads never block; opening blocks until both sides meet.
    """

    def __init__(self, pipe_name: str, is_server: bool = False) -> None:
        self.path_in = f"{pipe_name}_in"
        self.path_out = f"{pipe_name}_out"
        self.is_server = is_server
        self._fd_read = -1
        self._fd_write = -1
        if is_server:
            self._create_pipes()
        self._open_pipes()

    @property
    def ready(self) -> bool:
        """True when both ends are open."""
        return self._fd_read != -1 and self._fd_write != -1

    def _create_pipes(self) -> None:
        for path in (self.path_in, self.path_out):
            try:
                os.mkfifo(path, 0o666)
            except FileExistsError:
                pass
            except OSError as exc:
                print(f"Error creating pipe {path}: {exc.strerror}", file=sys.stderr)

    def _open_pipes(self) -> None:
        try:
            if self.is_server:
                self._fd_read = os.open(self.path_in, os.O_RDONLY | os.O_NONBLOCK)
                self._fd_write = os.open(self.path_out, os.O_WRONLY)
            else:
                self._fd_write = os.open(self.path_in, os.O_WRONLY)
                self._fd_read = os.open(self.path_out, os.O_RDONLY | os.O_NONBLOCK)
        except OSError as exc:
            print(f"Failed to open pipes: {exc.strerror}", file=sys.stderr)

    def send(self, message: Message) -> bool:
        """Write one length-prefixed message; return whether it was fully written."""
        if not self.ready:
            return False
        payload = message.serialize()
        try:
            header = _HEADER.pack(len(payload))
            if os.write(self._fd_write, header) != len(header):
                return False
            return os.write(self._fd_write, payload) == len(payload)
        except OSError:
            return False

    def receive(self) -> Optional[Message]:
        """Read one message if one is waiting, else return None."""
        if not self.ready:
            return None
        try:
            header = os.read(self._fd_read, _HEADER.size)
            if len(header) != _HEADER.size:
                return None
            (length,) = _HEADER.unpack(header)
            payload = os.read(self._fd_read, length) if length else b""
        except OSError:
            return None
        if len(payload) != length:
            return None
        return Message.deserialize(payload)

    def close(self) -> None:
        """Close both ends; the server also removes the FIFOs."""
        for fd in (self._fd_read, self._fd_write):
            if fd != -1:
                try:
                    os.close(fd)
                except OSError:
                    pass
        self._fd_read = self._fd_write = -1
        if self.is_server:
            for path in (self.path_in, self.path_out):
                try:
                    os.unlink(path)
                except FileNotFoundError:
                    pass

    def __enter__(self) -> "NamedPipeChannel":
        return self

    def __exit__(self, *args) -> None:
        self.close()