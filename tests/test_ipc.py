import os
import threading
import time

import pytest

from plazza.ipc import Message, MessageType, NamedPipeChannel
from plazza.orders import PizzaOrder, PizzaSize, PizzaType


def _connect(pipe_name):
    holder = {}

    def make_server():
        holder["server"] = NamedPipeChannel(pipe_name, True)

    thread = threading.Thread(target=make_server)
    thread.start()
    deadline = time.monotonic() + 5
    while not (os.path.exists(pipe_name + "_in") and os.path.exists(pipe_name + "_out")):
        if time.monotonic() > deadline:
            raise RuntimeError("server pipes never appeared")
        time.sleep(0.01)
    client = NamedPipeChannel(pipe_name, False)
    thread.join(timeout=5)
    return holder["server"], client


def _receive(channel):
    for _ in range(100):
        message = channel.receive()
        if message is not None:
            return message
        time.sleep(0.01)
    return None


def test_serialize_fixed_layout():
    message = Message(
        MessageType.ORDER, PizzaOrder(PizzaType.Regina, PizzaSize.XXL, 2), "", 42, 3
    )
    assert message.serialize() == b"1|1|16|2|42|3|0|"


def test_serialize_content_length_counts_bytes():
    message = Message(MessageType.PIZZA_READY, content="caf\u00e9")
    assert message.serialize().endswith(b"|5|caf\xc3\xa9")


@pytest.mark.parametrize(
    "message",
    [
        Message(MessageType.ORDER, PizzaOrder(PizzaType.Fantasia, PizzaSize.S, 1), "", 10, 0),
        Message(MessageType.STATUS_RESPONSE, PizzaOrder(), "Kitchen 1 - Queue: 0", 7, 1),
        Message(MessageType.PIZZA_READY, content="a|b|c", sender_pid=99, kitchen_id=4),
        Message(MessageType.SHUTDOWN, content="\u00e9t\u00e9"),
    ],
)
def test_round_trip(message):
    assert Message.deserialize(message.serialize()) == message


def test_deserialize_ignores_bytes_beyond_length():
    data = Message(MessageType.PIZZA_READY, content="ready").serialize() + b"extra"
    assert Message.deserialize(data).content == "ready"


def test_deserialize_missing_fields_keep_defaults():
    message = Message.deserialize(b"5|0|0|0|7|1")
    assert message.type is MessageType.SHUTDOWN
    assert message.sender_pid == 7
    assert message.kitchen_id == 1
    assert message.content == ""


def test_deserialize_invalid_field_raises():
    with pytest.raises(ValueError):
        Message.deserialize(b"x|0|0|0|0|0|0|")


def test_channel_not_ready_when_pipes_missing(tmp_path):
    channel = NamedPipeChannel(str(tmp_path / "absent"), False)
    assert channel.ready is False
    assert channel.send(Message(MessageType.ORDER)) is False
    assert channel.receive() is None


def test_channel_exchanges_messages_both_ways(tmp_path):
    name = str(tmp_path / "kitchen")
    server, client = _connect(name)
    with server, client:
        assert server.ready and client.ready
        order = Message(
            MessageType.ORDER, PizzaOrder(PizzaType.Americana, PizzaSize.L, 1), "", 5, 2
        )
        assert server.send(order) is True
        assert _receive(client) == order

        reply = Message(MessageType.PIZZA_READY, content="Americana L", sender_pid=6, kitchen_id=2)
        assert client.send(reply) is True
        assert _receive(server) == reply


def test_receive_on_empty_channel_returns_none(tmp_path):
    name = str(tmp_path / "quiet")
    server, client = _connect(name)
    with server, client:
        assert server.receive() is None
        assert client.receive() is None


def test_server_close_removes_pipes(tmp_path):
    name = str(tmp_path / "gone")
    server, client = _connect(name)
    client.close()
    server.close()
    assert not os.path.exists(name + "_in")
    assert not os.path.exists(name + "_out")
    assert server.ready is False