from __future__ import annotations

import socket
import threading

import pytest

from chunkbench.channel import ChunkChannel
from chunkbench.errors import TransportError
from chunkbench.sender import Sender


def test_wire_is_flat_concatenation():
    a, b = socket.socketpair()
    received = bytearray()

    def drain():
        while True:
            data = b.recv(65536)
            if not data:
                break
            received.extend(data)

    t = threading.Thread(target=drain, daemon=True)
    t.start()
    with ChunkChannel(a) as ch:
        res = Sender(ch, 10_000, 7).run()
    t.join(timeout=10.0)
    b.close()

    assert res.chunks_sent == 7
    assert res.bytes_sent == 70_000
    assert bytes(received) == bytes(70_000)


def test_failure_reports_chunks_sent(fake_channel):
    ch = fake_channel(fail_after=3)
    with pytest.raises(TransportError) as ei:
        Sender(ch, 100, 10).run()
    assert ei.value.chunks_done == 3
    assert len(ch.sent) == 3


def test_send_buffer_sized_to_one_chunk(fake_channel):
    ch = fake_channel()
    Sender(ch, 1234, 2).run()
    assert ch.send_buffer_requests == [1234]
    assert len(ch.sent) == 2


def test_peer_gone_before_first_chunk():
    a, b = socket.socketpair()
    b.close()
    with ChunkChannel(a) as ch:
        with pytest.raises(TransportError) as ei:
            Sender(ch, 100_000, 50).run()
    assert ei.value.chunks_done < 50
