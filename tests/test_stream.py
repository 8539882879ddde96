import socket

import pytest

from fiberweb.stream import SocketStream, Stream


class ChunkStream(Stream):
    def __init__(self, data, chunk=3, write_limit=2):
        self.data = data
        self.chunk = chunk
        self.write_limit = write_limit
        self.written = bytearray()
        self.closed = False

    def read(self, length):
        out = self.data[: min(length, self.chunk)]
        self.data = self.data[len(out):]
        return out

    def write(self, data):
        part = data[: self.write_limit]
        self.written += part
        return len(part)

    def close(self):
        self.closed = True


def test_read_fix_size_collects_chunks():
    stream = ChunkStream(b"abcdefghij")
    assert Stream.read_fix_size(stream, 8) == b"abcdefgh"
    assert stream.data == b"ij"


def test_read_fix_size_raises_on_eof():
    stream = ChunkStream(b"abc")
    with pytest.raises(EOFError):
        Stream.read_fix_size(stream, 5)


def test_write_fix_size_writes_everything():
    stream = ChunkStream(b"")
    payload = b"hello world"
    assert Stream.write_fix_size(stream, payload) == len(payload)
    assert bytes(stream.written) == payload


def test_write_fix_size_raises_when_stuck():
    stream = ChunkStream(b"", write_limit=0)
    with pytest.raises(ConnectionError):
        Stream.write_fix_size(stream, b"data")


def test_socket_stream_round_trip():
    left, right = socket.socketpair()
    with SocketStream(left) as a, SocketStream(right) as b:
        assert a.is_connected()
        a.write_fix_size(b"ping-pong")
        assert b.read_fix_size(9) == b"ping-pong"
    assert left.fileno() == -1
    assert right.fileno() == -1


def test_socket_stream_not_owner_keeps_socket_open():
    left, right = socket.socketpair()
    try:
        with SocketStream(left, owner=False) as stream:
            assert stream.write_fix_size(b"x") == 1
        assert left.fileno() != -1
        assert right.recv(1) == b"x"
    finally:
        left.close()
        right.close()


def test_closed_socket_stream_refuses_io():
    left, right = socket.socketpair()
    right.close()
    stream = SocketStream(left)
    stream.close()
    assert stream.is_connected() is False
    with pytest.raises(ConnectionError):
        stream.read(1)
    with pytest.raises(ConnectionError):
        stream.write(b"x")


def test_stream_without_socket():
    stream = SocketStream(None)
    assert stream.is_connected() is False
    stream.close()
    with pytest.raises(ConnectionError):
        stream.read(1)