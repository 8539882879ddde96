"""Byte streams with exact-length reads and writes."""

from __future__ import annotations

import socket as _socket
from abc import ABC, abstractmethod


class Stream(ABC):
    """A byte stream; subclasses supply ``read``, ``write`` and ``close``."""

    @abstractmethod
    def read(self, length: int) -> bytes:
        """Read up to ``length`` bytes; an empty result means end of stream."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write some of ``data`` and return how many bytes were written."""

    @abstractmethod
    def close(self) -> None:
        """Close the stream."""

    def read_fix_size(self, length: int) -> bytes:
        """Read exactly ``length`` bytes, raising EOFError if the stream ends first."""
        chunks = bytearray()
        while len(chunks) < length:
            chunk = self.read(length - len(chunks))
            if not chunk:
                raise EOFError(f"stream ended after {len(chunks)} of {length} bytes")
            chunks += chunk
        return bytes(chunks)

    def write_fix_size(self, data: bytes) -> int:
        """Write all of ``data``, raising ConnectionError if nothing can be written."""
        view = memoryview(data)
        while view:
            written = self.write(bytes(view))
            if written <= 0:
                raise ConnectionError("stream accepted no more data")
            view = view[written:]
        return len(data)


class SocketStream(Stream):
    """A stream over a connected socket, closed on exit when it owns it."""

    def __init__(self, sock: _socket.socket | None, owner: bool = True) -> None:
        self.socket = sock
        self.owner = owner

    def is_connected(self) -> bool:
        if self.socket is None or self.socket.fileno() == -1:
            return False
        try:
            self.socket.getpeername()
        except OSError:
            return False
        return True

    def read(self, length: int) -> bytes:
        if not self.is_connected():
            raise ConnectionError("socket is not connected")
        return self.socket.recv(length)

    def write(self, data: bytes) -> int:
        if not self.is_connected():
            raise ConnectionError("socket is not connected")
        return self.socket.send(data)

    def close(self) -> None:
        if self.socket is not None:
            self.socket.close()

    def __enter__(self) -> SocketStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.owner:
            self.close()