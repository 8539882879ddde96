"""Per-descriptor bookkeeping for cooperative I/O."""

from __future__ import annotations

import os
import socket
import stat
import threading


class FdCtx:
    """What is known about one file descriptor.

    Sockets are switched to non-blocking mode on creation.  Timeouts are in
    milliseconds; ``None`` means no timeout.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self.is_init = False
        self.is_socket = False
        self.sys_nonblock = True
        self.user_nonblock = True
        self.is_closed = False
        self.recv_timeout: int | None = None
        self.send_timeout: int | None = None
        self._init()

    def _init(self) -> bool:
        try:
            info = os.fstat(self.fd)
        except OSError:
            pass
        else:
            self.is_init = True
            self.is_socket = stat.S_ISSOCK(info.st_mode)

        if self.is_socket:
            if os.get_blocking(self.fd):
                os.set_blocking(self.fd, False)
            self.sys_nonblock = True
        else:
            self.sys_nonblock = False
        return self.is_init

    def set_timeout(self, kind: int, value: int | None) -> None:
        """Set the receive timeout for ``SO_RCVTIMEO``, else the send timeout."""
        if kind == socket.SO_RCVTIMEO:
            self.recv_timeout = value
        else:
            self.send_timeout = value

    def get_timeout(self, kind: int) -> int | None:
        """Return the receive timeout for ``SO_RCVTIMEO``, else the send timeout."""
        if kind == socket.SO_RCVTIMEO:
            return self.recv_timeout
        return self.send_timeout

    def __repr__(self) -> str:
        return f"FdCtx(fd={self.fd}, socket={self.is_socket}, init={self.is_init})"


class FdManager:
    """A table of FdCtx objects indexed by descriptor number."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ctxs: list[FdCtx | None] = [None] * 64

    def get(self, fd: int, auto_create: bool = False) -> FdCtx | None:
        """Return the context of ``fd``, creating it when ``auto_create`` is set."""
        if fd == -1:
            return None
        if fd < -1:
            raise ValueError(f"invalid file descriptor: {fd}")
        with self._lock:
            if fd < len(self._ctxs):
                existing = self._ctxs[fd]
                if existing is not None or not auto_create:
                    return existing
            elif not auto_create:
                return None

            ctx = FdCtx(fd)
            if fd >= len(self._ctxs):
                self._ctxs.extend([None] * (int(fd * 1.5) - len(self._ctxs)))
            self._ctxs[fd] = ctx
            return ctx

    def delete(self, fd: int) -> None:
        """Forget the context of ``fd``, if there is one."""
        with self._lock:
            if 0 <= fd < len(self._ctxs):
                self._ctxs[fd] = None