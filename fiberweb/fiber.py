"""Stackful fibers with explicit hand-off of control.

Each fiber runs its callback on a dedicated worker thread, but only one of
the fibers belonging to a thread of control runs at a time: ``swap_in``
blocks the caller until the fiber swaps out or finishes, and ``swap_out``
blocks the fiber until it is swapped in again.  Every thread of control has
a main fiber (id 0) that stands for the code running outside any fiber.
"""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

_logger = logging.getLogger(__name__)

DEFAULT_STACK_SIZE = 1024 * 1024

_counter_lock = threading.Lock()
_last_id = 0
_live_fibers = 0


def _next_id() -> int:
    global _last_id
    with _counter_lock:
        _last_id += 1
        return _last_id


def _fiber_created() -> None:
    global _live_fibers
    with _counter_lock:
        _live_fibers += 1


def _fiber_released() -> None:
    global _live_fibers
    with _counter_lock:
        _live_fibers -= 1


class FiberState(IntEnum):
    """Lifecycle states of a fiber."""

    INIT = 0
    HOLD = 1
    EXEC = 2
    TERM = 3
    READY = 4
    EXCEPT = 5


_FINISHED = (FiberState.TERM, FiberState.EXCEPT)
_RESETTABLE = (FiberState.INIT, FiberState.TERM, FiberState.EXCEPT)


@dataclass
class _ThreadState:
    current: Fiber | None = None
    main: Fiber | None = None


_local = threading.local()


def _thread_state() -> _ThreadState:
    state = getattr(_local, "state", None)
    if state is None:
        state = _ThreadState()
        _local.state = state
    return state


class Fiber:
    """A unit of cooperative execution running ``callback``."""

    def __init__(self, callback: Callable[[], object], stack_size: int = 0) -> None:
        Fiber.get_this()
        self._setup(callback, _next_id(), stack_size or DEFAULT_STACK_SIZE, is_main=False)
        self.state = FiberState.INIT

    def _setup(self, callback: Callable[[], object] | None, fiber_id: int,
               stack_size: int, is_main: bool) -> None:
        self.id = fiber_id
        self.stack_size = stack_size
        self._callback = callback
        self._is_main = is_main
        self._worker: threading.Thread | None = None
        self._resume = threading.Semaphore(0)
        self._back = threading.Semaphore(0)
        self._owner: _ThreadState | None = None
        self._caller: Fiber | None = None
        _fiber_created()
        weakref.finalize(self, _fiber_released)

    @classmethod
    def _new_main(cls) -> Fiber:
        fiber = cls.__new__(cls)
        fiber._setup(None, 0, 0, is_main=True)
        fiber.state = FiberState.EXEC
        return fiber

    def __repr__(self) -> str:
        return f"Fiber(id={self.id}, state={self.state.name})"

    def reset(self, callback: Callable[[], object]) -> None:
        """Reuse a fiber that has not started or has finished for ``callback``."""
        if self._is_main:
            raise RuntimeError("the main fiber cannot be reset")
        if self.state not in _RESETTABLE:
            raise RuntimeError(f"cannot reset a fiber in state {self.state.name}")
        self._callback = callback
        self._worker = None
        self._resume = threading.Semaphore(0)
        self._back = threading.Semaphore(0)
        self.state = FiberState.INIT

    def swap_in(self) -> None:
        """Run this fiber until it swaps out or finishes."""
        if self._is_main:
            raise RuntimeError("the main fiber cannot be swapped in")
        if self.state is FiberState.EXEC:
            raise RuntimeError("fiber is already running")
        if self.state in _FINISHED:
            raise RuntimeError("fiber has finished; reset it before running it again")
        caller = Fiber.get_this()
        owner = _thread_state()
        self._owner = owner
        self._caller = caller
        owner.current = self
        self.state = FiberState.EXEC
        if self._worker is None:
            self._worker = threading.Thread(
                target=self._main, name=f"fiber-{self.id}", daemon=True
            )
            self._worker.start()
        else:
            self._resume.release()
        self._back.acquire()

    def swap_out(self) -> None:
        """Give control back to the fiber that swapped this one in."""
        if threading.current_thread() is not self._worker:
            raise RuntimeError("only the running fiber can swap itself out")
        if self.state is FiberState.EXEC:
            self.state = FiberState.HOLD
        self._return_to_caller()
        self._resume.acquire()
        _local.state = self._owner

    def _return_to_caller(self) -> None:
        owner = self._owner
        if owner is not None:
            owner.current = self._caller
        self._caller = None
        self._back.release()

    def _main(self) -> None:
        _local.state = self._owner
        try:
            self._callback()
        except BaseException:
            self.state = FiberState.EXCEPT
            _logger.exception("fiber %d raised", self.id)
        else:
            self._callback = None
            self.state = FiberState.TERM
        self._return_to_caller()

    @staticmethod
    def get_this() -> Fiber:
        """Return the running fiber, creating this thread's main fiber if needed."""
        state = _thread_state()
        if state.current is None:
            if state.main is not None:
                raise RuntimeError("main fiber exists but no fiber is current")
            main = Fiber._new_main()
            state.main = main
            state.current = main
        return state.current

    @staticmethod
    def _yield(new_state: FiberState) -> None:
        current = Fiber.get_this()
        if current._is_main:
            raise RuntimeError("the main fiber cannot yield")
        current.state = new_state
        current.swap_out()

    @staticmethod
    def yield_to_ready() -> None:
        """Swap the running fiber out, marking it ready to run again."""
        Fiber._yield(FiberState.READY)

    @staticmethod
    def yield_to_hold() -> None:
        """Swap the running fiber out, marking it on hold."""
        Fiber._yield(FiberState.HOLD)

    @staticmethod
    def total_fibers() -> int:
        """Number of fibers currently alive, main fibers included."""
        with _counter_lock:
            return _live_fibers

    @staticmethod
    def get_fiber_id() -> int:
        """Id of the running fiber, or 0 without creating a main fiber."""
        state = getattr(_local, "state", None)
        if state is None or state.current is None:
            return 0
        return state.current.id