"""A scheduler that runs fibers and callables on a pool of threads.

Work items are run in submission order by whichever scheduler thread picks
them up first, unless an item is pinned to one thread.  With ``use_caller``
the constructing thread takes part too: its share of the work runs inside
a root fiber, which ``stop`` swaps in to drain the queue.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from fiberweb.fiber import Fiber, FiberState

_logger = logging.getLogger(__name__)

_FINISHED = (FiberState.TERM, FiberState.EXCEPT)
_IDLE_WAIT = 0.01

Task = Fiber | Callable[[], object]


@dataclass
class _Context:
    scheduler: Scheduler | None = None
    main_fiber: Fiber | None = None


@dataclass
class _Task:
    fiber: Fiber | None = None
    callback: Callable[[], object] | None = None
    thread_id: int = -1


_tls = threading.local()
_active_lock = threading.Lock()
_active: dict[int, _Context] = {}


def _context() -> _Context:
    ctx = getattr(_tls, "context", None)
    if ctx is None:
        ctx = _Context()
        _tls.context = ctx
    return ctx


def _running_fiber_context() -> _Context | None:
    fiber_id = Fiber.get_fiber_id()
    if not fiber_id:
        return None
    with _active_lock:
        return _active.get(fiber_id)


def _make_task(task: Task | None, thread_id: int) -> _Task | None:
    if task is None:
        return None
    if isinstance(task, Fiber):
        return _Task(fiber=task, thread_id=thread_id)
    if callable(task):
        return _Task(callback=task, thread_id=thread_id)
    raise TypeError(f"cannot schedule {task!r}: expected a Fiber or a callable")


class Scheduler:
    """Runs scheduled fibers and callables on ``threads`` threads."""

    def __init__(self, threads: int = 1, use_caller: bool = True, name: str = "") -> None:
        if threads <= 0:
            raise ValueError("a scheduler needs at least one thread")
        self.name = name
        self._lock = threading.RLock()
        self._wakeup = threading.Condition(threading.Lock())
        self._tasks: list[_Task] = []
        self._threads: list[threading.Thread] = []
        self._thread_ids: list[int] = []
        self._active_count = 0
        self._idle_count = 0
        self._stopping = True
        self._auto_stop = False
        self._root_fiber: Fiber | None = None

        if use_caller:
            Fiber.get_this()
            threads -= 1
            if Scheduler.get_this() is not None:
                raise RuntimeError("this thread already has a scheduler")
            self._root_fiber = Fiber(self._run)
            _context().main_fiber = self._root_fiber
            self._root_thread_id = threading.get_ident()
            self._thread_ids.append(self._root_thread_id)
        else:
            self._root_thread_id = -1

        self._thread_count = threads

    def __repr__(self) -> str:
        return f"Scheduler(name={self.name!r}, threads={self._thread_count})"

    @property
    def thread_ids(self) -> list[int]:
        """Ids of the threads taking part in scheduling."""
        with self._lock:
            return list(self._thread_ids)

    def __enter__(self) -> Scheduler:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _set_this(self) -> None:
        ctx = _context()
        if ctx.scheduler is None:
            ctx.scheduler = self

    @staticmethod
    def get_this() -> Scheduler | None:
        """Return the scheduler of the running thread or fiber, if any."""
        ctx = getattr(_tls, "context", None)
        if ctx is not None and ctx.scheduler is not None:
            return ctx.scheduler
        running = _running_fiber_context()
        return running.scheduler if running is not None else None

    @staticmethod
    def get_main_fiber() -> Fiber | None:
        """Return the fiber that runs the scheduling loop here, if any."""
        ctx = getattr(_tls, "context", None)
        if ctx is not None and ctx.main_fiber is not None:
            return ctx.main_fiber
        running = _running_fiber_context()
        return running.main_fiber if running is not None else None

    def start(self) -> None:
        """Start the worker threads; does nothing if already started."""
        self._set_this()
        with self._lock:
            if not self._stopping:
                return
            self._stopping = False
            if self._threads:
                raise RuntimeError("scheduler threads are already running")
            for index in range(self._thread_count):
                thread = threading.Thread(
                    target=self._run, name=f"{self.name}_{index}", daemon=True
                )
                thread.start()
                self._threads.append(thread)
                self._thread_ids.append(thread.ident)

    def stop(self) -> None:
        """Run the remaining work to completion, then stop every thread."""
        self._auto_stop = True
        root = self._root_fiber
        if (
            root is not None
            and self._thread_count == 0
            and root.state in (FiberState.TERM, FiberState.INIT, FiberState.EXCEPT)
        ):
            _logger.info("%r stopped", self)
            self._stopping = True
            if self._is_stopping():
                self._forget_this()
                return

        self._stopping = True
        for _ in range(self._thread_count):
            self._tickle()
        if root is not None:
            self._tickle()
            if not self._is_stopping() and root.state not in _FINISHED:
                root.swap_in()

        for thread in self._threads:
            thread.join()
        self._forget_this()

    def _forget_this(self) -> None:
        ctx = getattr(_tls, "context", None)
        if ctx is not None and ctx.scheduler is self:
            _tls.context = None

    def schedule(self, task: Task, thread_id: int = -1) -> None:
        """Queue a fiber or callable, optionally pinned to one thread id."""
        with self._lock:
            need_tickle = self._schedule_no_lock(task, thread_id)
        if need_tickle:
            self._tickle()

    def schedule_all(self, tasks: Iterable[Task]) -> None:
        """Queue several fibers or callables in order."""
        need_tickle = False
        with self._lock:
            for task in tasks:
                need_tickle = self._schedule_no_lock(task, -1) or need_tickle
        if need_tickle:
            self._tickle()

    def _schedule_no_lock(self, task: Task, thread_id: int) -> bool:
        need_tickle = not self._tasks
        item = _make_task(task, thread_id)
        if item is not None:
            self._tasks.append(item)
        return need_tickle

    def _take_task(self, thread_id: int) -> tuple[_Task | None, bool, bool]:
        tickle_me = False
        with self._lock:
            for item in self._tasks:
                if item.thread_id != -1 and item.thread_id != thread_id:
                    tickle_me = True
                    continue
                if item.fiber is not None and item.fiber.state is FiberState.EXEC:
                    continue
                self._tasks.remove(item)
                self._active_count += 1
                return item, tickle_me, True
        return None, tickle_me, False

    def _finish_active(self) -> None:
        with self._lock:
            self._active_count -= 1

    def _run_fiber(self, fiber: Fiber, ctx: _Context) -> None:
        with _active_lock:
            _active[fiber.id] = ctx
        try:
            fiber.swap_in()
        finally:
            with _active_lock:
                if _active.get(fiber.id) is ctx:
                    del _active[fiber.id]

    def _run(self) -> None:
        in_root = self._root_fiber is not None and Fiber.get_this() is self._root_fiber
        self._set_this()
        ctx = _context()
        if in_root:
            thread_id = self._root_thread_id
            ctx.main_fiber = self._root_fiber
        else:
            thread_id = threading.get_ident()
            ctx.main_fiber = Fiber.get_this()
        _logger.debug("scheduler %r running on thread %d", self.name, thread_id)

        idle_fiber = Fiber(self._idle)
        callback_fiber: Fiber | None = None
        while True:
            task, tickle_me, is_active = self._take_task(thread_id)
            if tickle_me:
                self._tickle()

            if task is not None and task.fiber is not None and task.fiber.state not in _FINISHED:
                fiber = task.fiber
                self._run_fiber(fiber, ctx)
                self._finish_active()
                if fiber.state is FiberState.READY:
                    self.schedule(fiber)
                elif fiber.state not in _FINISHED:
                    fiber.state = FiberState.HOLD
            elif task is not None and task.callback is not None:
                if callback_fiber is not None:
                    callback_fiber.reset(task.callback)
                else:
                    callback_fiber = Fiber(task.callback)
                self._run_fiber(callback_fiber, ctx)
                self._finish_active()
                if callback_fiber.state is FiberState.READY:
                    self.schedule(callback_fiber)
                    callback_fiber = None
                elif callback_fiber.state in _FINISHED:
                    callback_fiber.reset(None)
                else:
                    callback_fiber.state = FiberState.HOLD
                    callback_fiber = None
            else:
                if is_active:
                    self._finish_active()
                    continue
                if idle_fiber.state is FiberState.TERM:
                    break
                with self._lock:
                    self._idle_count += 1
                self._run_fiber(idle_fiber, ctx)
                with self._lock:
                    self._idle_count -= 1
                if idle_fiber.state not in _FINISHED:
                    idle_fiber.state = FiberState.HOLD

    def _is_stopping(self) -> bool:
        with self._lock:
            return (
                self._auto_stop
                and self._stopping
                and not self._tasks
                and self._active_count == 0
            )

    def _tickle(self) -> None:
        with self._wakeup:
            self._wakeup.notify_all()

    def _idle(self) -> None:
        while not self._is_stopping():
            with self._wakeup:
                self._wakeup.wait(_IDLE_WAIT)
            Fiber.yield_to_hold()