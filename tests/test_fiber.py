import gc
import threading

import pytest

from fiberweb.fiber import DEFAULT_STACK_SIZE, Fiber, FiberState


def _in_new_thread(func):
    results = []
    thread = threading.Thread(target=lambda: results.append(func()))
    thread.start()
    thread.join()
    return results[0]


def test_callback_runs_and_fiber_terminates():
    seen = []
    fiber = Fiber(lambda: seen.append("ran"))
    assert fiber.state is FiberState.INIT
    fiber.swap_in()
    assert seen == ["ran"]
    assert fiber.state is FiberState.TERM


def test_yield_to_hold_and_resume_interleaves():
    order = []

    def body():
        order.append("f1")
        Fiber.yield_to_hold()
        order.append("f2")

    fiber = Fiber(body)
    fiber.swap_in()
    order.append("m1")
    assert fiber.state is FiberState.HOLD
    fiber.swap_in()
    order.append("m2")
    assert order == ["f1", "m1", "f2", "m2"]
    assert fiber.state is FiberState.TERM


def test_yield_to_ready_sets_ready():
    fiber = Fiber(Fiber.yield_to_ready)
    fiber.swap_in()
    assert fiber.state is FiberState.READY
    fiber.swap_in()
    assert fiber.state is FiberState.TERM


def test_exception_marks_except():
    def body():
        raise ValueError("boom")

    fiber = Fiber(body)
    fiber.swap_in()
    assert fiber.state is FiberState.EXCEPT


def test_current_fiber_inside_and_outside():
    inside = {}

    def body():
        inside["this"] = Fiber.get_this()
        inside["id"] = Fiber.get_fiber_id()

    fiber = Fiber(body)
    main = Fiber.get_this()
    fiber.swap_in()
    assert inside["this"] is fiber
    assert inside["id"] == fiber.id
    assert Fiber.get_this() is main


def test_main_fiber_of_new_thread():
    def probe():
        before = Fiber.get_fiber_id()
        main = Fiber.get_this()
        return before, main.id, main.state, Fiber.get_this() is main

    before, main_id, state, same = _in_new_thread(probe)
    assert before == 0
    assert main_id == 0
    assert state is FiberState.EXEC
    assert same


def test_main_fiber_cannot_yield():
    Fiber.get_this()
    with pytest.raises(RuntimeError):
        Fiber.yield_to_hold()
    with pytest.raises(RuntimeError):
        Fiber.yield_to_ready()


def test_main_fiber_cannot_be_swapped_in():
    main = Fiber.get_this()
    with pytest.raises(RuntimeError):
        main.swap_in()


def test_swap_in_finished_fiber_raises_until_reset():
    count = []
    fiber = Fiber(lambda: count.append(1))
    fiber.swap_in()
    with pytest.raises(RuntimeError):
        fiber.swap_in()
    fiber.reset(lambda: count.append(2))
    assert fiber.state is FiberState.INIT
    fiber.swap_in()
    assert count == [1, 2]
    assert fiber.state is FiberState.TERM


def test_reset_on_held_fiber_raises():
    fiber = Fiber(Fiber.yield_to_hold)
    fiber.swap_in()
    with pytest.raises(RuntimeError):
        fiber.reset(lambda: None)
    fiber.swap_in()
    assert fiber.state is FiberState.TERM


def test_swap_out_outside_fiber_raises():
    fiber = Fiber(lambda: None)
    with pytest.raises(RuntimeError):
        fiber.swap_out()


def test_ids_increase():
    first = Fiber(lambda: None)
    second = Fiber(lambda: None)
    assert second.id > first.id > 0


def test_default_stack_size():
    assert Fiber(lambda: None).stack_size == DEFAULT_STACK_SIZE
    assert Fiber(lambda: None, 4096).stack_size == 4096


def test_total_fibers_counts_live_fibers():
    Fiber.get_this()
    gc.collect()
    before = Fiber.total_fibers()
    fiber = Fiber(lambda: None)
    assert Fiber.total_fibers() == before + 1
    del fiber
    gc.collect()
    assert Fiber.total_fibers() == before


def test_nested_fiber_returns_to_its_caller():
    order = []
    holder = {}
    main = Fiber.get_this()

    def inner():
        order.append("inner1")
        Fiber.yield_to_hold()
        order.append("inner2")

    def outer():
        inner_fiber = holder["inner"]
        inner_fiber.swap_in()
        holder["after_inner"] = Fiber.get_this()
        inner_fiber.swap_in()
        order.append("outer-done")

    holder["inner"] = Fiber(inner)
    holder["outer"] = Fiber(outer)
    holder["outer"].swap_in()
    assert holder["after_inner"] is holder["outer"]
    assert order == ["inner1", "inner2", "outer-done"]
    assert holder["inner"].state is FiberState.TERM
    assert holder["outer"].state is FiberState.TERM
    assert Fiber.get_this() is main
    assert Fiber.get_fiber_id() == main.id