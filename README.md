# fiberweb

Building blocks for a small HTTP service built on cooperative fibers. The
package has no third-party dependencies.

## What is in it

- `fiberweb.http_method` holds the `HttpMethod` enum. `string_to_http_method`
  matches a wire name exactly. `chars_to_http_method` returns the first method
  whose wire name starts the given text, and it accepts bytes as well as text.
  `http_method_to_string` returns the wire name, or `<unknown>`. `MSEARCH` is
  written as `M-SEARCH` on the wire.
- `fiberweb.http_status` holds the `HttpStatus` enum. `http_status_to_string`
  returns the reason phrase of a status, or `<Unknown>`.
- `fiberweb.fields` provides `CaseInsensitiveDict`, a string map whose keys
  compare without regard to case. A key keeps the spelling it was first stored
  under, and iteration is in case-insensitive key order. The module also has
  two typed lookups:
  - `get_as(mapping, key, default)` converts the value to the type of
    `default`. It returns `default` when the key is missing or the value does
    not convert.
  - `check_get_as` returns `(True, value)` when the conversion succeeds and
    `(False, default)` otherwise.
- `fiberweb.http_request.HttpRequest` and `fiberweb.http_response.HttpResponse`
  are dataclasses for HTTP messages. The `version` field packs major and minor
  numbers as `0x11` for HTTP/1.1. Each class has header helpers: `get_header`,
  `set_header`, `del_header`, `get_header_as` and `check_get_header_as`.
  `HttpRequest` also has the same helpers for `params` and `cookies`, and
  `has_header`, `has_param` and `has_cookie`. `dump(stream)` writes the
  message in wire form. It writes a `connection:` line from `close` and a
  `content-length:` line when there is a body. `to_string()` returns the same
  text.
- `fiberweb.http_result` has `HttpResult`, which carries a result code, an
  optional `HttpResponse` and an error message. The codes are listed in
  `HttpResultError`.
- `fiberweb.servlet` defines the abstract `Servlet`. `FunctionServlet` wraps a
  callable `(request, response, session) -> int`. `NotFoundServlet` fills in a
  404 HTML page.
- `fiberweb.servlet_dispatch.ServletDispatch` routes a request by
  `request.path`. It tries exact routes first, then glob patterns in the order
  they were added. When nothing matches it uses `default`, a `NotFoundServlet`
  unless you replace it. `add_servlet` and `add_glob_servlet` accept a
  `Servlet` or a plain callable. Adding a glob pattern that is already present
  replaces the old entry.
- `fiberweb.stream` defines the abstract `Stream`. `read_fix_size` reads an
  exact number of bytes and raises `EOFError` if the stream ends first.
  `write_fix_size` writes all the data and raises `ConnectionError` if nothing
  more can be written. `SocketStream` wraps a connected socket. It raises
  `ConnectionError` when used unconnected, and as a context manager it closes
  the socket on exit if it owns it.
- `fiberweb.fiber` provides `Fiber`, a unit of cooperative execution.
  `swap_in` runs a fiber until it swaps out or finishes. Inside a fiber,
  `Fiber.yield_to_hold()` and `Fiber.yield_to_ready()` hand control back.
  `reset` reuses a fiber that has not started or has finished. Each fiber's
  lifecycle state is a `FiberState` value. `Fiber.get_this()` returns the
  running fiber and creates the thread's main fiber (id 0) when needed.
  `Fiber.get_fiber_id()` returns the running fiber's id, or 0. It never
  creates a fiber. `Fiber.total_fibers()` counts the live fibers.
- `fiberweb.fd_ctx` has `FdCtx`, the state of one file descriptor. Sockets are
  switched to non-blocking mode when their `FdCtx` is created. Receive and send
  timeouts are set with `set_timeout(socket.SO_RCVTIMEO, ms)` and the
  corresponding send option. `FdManager` is a table of these contexts:
  `get(fd, auto_create)` looks one up and `delete(fd)` removes it.
- `fiberweb.scheduler.Scheduler` runs fibers and callables on a pool of
  threads. `schedule(task, thread_id)` can pin a task to one of the ids in
  `thread_ids`, and `schedule_all` queues several tasks in order. `stop` runs
  the remaining work before it joins the threads. With `use_caller=True`
  (the default), the constructing thread counts as one of the threads. Its
  share of the work runs when `stop` is called. `Scheduler.get_this()` and
  `Scheduler.get_main_fiber()` report the scheduler and loop fiber of the
  running code.

## Installing

```
pip install .
```

## Routing a request

```python
from fiberweb.http_request import HttpRequest
from fiberweb.http_response import HttpResponse
from fiberweb.http_status import HttpStatus
from fiberweb.servlet_dispatch import ServletDispatch


def hello(request, response, session):
    response.body = "hello " + request.get_param("name", "world")
    return 0


dispatch = ServletDispatch()
dispatch.add_servlet("/hello", hello)

request = HttpRequest(path="/hello")
response = HttpResponse()
dispatch.handle(request, response, None)
print(response.to_string())

response = HttpResponse()
dispatch.handle(HttpRequest(path="/missing"), response, None)
assert response.status is HttpStatus.NOT_FOUND
```

## Fibers

```python
from fiberweb.fiber import Fiber, FiberState

steps = []


def work():
    steps.append("first")
    Fiber.yield_to_hold()
    steps.append("second")


fiber = Fiber(work)
fiber.swap_in()
assert fiber.state is FiberState.HOLD and steps == ["first"]
fiber.swap_in()
assert fiber.state is FiberState.TERM and steps == ["first", "second"]
```

## Scheduling work

```python
from fiberweb.scheduler import Scheduler

with Scheduler(2, False, "workers") as scheduler:
    scheduler.schedule(lambda: print("ran on a worker"))
```

Leaving the `with` block calls `stop`. It runs all queued work and then joins
the worker threads.

## What it does not do

The package models HTTP messages but does not parse them. It cannot turn bytes
received from a socket into an `HttpRequest` or `HttpResponse`. It has no
listening server, no client or connection pool, and no event loop that waits
for sockets to become readable or writable. `FdCtx` and `FdManager` record
descriptor state, but nothing in the package makes socket calls cooperative
on their own. To serve HTTP, supply your own parsing and accept loop and use
`ServletDispatch` to produce responses.

## Running the tests

```
pip install .[test]
pytest
```