"""HTTP request methods and their wire names."""

from __future__ import annotations

from enum import IntEnum


class HttpMethod(IntEnum):
    """Request methods, numbered in the order of the method table."""

    DELETE = 0
    GET = 1
    HEAD = 2
    POST = 3
    PUT = 4
    CONNECT = 5
    OPTIONS = 6
    TRACE = 7
    COPY = 8
    LOCK = 9
    MKCOL = 10
    MOVE = 11
    PROPFIND = 12
    PROPPATCH = 13
    SEARCH = 14
    UNLOCK = 15
    BIND = 16
    REBIND = 17
    UNBIND = 18
    ACL = 19
    REPORT = 20
    MKACTIVITY = 21
    CHECKOUT = 22
    MERGE = 23
    MSEARCH = 24
    NOTIFY = 25
    SUBSCRIBE = 26
    UNSUBSCRIBE = 27
    PATCH = 28
    PURGE = 29
    MKCALENDAR = 30
    LINK = 31
    UNLINK = 32
    SOURCE = 33
    INVALID_METHOD = 34


_WIRE_NAMES: dict[HttpMethod, str] = {
    method: ("M-SEARCH" if method is HttpMethod.MSEARCH else method.name)
    for method in HttpMethod
    if method is not HttpMethod.INVALID_METHOD
}


def string_to_http_method(method: str) -> HttpMethod:
    """Return the method whose wire name equals ``method`` exactly."""
    for candidate, name in _WIRE_NAMES.items():
        if name == method:
            return candidate
    return HttpMethod.INVALID_METHOD


def chars_to_http_method(method: str | bytes) -> HttpMethod:
    """Return the first method whose wire name ``method`` starts with."""
    if isinstance(method, (bytes, bytearray)):
        method = bytes(method).decode("latin-1")
    for candidate, name in _WIRE_NAMES.items():
        if method.startswith(name):
            return candidate
    return HttpMethod.INVALID_METHOD


def http_method_to_string(method: HttpMethod | int) -> str:
    """Return the wire name of ``method``, or ``<unknown>``."""
    try:
        return _WIRE_NAMES[HttpMethod(int(method))]
    except (ValueError, KeyError):
        return "<unknown>"