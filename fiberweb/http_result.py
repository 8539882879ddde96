"""Outcome of a client HTTP request."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from fiberweb.http_response import HttpResponse


class HttpResultError(IntEnum):
    """Result codes of a client request."""

    OK = 0
    INVALID_URL = 1
    INVALID_HOST = 2
    CONNECT_FAIL = 3
    SEND_CLOSE_BY_PEER = 4
    SEND_SOCKET_ERROR = 5
    TIMEOUT = 6
    CREATE_SOCKET_ERROR = 7
    POOL_GET_CONNECTION = 8
    POOL_INVALID_CONNECTION = 9


@dataclass
class HttpResult:
    """A result code, the response if any, and an error message."""

    result: int
    response: HttpResponse | None
    error: str

    def to_string(self) -> str:
        response = self.response.to_string() if self.response is not None else "None"
        return f"[ HttpResult result = {int(self.result)}, error = {self.error}, response = {response}]"

    def __str__(self) -> str:
        return self.to_string()