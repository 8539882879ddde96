"""Request handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from fiberweb.http_request import HttpRequest
from fiberweb.http_response import HttpResponse
from fiberweb.http_status import HttpStatus

SERVER_NAME = "fiberweb/1.0.0"

Handler = Callable[[HttpRequest, HttpResponse, Any], int]


class Servlet(ABC):
    """Something that fills in a response for a request."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def handle(self, request: HttpRequest, response: HttpResponse, session: Any) -> int:
        """Handle ``request`` by filling in ``response``; return a status code."""


class FunctionServlet(Servlet):
    """A servlet that delegates to a plain callable."""

    def __init__(self, callback: Handler) -> None:
        super().__init__("FunctionServlet")
        self.callback = callback

    def handle(self, request: HttpRequest, response: HttpResponse, session: Any) -> int:
        return self.callback(request, response, session)


_NOT_FOUND_BODY = (
    "<html><head><title>404 Not Found</title></head><body><center>"
    "<h1>404 Not Found</h1></center><hr><center>" + SERVER_NAME + "</center></body></html>"
)


class NotFoundServlet(Servlet):
    """Answers every request with a 404 page."""

    def __init__(self) -> None:
        super().__init__("NotFoundServlet")

    def handle(self, request: HttpRequest, response: HttpResponse, session: Any) -> int:
        response.status = HttpStatus.NOT_FOUND
        response.set_header("Server", SERVER_NAME)
        response.set_header("Content-Type", "text/html")
        response.body = _NOT_FOUND_BODY
        return 0