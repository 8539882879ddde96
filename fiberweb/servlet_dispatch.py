"""Routing of requests to servlets by exact path or glob pattern."""

from __future__ import annotations

import threading
from fnmatch import fnmatchcase
from typing import Any

from fiberweb.http_request import HttpRequest
from fiberweb.http_response import HttpResponse
from fiberweb.servlet import FunctionServlet, Handler, NotFoundServlet, Servlet


def _as_servlet(servlet: Servlet | Handler) -> Servlet:
    return servlet if isinstance(servlet, Servlet) else FunctionServlet(servlet)


class ServletDispatch(Servlet):
    """Finds the servlet for a path: exact routes first, then globs in order."""

    def __init__(self) -> None:
        super().__init__("ServletDispatch")
        self._lock = threading.RLock()
        self._exact: dict[str, Servlet] = {}
        self._globs: list[tuple[str, Servlet]] = []
        self.default: Servlet = NotFoundServlet()

    def handle(self, request: HttpRequest, response: HttpResponse, session: Any) -> int:
        servlet = self.get_matched_servlet(request.path) or self.default
        return servlet.handle(request, response, session)

    def get_servlet(self, uri: str) -> Servlet | None:
        with self._lock:
            return self._exact.get(uri)

    def get_glob_servlet(self, uri: str) -> Servlet | None:
        with self._lock:
            return next((s for pattern, s in self._globs if fnmatchcase(uri, pattern)), None)

    def get_matched_servlet(self, uri: str) -> Servlet:
        with self._lock:
            found = self._exact.get(uri) or self.get_glob_servlet(uri)
            return found if found is not None else self.default

    def add_servlet(self, uri: str, servlet: Servlet | Handler) -> None:
        with self._lock:
            self._exact[uri] = _as_servlet(servlet)

    def add_glob_servlet(self, uri: str, servlet: Servlet | Handler) -> None:
        servlet = _as_servlet(servlet)
        with self._lock:
            self._globs = [item for item in self._globs if item[0] != uri]
            self._globs.append((uri, servlet))

    def del_servlet(self, uri: str) -> None:
        with self._lock:
            self._exact.pop(uri, None)

    def del_glob_servlet(self, uri: str) -> None:
        with self._lock:
            self._globs = [item for item in self._globs if item[0] != uri]