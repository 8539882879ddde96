"""HTTP request model and its serialisation."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, TextIO

from fiberweb.fields import CaseInsensitiveDict, check_get_as, get_as
from fiberweb.http_method import HttpMethod, http_method_to_string


def _as_fields(value: Any) -> CaseInsensitiveDict:
    if isinstance(value, CaseInsensitiveDict):
        return value
    return CaseInsensitiveDict(value or {})


@dataclass
class HttpRequest:
    """An HTTP request; ``version`` packs major and minor as 0xMm."""

    version: int = 0x11
    close: bool = True
    method: HttpMethod = HttpMethod.GET
    path: str = "/"
    query: str = ""
    fragment: str = ""
    body: str = ""
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    params: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    cookies: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self) -> None:
        self.headers = _as_fields(self.headers)
        self.params = _as_fields(self.params)
        self.cookies = _as_fields(self.cookies)

    def get_header(self, key: str, default: str = "") -> str:
        return self.headers.get(key, default)

    def get_param(self, key: str, default: str = "") -> str:
        return self.params.get(key, default)

    def get_cookie(self, key: str, default: str = "") -> str:
        return self.cookies.get(key, default)

    def set_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def set_param(self, key: str, value: str) -> None:
        self.params[key] = value

    def set_cookie(self, key: str, value: str) -> None:
        self.cookies[key] = value

    def has_header(self, key: str) -> bool:
        return key in self.headers

    def has_param(self, key: str) -> bool:
        return key in self.params

    def has_cookie(self, key: str) -> bool:
        return key in self.cookies

    def del_header(self, key: str) -> None:
        self.headers.pop(key, None)

    def del_param(self, key: str) -> None:
        self.params.pop(key, None)

    def del_cookie(self, key: str) -> None:
        self.cookies.pop(key, None)

    def get_header_as(self, key: str, default: Any = None) -> Any:
        return get_as(self.headers, key, default)

    def get_param_as(self, key: str, default: Any = None) -> Any:
        return get_as(self.params, key, default)

    def get_cookie_as(self, key: str, default: Any = None) -> Any:
        return get_as(self.cookies, key, default)

    def check_get_header_as(self, key: str, default: Any = None) -> tuple[bool, Any]:
        return check_get_as(self.headers, key, default)

    def check_get_param_as(self, key: str, default: Any = None) -> tuple[bool, Any]:
        return check_get_as(self.params, key, default)

    def check_get_cookie_as(self, key: str, default: Any = None) -> tuple[bool, Any]:
        return check_get_as(self.cookies, key, default)

    def dump(self, stream: TextIO) -> TextIO:
        """Write the request in wire form to ``stream`` and return it."""
        stream.write(
            f"{http_method_to_string(self.method)} {self.path}"
            f"{'?' if self.query else ''}{self.query}"
            f"{'#' if self.fragment else ''}{self.fragment}"
            f" HTTP/{self.version >> 4}.{self.version & 0x0F}\r\n"
        )
        stream.write(f"connection: {'close' if self.close else 'keep-alive'}\r\n")
        for key, value in self.headers.items():
            if key.lower() == "connection":
                continue
            stream.write(f"{key}:{value}\r\n")
        if self.body:
            stream.write(f"content-length: {len(self.body.encode('utf-8'))}\r\n\r\n")
            stream.write(self.body)
        else:
            stream.write("\r\n")
        return stream

    def to_string(self) -> str:
        return self.dump(io.StringIO()).getvalue()

    def __str__(self) -> str:
        return self.to_string()