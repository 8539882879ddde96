"""HTTP response model and its serialisation."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, TextIO

from fiberweb.fields import CaseInsensitiveDict, check_get_as, get_as
from fiberweb.http_status import HttpStatus, http_status_to_string


@dataclass
class HttpResponse:
    """An HTTP response; ``version`` packs major and minor as 0xMm."""

    version: int = 0x11
    close: bool = True
    status: HttpStatus = HttpStatus.OK
    body: str = ""
    reason: str = ""
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})

    def get_header(self, key: str, default: str = "") -> str:
        return self.headers.get(key, default)

    def set_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def del_header(self, key: str) -> None:
        self.headers.pop(key, None)

    def get_header_as(self, key: str, default: Any = None) -> Any:
        return get_as(self.headers, key, default)

    def check_get_header_as(self, key: str, default: Any = None) -> tuple[bool, Any]:
        return check_get_as(self.headers, key, default)

    def dump(self, stream: TextIO) -> TextIO:
        """Write the response in wire form to ``stream`` and return it."""
        reason = self.reason or http_status_to_string(self.status)
        stream.write(
            f"HTTP/{self.version >> 4}.{self.version & 0x0F} {int(self.status)} {reason}\r\n"
        )
        for key, value in self.headers.items():
            if key.lower() == "connection":
                continue
            stream.write(f"{key}: {value}\r\n")
        stream.write(f"connection: {'close' if self.close else 'keep-alive'}\r\n")
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