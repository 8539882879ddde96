"""Case-insensitive field maps and typed lookups on them."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any

_INT_RE = re.compile(r"[+-]?[0-9]+")


class CaseInsensitiveDict(MutableMapping):
    """A string map whose keys compare without regard to case.

    The spelling of a key is the one it was first stored under, and
    iteration runs in case-insensitive key order.
    """

    def __init__(self, data: Mapping[str, str] | Iterable[tuple[str, str]] | None = None, **kwargs: str) -> None:
        self._store: dict[str, tuple[str, str]] = {}
        if data is not None:
            self.update(data)
        self.update(kwargs)

    @staticmethod
    def _fold(key: object) -> str:
        if not isinstance(key, str):
            raise KeyError(key)
        return key.lower()

    def __getitem__(self, key: str) -> str:
        return self._store[self._fold(key)][1]

    def __setitem__(self, key: str, value: str) -> None:
        folded = self._fold(key)
        existing = self._store.get(folded)
        self._store[folded] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        folded = self._fold(key)
        if folded not in self._store:
            raise KeyError(key)
        self._store.pop(folded)

    def __iter__(self) -> Iterator[str]:
        for folded in sorted(self._store):
            yield self._store[folded][0]

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._store

    def copy(self) -> CaseInsensitiveDict:
        return CaseInsensitiveDict(self.items())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"


def _convert(text: str, like: Any) -> Any:
    """Convert ``text`` to the type of ``like`` strictly, raising ValueError."""
    if like is None or isinstance(like, str):
        return text
    if isinstance(like, bool):
        if text in ("0", "1"):
            return text == "1"
        raise ValueError(f"not a boolean: {text!r}")
    if isinstance(like, int):
        if _INT_RE.fullmatch(text):
            return int(text)
        raise ValueError(f"not an integer: {text!r}")
    if isinstance(like, float):
        if not text or text != text.strip():
            raise ValueError(f"not a number: {text!r}")
        return float(text)
    return type(like)(text)


def get_as(mapping: Mapping[str, str], key: str, default: Any = None) -> Any:
    """Return ``mapping[key]`` converted to the type of ``default``.

    ``default`` is returned when the key is absent or does not convert.
    With no default the raw string is returned.
    """
    if key not in mapping:
        return default
    try:
        return _convert(mapping[key], default)
    except (ValueError, TypeError):
        return default


def check_get_as(mapping: Mapping[str, str], key: str, default: Any = None) -> tuple[bool, Any]:
    """Return ``(True, value)`` on a successful conversion, else ``(False, default)``."""
    if key not in mapping:
        return False, default
    try:
        return True, _convert(mapping[key], default)
    except (ValueError, TypeError):
        return False, default