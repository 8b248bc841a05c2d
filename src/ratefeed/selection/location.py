"""Addressable location abstraction.

A location is a small key-value store read once at startup and rewritten in
place after each selection change. Rewriting never adds a navigation step.
"""

from collections.abc import Mapping
from typing import Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


class LocationStore(Protocol):
    """Key-value view of the page's query parameters."""

    def read_all(self) -> Mapping[str, str]: ...

    def write_all(self, params: Mapping[str, str]) -> None: ...


class MemoryLocation:
    """Dict-backed location. Counts in-place replacements."""

    def __init__(self, params: Mapping[str, str] | None = None) -> None:
        self._params: dict[str, str] = dict(params or {})
        self.replace_count = 0

    def read_all(self) -> Mapping[str, str]:
        return dict(self._params)

    def write_all(self, params: Mapping[str, str]) -> None:
        self._params.update(params)
        self.replace_count += 1


class QueryStringLocation:
    """Location backed by a URL.

    ``write_all`` sets the given keys and keeps every other query parameter,
    replacing the URL in place. For repeated keys the first value wins and
    later duplicates are dropped.
    """

    def __init__(self, url: str = "/") -> None:
        parts = urlsplit(url)
        self._scheme = parts.scheme
        self._netloc = parts.netloc
        self._path = parts.path or "/"
        self._fragment = parts.fragment
        self._params: dict[str, str] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            self._params.setdefault(key, value)
        self.replace_count = 0

    @property
    def query(self) -> str:
        return urlencode(self._params)

    @property
    def url(self) -> str:
        return urlunsplit((self._scheme, self._netloc, self._path, self.query, self._fragment))

    def read_all(self) -> Mapping[str, str]:
        return dict(self._params)

    def write_all(self, params: Mapping[str, str]) -> None:
        self._params.update(params)
        self.replace_count += 1
