"""
Outcome of a single TMDB fetch.

A failed fetch never raises out of the client. It resolves to a FetchResult
carrying the failure reason so callers can tell "skipped because the fetch
failed" apart from a payload that is legitimately empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FetchResult:
    """
    Tagged result of one fetch operation.

    Exactly one of `payload` / `error` is set.
    """

    payload: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def success(cls, payload: dict[str, Any]) -> FetchResult:
        return cls(payload=payload)

    @classmethod
    def failure(cls, reason: str) -> FetchResult:
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None


@dataclass(frozen=True)
class GenreVocabulary:
    """
    Movie and TV genre lists as returned by /genre/{movie,tv}/list.

    A failed list resolves to an empty list plus its reason in `errors`.
    """

    movies: list[dict[str, Any]]
    tv: list[dict[str, Any]]
    errors: tuple[str, ...] = ()
