"""Typed fetch contracts returned by the GitHub client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from repo_analyzer.exceptions import ProviderError

T = TypeVar("T")


class FetchState(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(slots=True)
class FetchResult(Generic[T]):
    """Outcome of one GitHub API call."""

    state: FetchState
    data: Optional[T] = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state != FetchState.FAILED

    def unwrap(self) -> Optional[T]:
        """Return the payload, raising ``ProviderError`` for failed fetches."""

        if self.state == FetchState.FAILED:
            raise ProviderError(self.error or "Unknown error", status_code=self.status_code, path=self.path)
        return self.data


RepoContract = FetchResult[dict[str, Any]]
LanguagesContract = FetchResult[dict[str, int]]
CommitActivityContract = FetchResult[list[dict[str, Any]]]
TreeContract = FetchResult[list[dict[str, Any]]]
ContentContract = FetchResult[str]
