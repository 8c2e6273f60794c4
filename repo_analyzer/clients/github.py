"""Async GitHub REST client used as the repository metadata provider."""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

import httpx
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from repo_analyzer.clients.contracts import (
    CommitActivityContract,
    ContentContract,
    FetchResult,
    FetchState,
    LanguagesContract,
    RepoContract,
    TreeContract,
)
from repo_analyzer.clients.log_sanitizer import sanitize_log_extra
from repo_analyzer.config.settings import settings

logger = logging.getLogger(__name__)


class _StatsPendingError(Exception):
    """GitHub is still computing a statistics series (HTTP 202)."""


class GitHubClient:
    """Typed GitHub API client.

    Every call resolves to a ``FetchResult``; failures carry the upstream
    status code and GitHub's own error message so callers can mirror them.
    Nothing is retried except the ``202 Accepted`` polling of statistics
    endpoints, which is not a failure.
    """

    API_VERSION = "2022-11-28"
    ACCEPT_JSON = "application/vnd.github+json"

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        stats_max_attempts: Optional[int] = None,
        stats_backoff_seconds: Optional[float] = None,
        base_url: Optional[str] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self._token = token or settings.GITHUB_TOKEN
        self._timeout_seconds = timeout_seconds or settings.GITHUB_TIMEOUT_SECONDS
        self._stats_max_attempts = stats_max_attempts or settings.GITHUB_STATS_MAX_ATTEMPTS
        self._stats_backoff_seconds = (
            settings.GITHUB_STATS_BACKOFF_SECONDS if stats_backoff_seconds is None else stats_backoff_seconds
        )
        self._base_url = base_url or settings.GITHUB_API_URL
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_repo(self, owner: str, repo: str) -> RepoContract:
        return await self._request(f"/repos/{owner}/{repo}")

    async def get_languages(self, owner: str, repo: str) -> LanguagesContract:
        result = await self._request(f"/repos/{owner}/{repo}/languages")
        if result.state == FetchState.OK and not result.data:
            return FetchResult(state=FetchState.EMPTY, data={}, status_code=result.status_code, path=result.path)
        return result

    async def get_commit_activity(self, owner: str, repo: str) -> CommitActivityContract:
        """Weekly commit totals for the last year, oldest week first."""

        path = f"/repos/{owner}/{repo}/stats/commit_activity"
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._stats_max_attempts),
                wait=wait_exponential(multiplier=self._stats_backoff_seconds, max=8),
                retry=retry_if_exception_type(_StatsPendingError),
            ):
                with attempt:
                    result = await self._request(path)
                    if result.status_code == 202:
                        raise _StatsPendingError(path)
        except RetryError:
            logger.info(
                "GitHub commit statistics still being computed",
                extra=sanitize_log_extra(path=path, attempts=self._stats_max_attempts),
            )
            return FetchResult(state=FetchState.EMPTY, data=[], status_code=202, path=path)

        if result.state == FetchState.OK and not isinstance(result.data, list):
            return FetchResult(state=FetchState.EMPTY, data=[], status_code=result.status_code, path=path)
        return result

    async def get_tree(self, owner: str, repo: str, ref: str = "HEAD") -> TreeContract:
        """Recursive git tree entries (``{path, type, ...}``) for ``ref``."""

        result = await self._request(f"/repos/{owner}/{repo}/git/trees/{ref}", params={"recursive": 1})
        if result.state != FetchState.OK:
            return result

        payload = result.data if isinstance(result.data, dict) else {}
        entries = payload.get("tree") if isinstance(payload.get("tree"), list) else []
        if payload.get("truncated"):
            logger.info("GitHub tree listing truncated", extra=sanitize_log_extra(owner=owner, repo=repo))
        state = FetchState.OK if entries else FetchState.EMPTY
        return FetchResult(state=state, data=entries, status_code=result.status_code, path=result.path)

    async def list_contents(self, owner: str, repo: str, path: str = "") -> FetchResult[Any]:
        """Raw `/contents` payload: a list for directories, an object for files."""

        return await self._request(f"/repos/{owner}/{repo}/contents/{path.strip('/')}")

    async def get_content(self, owner: str, repo: str, path: str) -> ContentContract:
        """Decoded text of a single file."""

        response = await self.list_contents(owner, repo, path)
        if response.state != FetchState.OK:
            return response

        payload = response.data if isinstance(response.data, dict) else {}
        encoded = payload.get("content") if isinstance(payload.get("content"), str) else ""
        encoding = payload.get("encoding") if isinstance(payload.get("encoding"), str) else ""

        if not encoded:
            return FetchResult(state=FetchState.EMPTY, data="", status_code=response.status_code, path=response.path)

        if encoding == "base64":
            try:
                decoded = base64.b64decode(encoded).decode("utf-8", errors="replace")
            except ValueError as exc:
                return FetchResult(
                    state=FetchState.FAILED,
                    error=f"Failed to decode base64 content: {exc}",
                    status_code=response.status_code,
                    path=response.path,
                )
        else:
            decoded = encoded

        return FetchResult(state=FetchState.OK, data=decoded, status_code=response.status_code, path=response.path)

    async def _request(self, path: str, *, params: Optional[dict[str, Any]] = None) -> FetchResult[Any]:
        client = await self._ensure_client()

        try:
            response = await client.get(path, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("GitHub request timed out", extra=sanitize_log_extra(path=path, error=str(exc)))
            return FetchResult(state=FetchState.FAILED, error="Request to GitHub timed out", path=path)
        except httpx.HTTPError as exc:
            logger.warning("GitHub request failed", extra=sanitize_log_extra(path=path, error=str(exc)))
            return FetchResult(state=FetchState.FAILED, error=str(exc), path=path)

        if response.status_code == 202:
            return FetchResult(state=FetchState.EMPTY, data=None, status_code=202, path=path)

        if 300 <= response.status_code < 400:
            # Followable redirects never reach here; this is a 3xx without a Location
            logger.warning(
                "GitHub API answered with an unfollowed redirect",
                extra=sanitize_log_extra(path=path, status_code=response.status_code),
            )
            return FetchResult(
                state=FetchState.FAILED,
                error=self._error_message(response) or "Unexpected redirect",
                status_code=response.status_code,
                path=path,
            )

        if response.is_error:
            error = self._error_message(response)
            logger.warning(
                "GitHub API returned an error",
                extra=sanitize_log_extra(path=path, params=params, status_code=response.status_code, error=error),
            )
            return FetchResult(state=FetchState.FAILED, error=error, status_code=response.status_code, path=path)

        if response.status_code == 204 or not response.content:
            return FetchResult(state=FetchState.EMPTY, data=None, status_code=response.status_code, path=path)

        return FetchResult(state=FetchState.OK, data=response.json(), status_code=response.status_code, path=path)

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return payload["message"]
        return None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        headers = {
            "Accept": self.ACCEPT_JSON,
            "User-Agent": settings.USER_AGENT,
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
        )
        return self._client
