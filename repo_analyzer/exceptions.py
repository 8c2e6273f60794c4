"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations

from typing import Any, Optional


class RepoAnalyzerError(Exception):
    """Base exception for analyzer failures."""


class ValidationError(RepoAnalyzerError):
    """Raised when client input is malformed."""

    status_code = 400


class InvalidRepositoryUrlError(ValidationError):
    """Raised when a URL does not name a GitHub repository."""


class RecordNotFoundError(RepoAnalyzerError):
    """Raised when no cached record matches the requested id."""

    status_code = 404

    def __init__(self, message: str = "Repository not found"):
        super().__init__(message)


class ProviderError(RepoAnalyzerError):
    """Raised when a GitHub API call fails.

    ``status_code`` mirrors the upstream response and is ``None`` when no
    response was received (network failure, timeout).
    """

    def __init__(self, message: str, status_code: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.path = path


class CompletionProviderError(RepoAnalyzerError):
    """Raised when the chat-completion provider fails or is not configured."""

    def __init__(self, message: str, payload: Any = None, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.payload = payload
        self.status_code = status_code


class NoCompletionError(CompletionProviderError):
    """Raised when the provider answered without any choices."""

    def __init__(self, message: str = "No response from OpenRouter API", payload: Any = None):
        super().__init__(message, payload=payload, status_code=502)
