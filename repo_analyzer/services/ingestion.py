"""Repository ingestion: fetch GitHub metadata, normalize it, cache the record."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from repo_analyzer.exceptions import InvalidRepositoryUrlError
from repo_analyzer.models.record import CommitBucket, LanguageShare, RepositoryRecord
from repo_analyzer.services.enrichment import Enricher, PlaceholderEnricher
from repo_analyzer.services.formatting import (
    format_long_date,
    format_magnitude,
    month_label,
    relative_time_since,
    round_half_up,
)
from repo_analyzer.services.record_store import RecordStore

logger = logging.getLogger(__name__)

GITHUB_HOSTS = ("github.com", "www.github.com")
INVALID_URL_MESSAGE = "Invalid GitHub repository URL. Format should be: https://github.com/owner/repo"

LANGUAGE_COLORS = {
    "JavaScript": "#f1e05a",
    "TypeScript": "#3178c6",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "Python": "#3572A5",
    "Java": "#b07219",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "C": "#555555",
    "C++": "#f34b7d",
    "C#": "#178600",
}
DEFAULT_LANGUAGE_COLOR = "#808080"

CHART_WEEKS = 7
FREQUENCY_WEEKS = 12


def parse_repository_url(url: str) -> tuple[str, str]:
    """Extract ``(owner, name)`` from the last two path segments of a GitHub URL."""

    parsed = urlparse((url or "").strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidRepositoryUrlError("Invalid URL format")
    if (parsed.hostname or "").lower() not in GITHUB_HOSTS:
        raise InvalidRepositoryUrlError("URL must be a GitHub repository")

    segments = parsed.path.rstrip("/").split("/")
    if len(segments) < 3:
        raise InvalidRepositoryUrlError(INVALID_URL_MESSAGE)

    owner, name = segments[-2], segments[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not owner or not name:
        raise InvalidRepositoryUrlError(INVALID_URL_MESSAGE)
    return owner, name


def compute_language_shares(byte_counts: dict[str, int]) -> list[LanguageShare]:
    total = sum(max(int(count or 0), 0) for count in byte_counts.values())
    return [
        LanguageShare(
            name=name,
            percentage=max(int(count or 0), 0) / max(total, 1) * 100,
            color_hex=LANGUAGE_COLORS.get(name, DEFAULT_LANGUAGE_COLOR),
        )
        for name, count in byte_counts.items()
    ]


def bucket_commit_activity(weeks: list[dict[str, Any]], now: datetime) -> list[CommitBucket]:
    """Label the last seven weekly totals by calendar month, oldest first.

    Missing weeks are zero-filled in front so the chart always has seven
    points.
    """

    recent = [week for week in weeks if isinstance(week, dict) and "week" in week][-CHART_WEEKS:]
    buckets = [
        CommitBucket(month_label=month_label(int(week["week"])), count=int(week.get("total") or 0))
        for week in recent
    ]

    week_seconds = int(timedelta(weeks=1).total_seconds())
    padding = CHART_WEEKS - len(buckets)
    if recent:
        anchor = int(recent[0]["week"])
        offsets = range(padding, 0, -1)
    else:
        anchor = int(now.timestamp())
        offsets = range(padding - 1, -1, -1)
    filler = [CommitBucket(month_label=month_label(anchor - offset * week_seconds), count=0) for offset in offsets]
    return filler + buckets


def compute_commit_frequency(weeks: list[dict[str, Any]]) -> str:
    recent = [week for week in weeks if isinstance(week, dict)][-FREQUENCY_WEEKS:]
    total = sum(int(week.get("total") or 0) for week in recent)
    average = total / (len(recent) or 1)
    return f"{round_half_up(average)}/week"


class IngestionService:
    """Resolve a repository URL to a cached ``RepositoryRecord``."""

    def __init__(
        self,
        github_client: Any,
        store: RecordStore,
        *,
        enricher: Optional[Enricher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._client = github_client
        self._store = store
        self._enricher = enricher or PlaceholderEnricher()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def ingest(self, repository_url: str) -> RepositoryRecord:
        owner, name = parse_repository_url(repository_url)

        cached = self._store.get(f"{owner}/{name}")
        if cached is not None:
            logger.info(f"Serving cached record for {owner}/{name}")
            return cached

        logger.info(f"Fetching repository data for {owner}/{name}")
        repo_result, languages_result, activity_result = await asyncio.gather(
            self._client.get_repo(owner, name),
            self._client.get_languages(owner, name),
            self._client.get_commit_activity(owner, name),
        )

        repo_info = repo_result.unwrap() or {}
        languages = languages_result.unwrap() or {}
        activity = activity_result.unwrap() or []

        record = self._build_record(repo_info, languages, activity, fallback_full_name=f"{owner}/{name}")
        self._store.put(record)
        logger.info(f"Cached record {record.full_name} (id={record.id})")
        return record

    def _build_record(
        self,
        repo_info: dict[str, Any],
        languages: dict[str, int],
        activity: list[dict[str, Any]],
        *,
        fallback_full_name: str,
    ) -> RepositoryRecord:
        now = self._clock()
        repo_name = repo_info.get("name") or fallback_full_name.split("/")[-1]
        language = repo_info.get("language") or "Unknown"
        enrichment = self._enricher.enrich(repo_name)

        return RepositoryRecord(
            id=str(repo_info.get("id", "")),
            full_name=repo_info.get("full_name") or fallback_full_name,
            description=repo_info.get("description") or f"A {language} repository",
            owner_avatar_url=(repo_info.get("owner") or {}).get("avatar_url") or "",
            stars=format_magnitude(int(repo_info.get("stargazers_count") or 0)),
            forks=format_magnitude(int(repo_info.get("forks_count") or 0)),
            open_issues=format_magnitude(int(repo_info.get("open_issues_count") or 0)),
            primary_language=language,
            created_at=format_long_date(repo_info["created_at"]) if repo_info.get("created_at") else "",
            last_updated=relative_time_since(repo_info["updated_at"], now) if repo_info.get("updated_at") else "",
            code_quality_score=enrichment.code_quality_score,
            code_coverage_score=enrichment.code_coverage_score,
            commit_frequency=compute_commit_frequency(activity),
            active_contributors=enrichment.active_contributors,
            languages=compute_language_shares(languages),
            commit_activity=bucket_commit_activity(activity, now),
            complex_files=enrichment.complex_files,
            dependencies=enrichment.dependencies,
        )
