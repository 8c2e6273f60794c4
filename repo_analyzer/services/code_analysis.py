"""Code analysis of one file or a sample of a whole repository."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any

from repo_analyzer.models.record import RepositoryRecord

logger = logging.getLogger(__name__)

CODE_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".php", ".go", ".rb", ".c", ".cpp")
VENDOR_DIRECTORIES = ("node_modules/", "vendor/")
GENERATED_FILE_PATTERN = re.compile(r"\.(min|bundle|compiled)\.", re.IGNORECASE)
MAX_SAMPLE_FILES = 5
MAX_SAMPLE_CHARS = 1000
REPOSITORY_SCOPE = "entire repository"


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    file_name: str
    analysis: str


def format_directory_listing(tree: list[dict[str, Any]]) -> str:
    """One ``directory: path`` or ``file: path`` line per tree entry."""

    lines = []
    for item in tree:
        kind = item.get("type")
        if kind == "tree":
            lines.append(f"directory: {item.get('path', '')}")
        elif kind == "blob":
            lines.append(f"file: {item.get('path', '')}")
    return "\n".join(lines)


def is_sample_candidate(item: dict[str, Any]) -> bool:
    path = item.get("path") or ""
    return (
        item.get("type") == "blob"
        and path.endswith(CODE_EXTENSIONS)
        and not any(directory in path for directory in VENDOR_DIRECTORIES)
        and not GENERATED_FILE_PATTERN.search(path)
    )


def select_sample_files(tree: list[dict[str, Any]], limit: int = MAX_SAMPLE_FILES) -> list[str]:
    return [item["path"] for item in tree if is_sample_candidate(item)][:limit]


def truncate_sample(content: str, limit: int = MAX_SAMPLE_CHARS) -> str:
    return content[:limit] + ("..." if len(content) > limit else "")


class CodeAnalysisGateway:
    """Fetch code from GitHub and hand it to the completion service."""

    def __init__(self, github_client: Any, completion_service: Any) -> None:
        self._client = github_client
        self._completion = completion_service

    async def analyze_file(self, record: RepositoryRecord, file_path: str) -> AnalysisResult:
        owner, repo = record.owner, record.name

        content_result, tree_result = await asyncio.gather(
            self._client.get_content(owner, repo, file_path),
            self._client.get_tree(owner, repo),
        )
        file_content = content_result.unwrap() or ""
        directory_structure = format_directory_listing(tree_result.unwrap() or [])

        code_content = f"File: {file_path}\n\n```\n{file_content}\n```"
        analysis = await self._completion.analyze_code(directory_structure, code_content, file_path)
        return AnalysisResult(file_name=file_path.split("/")[-1] or file_path, analysis=analysis)

    async def analyze_repository(self, record: RepositoryRecord) -> AnalysisResult:
        owner, repo = record.owner, record.name

        tree = (await self._client.get_tree(owner, repo)).unwrap() or []
        directory_structure = format_directory_listing(tree)
        sample_code = await self.collect_sample(owner, repo, select_sample_files(tree))

        analysis = await self._completion.analyze_code(directory_structure, sample_code, REPOSITORY_SCOPE)
        return AnalysisResult(file_name=record.full_name, analysis=analysis)

    async def collect_sample(self, owner: str, repo: str, paths: list[str]) -> str:
        """Fetch sample files; a file that cannot be fetched is left out."""

        results = await asyncio.gather(
            *(self._client.get_content(owner, repo, path) for path in paths),
            return_exceptions=True,
        )

        blocks: list[str] = []
        for path, result in zip(paths, results):
            if isinstance(result, Exception):
                logger.error(f"Error fetching file {path}: {result}")
                continue
            if not result.ok:
                logger.error(f"Error fetching file {path}: {result.error} (status={result.status_code})")
                continue
            blocks.append(f"\nFile: {path}\n```\n{truncate_sample(result.data or '')}\n```\n")

        logger.info(f"Sampled {len(blocks)}/{len(paths)} files from {owner}/{repo}")
        return "".join(blocks)
