from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from repo_analyzer.clients.contracts import FetchResult, FetchState
from repo_analyzer.exceptions import ProviderError
from repo_analyzer.models.record import RepositoryRecord
from repo_analyzer.services.code_analysis import (
    CodeAnalysisGateway,
    format_directory_listing,
    select_sample_files,
    truncate_sample,
)

TREE = [
    {"path": "README.md", "type": "blob"},
    {"path": "node_modules", "type": "tree"},
    {"path": "node_modules/left-pad/index.js", "type": "blob"},
    {"path": "src", "type": "tree"},
    {"path": "src/app.py", "type": "blob"},
    {"path": "src/broken.py", "type": "blob"},
    {"path": "vendor/lib.php", "type": "blob"},
    {"path": "dist/app.min.js", "type": "blob"},
    {"path": "dist/App.Bundle.js", "type": "blob"},
    {"path": "src/util.ts", "type": "blob"},
    {"path": "src/big.go", "type": "blob"},
    {"path": "src/main.c", "type": "blob"},
    {"path": "src/extra.rb", "type": "blob"},
    {"path": "src/late.java", "type": "blob"},
    {"path": "docs", "type": "commit"},
]


def make_record() -> RepositoryRecord:
    return RepositoryRecord(
        id="99",
        full_name="acme/demo",
        description="A demo project",
        owner_avatar_url="",
        stars="1",
        forks="0",
        open_issues="0",
        primary_language="Python",
        created_at="January 5, 2020",
        last_updated="just now",
        code_quality_score=80,
        code_coverage_score=70,
        commit_frequency="1/week",
        active_contributors=12,
        languages=[],
        commit_activity=[],
        complex_files=[],
        dependencies=[],
    )


@dataclass
class FakeGitHubClient:
    tree: list[dict[str, Any]] = field(default_factory=lambda: list(TREE))
    contents: dict[str, Any] = field(default_factory=dict)
    fetched: list[str] = field(default_factory=list)

    async def get_tree(self, owner: str, repo: str, ref: str = "HEAD") -> FetchResult:
        return FetchResult(state=FetchState.OK, data=self.tree)

    async def get_content(self, owner: str, repo: str, path: str) -> FetchResult:
        self.fetched.append(path)
        value = self.contents.get(path, f"// {path}")
        if isinstance(value, Exception):
            raise value
        if isinstance(value, FetchResult):
            return value
        return FetchResult(state=FetchState.OK, data=value)


@dataclass
class FakeCompletionService:
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    async def analyze_code(self, directory_structure: str, code_content: str, target: str) -> str:
        self.calls.append((directory_structure, code_content, target))
        return "## SUMMARY\nLooks fine."


def test_directory_listing_labels_trees_and_blobs_only() -> None:
    listing = format_directory_listing(TREE[:5] + [{"path": "docs", "type": "commit"}])

    assert listing.splitlines() == [
        "file: README.md",
        "directory: node_modules",
        "file: node_modules/left-pad/index.js",
        "directory: src",
        "file: src/app.py",
    ]


def test_sample_selection_filters_and_caps_in_tree_order() -> None:
    selected = select_sample_files(TREE)

    assert selected == ["src/app.py", "src/broken.py", "src/util.ts", "src/big.go", "src/main.c"]
    assert not any("node_modules/" in path or "vendor/" in path for path in selected)


def test_truncate_sample_marks_cut_content() -> None:
    assert truncate_sample("x" * 1000) == "x" * 1000
    assert truncate_sample("x" * 1001) == "x" * 1000 + "..."


@pytest.mark.asyncio
async def test_analyze_file_sends_listing_and_fenced_content() -> None:
    github = FakeGitHubClient(contents={"src/app.py": "print('hello')"})
    completion = FakeCompletionService()

    result = await CodeAnalysisGateway(github, completion).analyze_file(make_record(), "src/app.py")

    assert result.file_name == "app.py"
    assert result.analysis.startswith("## SUMMARY")
    directory_structure, code_content, target = completion.calls[0]
    assert "directory: src" in directory_structure
    assert code_content == "File: src/app.py\n\n```\nprint('hello')\n```"
    assert target == "src/app.py"


@pytest.mark.asyncio
async def test_analyze_file_propagates_provider_failure() -> None:
    github = FakeGitHubClient(
        contents={"nope.py": FetchResult(state=FetchState.FAILED, status_code=404, error="Not Found")}
    )
    completion = FakeCompletionService()

    with pytest.raises(ProviderError):
        await CodeAnalysisGateway(github, completion).analyze_file(make_record(), "nope.py")

    assert completion.calls == []


@pytest.mark.asyncio
async def test_analyze_repository_samples_at_most_five_files_and_skips_failures() -> None:
    github = FakeGitHubClient(
        contents={
            "src/broken.py": RuntimeError("socket closed"),
            "src/util.ts": FetchResult(state=FetchState.FAILED, status_code=403, error="rate limited"),
            "src/big.go": "g" * 1500,
        }
    )
    completion = FakeCompletionService()

    result = await CodeAnalysisGateway(github, completion).analyze_repository(make_record())

    assert result.file_name == "acme/demo"
    assert github.fetched == ["src/app.py", "src/broken.py", "src/util.ts", "src/big.go", "src/main.c"]

    _, sample, target = completion.calls[0]
    assert target == "entire repository"
    assert "File: src/app.py" in sample
    assert "File: src/broken.py" not in sample
    assert "File: src/util.ts" not in sample
    assert "g" * 1000 + "...\n```" in sample
    assert "g" * 1001 not in sample
    assert "src/extra.rb" not in sample
