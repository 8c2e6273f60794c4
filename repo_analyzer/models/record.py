"""Normalized repository record served to the presentation layer."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LanguageShare(CamelModel):
    name: str
    percentage: float
    color_hex: str


class CommitBucket(CamelModel):
    month_label: str
    count: int


class ComplexFile(CamelModel):
    path: str
    complexity_score: int
    level: Literal["High", "Medium", "Low"]


class Dependency(CamelModel):
    name: str
    version: str
    status: Literal["Up to date", "Update available", "Outdated"]


class RepositoryRecord(CamelModel):
    """One repository's cached analysis. Created once per full name, never updated."""

    id: str
    full_name: str
    description: str
    owner_avatar_url: str
    stars: str
    forks: str
    open_issues: str
    primary_language: str
    created_at: str
    last_updated: str
    code_quality_score: int
    code_coverage_score: int
    commit_frequency: str
    active_contributors: int
    languages: list[LanguageShare]
    commit_activity: list[CommitBucket]
    complex_files: list[ComplexFile]
    dependencies: list[Dependency]

    @property
    def owner(self) -> str:
        return self.full_name.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.full_name.split("/", 1)[-1]
