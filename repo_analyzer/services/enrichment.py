"""Quality metrics attached to a record beyond what GitHub reports.

No analyzer runs against the code yet; ``PlaceholderEnricher`` produces
bounded random scores and fixed-shape file and dependency lists so the
presentation layer has something to render.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Protocol

from repo_analyzer.models.record import ComplexFile, Dependency


@dataclass(frozen=True, slots=True)
class Enrichment:
    code_quality_score: int
    code_coverage_score: int
    active_contributors: int
    complex_files: list[ComplexFile] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)


class Enricher(Protocol):
    def enrich(self, repo_name: str) -> Enrichment: ...


class PlaceholderEnricher:
    """Randomized-but-bounded stand-in metrics."""

    QUALITY_RANGE = (70, 94)
    COVERAGE_RANGE = (60, 89)
    CONTRIBUTORS_RANGE = (10, 499)

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def enrich(self, repo_name: str) -> Enrichment:
        return Enrichment(
            code_quality_score=self._rng.randint(*self.QUALITY_RANGE),
            code_coverage_score=self._rng.randint(*self.COVERAGE_RANGE),
            active_contributors=self._rng.randint(*self.CONTRIBUTORS_RANGE),
            complex_files=[
                ComplexFile(path=f"src/core/{repo_name}Core.js", complexity_score=85, level="High"),
                ComplexFile(path=f"src/components/{repo_name}Component.js", complexity_score=65, level="Medium"),
                ComplexFile(path="src/utils/helpers.js", complexity_score=45, level="Low"),
            ],
            dependencies=[
                Dependency(name="react", version="^18.2.0", status="Up to date"),
                Dependency(name="lodash", version="^4.17.21", status="Up to date"),
                Dependency(name="axios", version="^0.21.1", status="Update available"),
            ],
        )
