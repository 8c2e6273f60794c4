"""API and persistence models"""

from repo_analyzer.models.record import (
    CommitBucket,
    ComplexFile,
    Dependency,
    LanguageShare,
    RepositoryRecord,
)

__all__ = [
    "CommitBucket",
    "ComplexFile",
    "Dependency",
    "LanguageShare",
    "RepositoryRecord",
]
