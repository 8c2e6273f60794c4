"""Analyzer services."""

from repo_analyzer.services.enrichment import Enricher, Enrichment, PlaceholderEnricher
from repo_analyzer.services.ingestion import IngestionService, parse_repository_url
from repo_analyzer.services.readme_generator import ReadmeOptions, generate_readme
from repo_analyzer.services.record_store import InMemoryRecordStore, RecordStore, SQLAlchemyRecordStore

__all__ = [
    "Enricher",
    "Enrichment",
    "PlaceholderEnricher",
    "IngestionService",
    "parse_repository_url",
    "ReadmeOptions",
    "generate_readme",
    "RecordStore",
    "InMemoryRecordStore",
    "SQLAlchemyRecordStore",
]
