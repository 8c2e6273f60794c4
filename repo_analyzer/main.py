"""FastAPI application entry point"""

from typing import Any, AsyncIterator, Optional
import logging

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from repo_analyzer import __version__
from repo_analyzer.clients.github import GitHubClient
from repo_analyzer.config.settings import settings
from repo_analyzer.exceptions import (
    CompletionProviderError,
    ProviderError,
    RecordNotFoundError,
    ValidationError,
)
from repo_analyzer.models.api import (
    AnalysisResponse,
    AnalyzeFileRequest,
    AnalyzeRepositoryRequest,
    AnalyzeRequest,
    ReadmeResponse,
)
from repo_analyzer.models.record import RepositoryRecord
from repo_analyzer.services.code_analysis import CodeAnalysisGateway
from repo_analyzer.services.completion import CompletionService
from repo_analyzer.services.enrichment import Enricher, PlaceholderEnricher
from repo_analyzer.services.ingestion import IngestionService
from repo_analyzer.services.readme_generator import ReadmeOptions, generate_readme
from repo_analyzer.services.record_store import RecordStore, build_record_store

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Fetches GitHub repository statistics, generates READMEs and explains code",
    version=__version__,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-wide record cache; swapped out through dependency overrides in tests
record_store = build_record_store(settings.RECORD_STORE_URL)
enricher = PlaceholderEnricher()
# One OpenRouter client (and its connection pool) for the whole process
completion_service = CompletionService()


def get_record_store() -> RecordStore:
    return record_store


def get_enricher() -> Enricher:
    return enricher


async def get_github_client() -> AsyncIterator[Any]:
    async with GitHubClient() as client:
        yield client


def get_completion_service() -> Any:
    return completion_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _failure_response(exc: Exception, generic_message: str) -> JSONResponse:
    """Map a failure to ``{"message": ...}`` without leaking internals."""

    if isinstance(exc, (ValidationError, RecordNotFoundError)):
        return _error(exc.status_code, str(exc))
    if isinstance(exc, ProviderError):
        if exc.status_code is None:
            logger.error(f"GitHub request failed without a response: {exc.message}")
            return _error(500, generic_message)
        return _error(exc.status_code, f"GitHub API error: {exc.message or 'Unknown error'}")
    if isinstance(exc, CompletionProviderError):
        return _error(exc.status_code, exc.message)

    logger.error(f"{generic_message}: {exc}", exc_info=True)
    return _error(500, generic_message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first body violation as a 400."""

    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return _error(400, message)


router = APIRouter(prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint"""
    prefix = settings.API_PREFIX
    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": f"{prefix}/health",
            "analyze": f"POST {prefix}/analyze",
            "readme": f"POST {prefix}/readme/{{id}}",
            "files": f"GET {prefix}/files/{{owner}}/{{repo}}?path=",
            "analyze_file": f"POST {prefix}/analyze-file",
            "analyze_repository_code": f"POST {prefix}/analyze-repository-code",
        },
    }


@router.get("/health")
async def health_check():
    """Health check endpoint for serverless platforms"""
    return {
        "status": "healthy",
        "service": "repo-analyzer",
        "version": __version__,
        "completion_configured": bool(settings.OPENROUTER_API_KEY),
    }


@router.post("/analyze", response_model=RepositoryRecord)
async def analyze_repository(
    body: AnalyzeRequest,
    store: RecordStore = Depends(get_record_store),
    github: Any = Depends(get_github_client),
    record_enricher: Enricher = Depends(get_enricher),
):
    """Return the cached record for a repository URL, ingesting it on first use"""
    try:
        service = IngestionService(github, store, enricher=record_enricher)
        return await service.ingest(body.url)
    except Exception as e:
        return _failure_response(e, "Failed to analyze repository")


@router.post("/readme/{record_id}", response_model=ReadmeResponse)
async def generate_readme_for(
    record_id: str,
    options: Optional[ReadmeOptions] = Body(default=None),
    store: RecordStore = Depends(get_record_store),
):
    """Generate README markdown from a cached record"""
    try:
        record = store.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError()
        return ReadmeResponse(content=generate_readme(record, options), filename="README.md")
    except Exception as e:
        return _failure_response(e, "Failed to generate README")


@router.get("/files/{owner}/{repo}")
async def list_repository_files(
    owner: str,
    repo: str,
    path: str = "",
    github: Any = Depends(get_github_client),
):
    """Pass GitHub's directory listing through unchanged"""
    try:
        result = await github.list_contents(owner, repo, path)
        return JSONResponse(content=result.unwrap())
    except Exception as e:
        return _failure_response(e, "Failed to fetch repository files")


@router.post("/analyze-file", response_model=AnalysisResponse)
async def analyze_file(
    body: AnalyzeFileRequest,
    store: RecordStore = Depends(get_record_store),
    github: Any = Depends(get_github_client),
    completion: Any = Depends(get_completion_service),
):
    """Explain one file of a cached repository"""
    try:
        record = store.get_by_id(body.repository_id)
        if record is None:
            raise RecordNotFoundError()
        logger.info(f"Analyzing {body.file_path} in {record.full_name}")
        result = await CodeAnalysisGateway(github, completion).analyze_file(record, body.file_path)
        return AnalysisResponse(file_name=result.file_name, analysis=result.analysis)
    except Exception as e:
        return _failure_response(e, "Failed to analyze file")


@router.post("/analyze-repository-code", response_model=AnalysisResponse)
async def analyze_repository_code(
    body: AnalyzeRepositoryRequest,
    store: RecordStore = Depends(get_record_store),
    github: Any = Depends(get_github_client),
    completion: Any = Depends(get_completion_service),
):
    """Explain a repository from its tree and a small code sample"""
    try:
        record = store.get_by_id(body.repository_id)
        if record is None:
            raise RecordNotFoundError()
        logger.info(f"Analyzing repository code of {record.full_name}")
        result = await CodeAnalysisGateway(github, completion).analyze_repository(record)
        return AnalysisResponse(file_name=result.file_name, analysis=result.analysis)
    except Exception as e:
        return _failure_response(e, "Failed to analyze repository")


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "repo_analyzer.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
