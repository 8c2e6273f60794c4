"""Application settings and configuration"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "GitHub Repository Analyzer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    USER_AGENT: str = "RepoAnalyzer/1.0"

    # GitHub API (metadata provider)
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT_SECONDS: float = 30.0
    # /stats/* endpoints answer 202 while GitHub computes the series
    GITHUB_STATS_MAX_ATTEMPTS: int = 3
    GITHUB_STATS_BACKOFF_SECONDS: float = 1.0

    # OpenRouter (completion provider, OpenAI-compatible)
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_MODEL: str = "anthropic/claude-3-haiku"
    OPENROUTER_REFERER: str = "https://github.com/analyzer"
    OPENROUTER_TITLE: str = "GitHub Repository Analyzer"
    COMPLETION_TIMEOUT_SECONDS: float = 60.0

    # Record cache; unset keeps records in process memory only
    RECORD_STORE_URL: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
