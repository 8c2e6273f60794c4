"""Code analysis completions through OpenRouter's OpenAI-compatible API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from repo_analyzer.clients.log_sanitizer import sanitize_log_extra
from repo_analyzer.config.settings import settings
from repo_analyzer.exceptions import CompletionProviderError, NoCompletionError

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = """You are a senior software developer specializing in code analysis and explanation.
Your task is to analyze the provided code file within the context of the repository structure.

Your analysis MUST be formatted with clear, visually structured markdown:
- Use "##" for main section headers (like "## SUMMARY")
- Use "###" for sub-section headers
- Use bullet points ("- " prefix) for listing features or points
- Use numbered lists (1., 2., etc.) for steps or prioritized items
- Use **bold** for important concepts, class names, or method names
- Use code formatting `like this` for inline code references

Your analysis MUST include these clearly formatted sections:

## SUMMARY
A concise overview of the file's purpose and significance (3-5 sentences)

## PURPOSE & FUNCTIONALITY
Detailed explanation of what this code does

## KEY COMPONENTS
Important classes, functions, or modules with descriptions

## DEPENDENCIES & IMPORTS
External libraries and internal file dependencies

## CODE INTERACTIONS
How this code connects to other parts of the system

## RECOMMENDATIONS
Potential optimizations or improvements

Format your response professionally with consistent heading hierarchy, clean bullet points, and proper spacing between sections for easy scanning."""


def build_analysis_prompt(directory_structure: str, code_content: str, target: str) -> str:
    return (
        "I need you to analyze the following code file:\n\n"
        "Repository structure:\n"
        f"```\n{directory_structure}\n```\n\n"
        f"{code_content}\n\n"
        f"Please provide a detailed analysis of {target} using the required formatting structure."
    )


class CompletionService:
    """Single non-streaming chat completion per analysis request.

    The SDK's own retries are disabled; failures surface immediately as
    ``CompletionProviderError``.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.OPENROUTER_API_KEY
        self._model = model or settings.OPENROUTER_MODEL
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self._api_key:
            raise CompletionProviderError("OpenRouter API key is not configured", status_code=503)

        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=settings.OPENROUTER_BASE_URL,
            timeout=settings.COMPLETION_TIMEOUT_SECONDS,
            max_retries=0,
            default_headers={
                "HTTP-Referer": settings.OPENROUTER_REFERER,
                "X-Title": settings.OPENROUTER_TITLE,
            },
        )
        return self._client

    async def analyze_code(self, directory_structure: str, code_content: str, target: str) -> str:
        client = self._ensure_client()
        messages = [
            {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": build_analysis_prompt(directory_structure, code_content, target)},
        ]

        try:
            response = await client.chat.completions.create(model=self._model, messages=messages)
        except openai.APIStatusError as exc:
            logger.error(
                "OpenRouter API returned an error",
                extra=sanitize_log_extra(target=target, status_code=exc.status_code, error=str(exc)),
            )
            payload = exc.body if exc.body is not None else str(exc)
            raise CompletionProviderError(f"OpenRouter API error: {_describe(payload)}", payload=payload) from exc
        except openai.APIError as exc:
            logger.error(
                "OpenRouter request failed",
                extra=sanitize_log_extra(target=target, error=str(exc)),
            )
            raise CompletionProviderError(f"OpenRouter API error: {exc}", payload=str(exc)) from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise NoCompletionError()

        content = choices[0].message.content or ""
        logger.info(f"Received analysis for {target} ({len(content)} chars)")
        return content


def _describe(payload: Any) -> str:
    if isinstance(payload, dict):
        error = payload.get("error", payload)
        if isinstance(error, dict):
            return str(error.get("message") or error)
        return str(error)
    return str(payload)
