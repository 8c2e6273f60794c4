"""Request and response bodies of the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


def _required(value: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("required", f"{label} is required")
    return value.strip()


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(RequestModel):
    url: str = Field(default="", validate_default=True)

    @field_validator("url")
    @classmethod
    def _url_present(cls, value: str) -> str:
        return _required(value, "URL")


class AnalyzeFileRequest(RequestModel):
    repository_id: str = Field(default="", validate_default=True)
    file_path: str = Field(default="", validate_default=True)

    @field_validator("repository_id")
    @classmethod
    def _repository_id_present(cls, value: str) -> str:
        return _required(value, "Repository ID")

    @field_validator("file_path")
    @classmethod
    def _file_path_present(cls, value: str) -> str:
        return _required(value, "File path")


class AnalyzeRepositoryRequest(RequestModel):
    repository_id: str = Field(default="", validate_default=True)

    @field_validator("repository_id")
    @classmethod
    def _repository_id_present(cls, value: str) -> str:
        return _required(value, "Repository ID")


class ReadmeResponse(BaseModel):
    content: str
    filename: str = "README.md"


class AnalysisResponse(RequestModel):
    file_name: str
    analysis: str
