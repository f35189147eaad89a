"""Response models for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: str
    model: str
    host: str  # Ollama base URL, or the OpenAI API host name
    llm_report: str = Field(alias="llmReport")


class ModelsResponse(BaseModel):
    host: str
    models: list[Any] = []


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
