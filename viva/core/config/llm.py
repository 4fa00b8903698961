"""LLM configuration settings."""

from __future__ import annotations

from viva.llm.provider import ProviderType

from .base import BaseSettings


class ModelSettings(BaseSettings):
    """Settings for a specific model."""

    provider: ProviderType = ProviderType.OpenAI
    model: str = "gpt-4o"
    max_tokens: int = 4096
    temperature: float = 1.0
    max_retries: int = 2
    timeout_seconds: float = 60.0


class ExamModels(BaseSettings):
    """Model configuration per examination task."""

    analysis: ModelSettings = ModelSettings(
        provider=ProviderType.OpenAI,
        model="gpt-4o-mini",
        max_tokens=1024,
        temperature=0.3,
    )


class LLMSettings(BaseSettings):
    """Root LLM configuration."""

    default_provider: ProviderType = ProviderType.OpenAI
    models: ExamModels = ExamModels()
