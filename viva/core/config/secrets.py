from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from viva.model import DeploymentEnvironment

from .base import BaseSettings as VivaBaseSettings


class OpenAISecrets(VivaBaseSettings):
    """OpenAI API secrets."""

    secret_key: p.Secret[str]


class AnthropicSecrets(VivaBaseSettings):
    """Anthropic API secrets."""

    api_key: p.Secret[str]


class LLMSecrets(VivaBaseSettings):
    """LLM vendor API secrets."""

    openai: OpenAISecrets | None = None
    anthropic: AnthropicSecrets | None = None


class Secrets(VivaBaseSettings):
    """Vendor credentials, read from ``VIVA_``-prefixed environment variables.

    Nested keys use ``__``, e.g. ``VIVA_LLM__OPENAI__SECRET_KEY``.
    """

    model_config = SettingsConfigDict(env_prefix="VIVA_", env_nested_delimiter="__", extra="ignore")

    env: DeploymentEnvironment

    llm: LLMSecrets | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings
