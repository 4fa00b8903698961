"""LLM container for dependency injection."""

from __future__ import annotations

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Provider, Singleton
from langchain_core.language_models import BaseChatModel

from viva.core.config import ModelSettings
from viva.llm import ProviderType


def _api_key(provider: ProviderType, key: p.Secret[str] | None) -> p.SecretStr:
    if key is None:
        raise ValueError(f"no API key configured for the {provider.value} provider")
    return p.SecretStr(key.get_secret_value())


def create_chat_model(
    config: ModelSettings,
    *,
    openai_api_key: p.Secret[str] | None = None,
    anthropic_api_key: p.Secret[str] | None = None,
) -> BaseChatModel:
    """Build the chat model named by ``config``.

    Vendor integrations are imported only when selected, and the key for the
    selected vendor must be present.
    """
    match config.provider:
        case ProviderType.OpenAI:
            api_key = _api_key(config.provider, openai_api_key)
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(
                model=config.model,
                api_key=api_key,
                temperature=config.temperature,
                max_completion_tokens=config.max_tokens,
                max_retries=config.max_retries,
                timeout=config.timeout_seconds,
            )
        case ProviderType.Anthropic:
            api_key = _api_key(config.provider, anthropic_api_key)
            from langchain_anthropic import ChatAnthropic

            return ChatAnthropic(
                model_name=config.model,
                api_key=api_key,
                temperature=config.temperature,
                max_tokens_to_sample=config.max_tokens,
                max_retries=config.max_retries,
                timeout=config.timeout_seconds,
                stop=None,
            )
    raise ValueError(f"unsupported provider: {config.provider}")


class LLMContainer(DeclarativeContainer):
    """Chat models used by the slow evaluation path."""

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    analysis_model: Provider[BaseChatModel] = Singleton(
        create_chat_model,
        config.models.analysis.as_(ModelSettings),
        openai_api_key=secrets.openai.secret_key,
        anthropic_api_key=secrets.anthropic.api_key,
    )
