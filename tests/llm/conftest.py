"""Fixtures for LLM tests."""

from __future__ import annotations

import typing as t
from unittest.mock import AsyncMock, MagicMock

import jinja2
import pytest

from viva.core import VivaContainer
from viva.llm import DeepVerdict


@pytest.fixture(scope="session")
def llm_env(container: VivaContainer) -> jinja2.Environment:
    """Provide the LLM Jinja2 environment from the DI container."""
    return container.template().llm()


ChatModelFactory = t.Callable[..., tuple[MagicMock, MagicMock]]


@pytest.fixture
def make_chat_model() -> ChatModelFactory:
    """Build a chat model whose structured-output runnable returns ``result``.

    The factory returns the model and the structured runnable so tests can
    inspect the calls.
    """

    def factory(result: t.Any = None, side_effect: t.Any = None) -> tuple[MagicMock, MagicMock]:
        mock_structured = MagicMock()
        mock_structured.ainvoke = AsyncMock(return_value=result, side_effect=side_effect)

        mock_model = MagicMock()
        mock_model.with_structured_output.return_value = mock_structured
        return mock_model, mock_structured

    return factory


@pytest.fixture
def verdict() -> DeepVerdict:
    return DeepVerdict(
        adjusted_score=4,
        adjusted_confidence=True,
        misconceptions=[],
        depth_reached="mechanism",
        follow_up_angles=["What happens to flow if radius halves?"],
        reasoning="Correct equation and a sound mechanistic account.",
    )
