"""Exam session and background analyzer providers."""

from __future__ import annotations

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Factory, Provider
from langchain_core.language_models import BaseChatModel

from viva.core.provider import TimestampProvider
from viva.exam import ExamSession
from viva.llm import BackgroundAnalyzer


class ExamContainer(DeclarativeContainer):
    config: Configuration = Configuration()

    utcnow: Provider[TimestampProvider] = Dependency()
    model: Provider[BaseChatModel] = Dependency()
    env: Provider[jinja2.Environment] = Dependency()

    session: Provider[ExamSession] = Factory(ExamSession, utcnow=utcnow)
    analyzer: Provider[BackgroundAnalyzer] = Factory(
        BackgroundAnalyzer,
        model,
        env,
        timeout_seconds=config.analysis.timeout_seconds,
        utcnow=utcnow,
    )
