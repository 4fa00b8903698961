from __future__ import annotations

import datetime
import sys
import types
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import viva
from viva.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider, TimestampProvider
from .exam import ExamContainer
from .llm import LLMContainer
from .template import TemplateContainer


class BootConfiguration(BaseModel):
    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    override: tuple[str, ...]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class VivaContainer(DeclarativeContainer):
    """Application root; nothing below is usable until ``boot`` has run."""

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    utcnow: Provider[TimestampProvider] = Object(_utcnow)

    template: Provider[TemplateContainer] = Container(TemplateContainer, config=config.template)
    llm: Provider[LLMContainer] = Container(LLMContainer, config=config.llm, secrets=secrets.llm)
    exam: Provider[ExamContainer] = Container(
        ExamContainer,
        config=config.exam,
        utcnow=utcnow,
        model=llm.analysis_model,
        env=template.llm,
    )

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: VivaContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        """Load settings and secrets, start logging and wire injection targets."""
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        boot = BootConfiguration(debug=debug, env=env, config_root=config_root, override=override or ())

        settings = Settings(env=env, root=config_root, override=boot.override)
        ct.config.from_pydantic(settings)
        # unset keys read as None downstream
        ct.secrets.from_pydantic(Secrets(env=env), exclude_none=True)
        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(viva.__file__).parent.parent)

        modules: list[str | types.ModuleType] = [
            mod for name, mod in sys.modules.items() if name.startswith("viva.core.container.")
        ]
        ct.wire(packages=["viva.cli"], modules=[*modules, *(wiring or ())])

        logger = ct.logging().get_logger()
        for option in boot.override:
            key, _, value = option.partition("=")
            logger.info("overriding configuration parameter", extra={"key": key, "value": value})
        logger.debug("configuration finished", extra={"config": str(config_root), "env": env.value})
        ct._boot_config.override(boot)
