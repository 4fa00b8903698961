"""Pytest fixtures shared by the viva test suite.

The DI container is booted once per session against the repository's
``config`` directory in the Test environment.
"""

from __future__ import annotations

import datetime
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest

import viva
from viva.core import TimestampProvider, VivaContainer
from viva.model import DeploymentEnvironment

START = datetime.datetime(2025, 3, 1, 9, 0, tzinfo=datetime.UTC)


@pytest.fixture(scope="session")
def container() -> t.Generator[VivaContainer]:
    """Boot the DI container for the test session."""
    ct = VivaContainer()
    root = Path(os.path.dirname(viva.__file__)).parent

    VivaContainer.boot(
        ct,
        debug=False,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


class Clock(object):
    """Deterministic clock; each call advances by ``step``."""

    def __init__(self, start: datetime.datetime = START, step: datetime.timedelta = datetime.timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime.datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def utcnow() -> TimestampProvider:
    return Clock()
