"""Tests for the shared helpers in viva.lib."""

from __future__ import annotations

import datetime
import io
import logging
from pathlib import Path

import click as stock_click
import pydantic as p
import pytest

import viva.lib.cli as click
from viva.lib.json import jsonable
from viva.lib.logging import ExtraFormatter
from viva.lib.logging.extra import record_extra
from viva.lib.util import dedupe, deep_update, round_half_up
from viva.model import DeploymentEnvironment, new_session_id, ProbeLayer, TargetBody


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("viva.test", logging.INFO, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestUtil(object):
    @pytest.mark.parametrize(
        "value,places,expected",
        [(2.25, 1, 2.3), (2.35, 1, 2.4), (2.5, 0, 3.0), (3.5, 0, 4.0), (0.125, 2, 0.13)],
    )
    def test_round_half_up(self, value: float, places: int, expected: float) -> None:
        assert round_half_up(value, places) == expected

    def test_deep_update(self) -> None:
        base = {"exam": {"analysis": {"enabled": True, "timeout_seconds": 30.0}, "default_body": "Both"}}
        merged = deep_update(base, {"exam": {"analysis": {"timeout_seconds": 2.0}}})

        assert merged == {"exam": {"analysis": {"enabled": True, "timeout_seconds": 2.0}, "default_body": "Both"}}
        assert base["exam"]["analysis"]["timeout_seconds"] == 30.0

    def test_dedupe(self) -> None:
        assert dedupe(["a", " b ", "", "a", "  ", "b"]) == ("a", "b")


class TestJSON(object):
    def test_jsonable(self) -> None:
        session_id = new_session_id()
        value = {
            "id": session_id,
            "at": datetime.datetime(2025, 3, 1, 9, 0, tzinfo=datetime.UTC),
            "took": datetime.timedelta(minutes=2),
            "layer": ProbeLayer.Clinical,
            "bodies": frozenset({TargetBody.CICM}),
        }

        assert jsonable(value) == {
            "id": str(session_id),
            "at": "2025-03-01T09:00:00+00:00",
            "took": 120.0,
            "layer": "clinical",
            "bodies": ["CICM"],
        }

    def test_unknown_type(self) -> None:
        with pytest.raises(TypeError):
            jsonable(object())


class TestExtraFormatter(object):
    def test_record_extra(self) -> None:
        assert record_extra(_record("hello", vertex="Fick", score=3)) == {"vertex": "Fick", "score": 3}
        assert record_extra(_record("hello")) == {}

    def test_appends_extra(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(levelname)s %(message)s", indent=False, stream=None)

        assert formatter.format(_record("probe recorded", vertex="Fick")) == 'INFO probe recorded {"vertex": "Fick"}'
        assert formatter.format(_record("plain")) == "INFO plain"

    def test_aligns_multiline_messages(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(levelname)s %(message)s", stream=io.StringIO())

        assert formatter.format(_record("first\nsecond")) == "INFO first\n     second"


class TestCLITypes(object):
    def test_enum_type(self) -> None:
        param = click.EnumType(TargetBody, case_sensitive=False)

        assert param.convert("cicm", None, None) is TargetBody.CICM
        assert param.convert(TargetBody.Both, None, None) is TargetBody.Both
        with pytest.raises(stock_click.BadParameter):
            param.convert("RCoA", None, None)

    def test_enum_type_case_sensitive(self) -> None:
        param = click.EnumType(DeploymentEnvironment)

        assert param.convert(DeploymentEnvironment.Test.value, None, None) is DeploymentEnvironment.Test
        with pytest.raises(stock_click.BadParameter):
            param.convert(DeploymentEnvironment.Test.value.upper(), None, None)

    def test_directory_url_type(self, tmp_path: Path) -> None:
        param = click.DirectoryURLType()

        url = param.convert(str(tmp_path), None, None)
        assert isinstance(url, p.FileUrl)
        assert url.path == str(tmp_path.absolute())
        assert param.convert(f"file://{tmp_path}", None, None).path == str(tmp_path)

        with pytest.raises(stock_click.BadParameter):
            param.convert(str(tmp_path / "missing"), None, None)
        with pytest.raises(stock_click.BadParameter):
            param.convert("https://example.com/config", None, None)
