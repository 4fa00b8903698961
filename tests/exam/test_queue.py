"""Tests for vertex queue construction."""

from __future__ import annotations

import pytest

from viva.exam import build_queue, CATALOG, InvalidBodyError, parse_body
from viva.model import TargetBody


class TestParseBody(object):
    def test_accepts_enum(self) -> None:
        assert parse_body(TargetBody.CICM) is TargetBody.CICM

    def test_case_insensitive(self) -> None:
        assert parse_body("anzca") is TargetBody.ANZCA
        assert parse_body(" both ") is TargetBody.Both

    def test_rejects_unknown_body(self) -> None:
        with pytest.raises(InvalidBodyError):
            parse_body("RACP")


class TestBuildQueue(object):
    """Tests for build_queue()."""

    def test_all_domains_both_bodies_keeps_catalog_order(self) -> None:
        queue, states = build_queue([], TargetBody.Both)

        assert queue == tuple(v.name for v in CATALOG)
        assert set(states) == set(queue)

    def test_cicm_orders_by_weight(self) -> None:
        """Higher CICM weight first; equal weights keep catalog order."""
        queue, _ = build_queue([], "CICM")

        assert queue[:3] == ("Flow=ΔP/R", "Fick", "Starling")
        assert queue[3:5] == ("τ=V/Q", "Hill")
        assert queue[-1] == "Nernst"

    def test_anzca_orders_by_weight(self) -> None:
        queue, _ = build_queue([], TargetBody.ANZCA)

        assert queue[:3] == ("τ=V/Q", "Cl=E×Q", "Nernst")
        assert queue[-2:] == ("Fick", "Starling")

    def test_domain_filter(self) -> None:
        """A vertex is selected when any of its domains was requested."""
        queue, _ = build_queue(["Pharmacology"], TargetBody.Both)

        assert queue == ("τ=V/Q", "Hill", "Cl=E×Q", "Nernst", "Michaelis-Menten")

    def test_several_domains(self) -> None:
        queue, _ = build_queue(["Measurement/Physics", "Pharmacology"], TargetBody.Both)

        assert "Beer-Lambert" in queue
        assert "Fick" not in queue
        assert len(queue) == len(set(queue))

    def test_unknown_domain_yields_empty_queue(self) -> None:
        queue, states = build_queue(["Anatomy"], TargetBody.Both)

        assert queue == ()
        assert states == {}

    def test_fresh_vertex_state(self) -> None:
        _, states = build_queue(["Physiology"], TargetBody.CICM)
        fick = states["Fick"]

        assert fick.best_score == 0
        assert fick.quadrant is None
        assert fick.probe_count == 0
        assert fick.probed_layers == ()
        assert "CO measurement" in fick.sub_topics

    def test_deterministic(self) -> None:
        assert build_queue(["Physiology"], "ANZCA") == build_queue(["Physiology"], "ANZCA")
