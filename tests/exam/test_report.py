"""Tests for the study report projection."""

from __future__ import annotations

import datetime

import pytest

from viva.core import TimestampProvider
from viva.exam import build_report, ExamSession
from viva.lib.json import jsonable
from viva.model import Phase, ProbeLayer, Quadrant, SessionState, TargetBody


@pytest.fixture
def session(utcnow: TimestampProvider) -> ExamSession:
    s = ExamSession(utcnow=utcnow)
    s.start(["Pharmacology"], TargetBody.ANZCA, "Deep DFS")
    s.record_probe("Cl=E×Q", ProbeLayer.Recall, 1, 2, False, "Clearance is volume per time")
    s.record_probe("Cl=E×Q", ProbeLayer.Mechanism, 2, 1, False)
    s.record_probe("Nernst", ProbeLayer.Recall, 1, 2, True, "E = RT/F")
    s.record_probe("Hill", ProbeLayer.Recall, 1, 5, True)
    s.record_probe("Hill", ProbeLayer.Recall, 1, 4, True)
    return s


class TestBuildReport(object):
    """Tests for build_report()."""

    def test_header(self, session: ExamSession) -> None:
        report = session.build_report(notes="good on receptors")

        assert report.session_id == session.state.session_id
        assert report.body is TargetBody.ANZCA
        assert report.domains == ("Pharmacology",)
        assert report.depth == "Deep DFS"
        assert report.phase is Phase.Probe
        assert report.notes == "good on receptors"

    def test_duration(self, session: ExamSession) -> None:
        """One clock tick per call: start, five probes, then the report."""
        report = session.build_report()

        assert report.duration_minutes == 6

    def test_duration_not_started(self) -> None:
        now = datetime.datetime(2025, 3, 1, tzinfo=datetime.UTC)
        report = build_report(SessionState(), now=now)

        assert report.duration_minutes == 0
        assert report.summary.total_vertices == 0
        assert report.probe_history == ()

    def test_gaps_and_targets(self, session: ExamSession) -> None:
        report = session.build_report()

        assert [g.name for g in report.gaps] == ["Cl=E×Q", "Nernst"]
        clearance = report.gaps[0]
        assert clearance.best_score == 2
        assert clearance.quadrant is Quadrant.Gap
        assert "Extraction ratio" in clearance.sub_topics

        assert [h.name for h in report.hypercorrection_targets] == ["Nernst"]
        assert report.hypercorrection_targets[0].corrected is False
        assert [s.name for s in report.strengths] == ["Hill"]

    def test_history_and_layer_scores(self, session: ExamSession) -> None:
        report = session.build_report()

        assert report.probe_history == session.state.probe_log
        assert report.layer_scores["Cl=E×Q"] == {ProbeLayer.Recall: 2, ProbeLayer.Mechanism: 1}
        assert report.layer_scores["Hill"] == {ProbeLayer.Recall: 4}
        assert "Starling" not in report.layer_scores

    def test_is_jsonable(self, session: ExamSession) -> None:
        data = jsonable(session.build_report())

        assert isinstance(data, dict)
        assert data["body"] == "ANZCA"
        assert data["layer_scores"]["Cl=E×Q"] == {"recall": 2, "mechanism": 1}
        assert data["summary"]["gaps"] == 2
