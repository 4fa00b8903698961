"""Tests for the session state machine."""

from __future__ import annotations

import pytest

from viva.core import TimestampProvider
from viva.exam import ExamSession, InvalidBodyError, InvalidProbeError
from viva.model import Phase, ProbeLayer, Quadrant, TargetBody


@pytest.fixture
def session(utcnow: TimestampProvider) -> ExamSession:
    s = ExamSession(utcnow=utcnow)
    s.start(["Physiology"], TargetBody.CICM, "Broad BFS")
    return s


class TestStart(object):
    """Tests for starting a session."""

    def test_fresh_session_is_idle(self) -> None:
        s = ExamSession()

        assert s.state.phase is Phase.Idle
        assert s.current_vertex is None
        assert s.state.started_at is None

    def test_start_enters_probe_phase(self, session: ExamSession) -> None:
        state = session.state

        assert state.phase is Phase.Probe
        assert state.body is TargetBody.CICM
        assert state.domains == ("Physiology",)
        assert state.depth == "Broad BFS"
        assert state.current_index == 0
        assert session.current_vertex == "Flow=ΔP/R"
        assert state.started_at is not None
        assert state.probe_log == ()

    def test_start_rejects_unknown_body(self) -> None:
        with pytest.raises(InvalidBodyError):
            ExamSession().start([], "RACP", "Broad BFS")

    def test_restart_replaces_session(self, session: ExamSession) -> None:
        session.record_probe("Flow=ΔP/R", ProbeLayer.Recall, 1, 4, True)
        first_id = session.state.session_id

        session.start(["Pharmacology"], TargetBody.Both, "Deep DFS")

        assert session.state.session_id != first_id
        assert session.state.probe_log == ()
        assert "Flow=ΔP/R" not in session.state.vertices

    def test_init_session_fills_missing_vertex_states(self) -> None:
        s = ExamSession()
        s.init_session("Both", [], "Random", ["A", "B"], {})

        assert list(s.state.vertices) == ["A", "B"]
        assert s.get_vertex("A") is not None
        assert s.get_vertex("A").best_score == 0  # pyright: ignore [reportOptionalMemberAccess]

    def test_init_session_records_unknown_body_as_both(self, utcnow: TimestampProvider) -> None:
        s = ExamSession(utcnow=utcnow)
        state = s.init_session("AMC", [], "Broad BFS", ["A"], {})

        assert state.body is TargetBody.Both
        assert state.phase is Phase.Probe
        assert s.current_vertex == "A"

    def test_init_session_accepts_body_names(self) -> None:
        assert ExamSession().init_session("anzca", [], "Random", [], {}).body is TargetBody.ANZCA


class TestRecordProbe(object):
    """Tests for ExamSession.record_probe()."""

    def test_updates_vertex_and_log(self, session: ExamSession) -> None:
        state = session.record_probe("Fick", "recall", 1, 4, True, "Q = VO2 / (Ca - Cv)")
        fick = state.vertices["Fick"]

        assert fick.best_score == 4
        assert fick.quadrant is Quadrant.Solid
        assert fick.probe_count == 1
        assert fick.probed_layers == (ProbeLayer.Recall,)
        assert len(state.probe_log) == 1
        assert state.probe_log[0].answer_summary == "Q = VO2 / (Ca - Cv)"
        assert state.probe_log[0].quadrant is Quadrant.Solid

    def test_best_score_is_monotonic(self, session: ExamSession) -> None:
        """A later lower score never lowers the best score, but does set the quadrant."""
        session.record_probe("Fick", ProbeLayer.Recall, 1, 5, True)
        state = session.record_probe("Fick", ProbeLayer.Mechanism, 2, 2, True)
        fick = state.vertices["Fick"]

        assert fick.best_score == 5
        assert fick.quadrant is Quadrant.HypercorrectionTarget
        assert fick.probe_count == 2

    def test_probed_layers_are_a_set(self, session: ExamSession) -> None:
        """Probing the same layer twice records it once, in first-probe order."""
        session.record_probe("Fick", ProbeLayer.Mechanism, 1, 3, False)
        session.record_probe("Fick", ProbeLayer.Recall, 1, 3, False)
        state = session.record_probe("Fick", ProbeLayer.Mechanism, 1, 4, True)

        assert state.vertices["Fick"].probed_layers == (ProbeLayer.Mechanism, ProbeLayer.Recall)
        assert state.vertices["Fick"].probe_count == 3

    def test_previous_state_is_not_mutated(self, session: ExamSession) -> None:
        before = session.state
        session.record_probe("Fick", ProbeLayer.Recall, 1, 4, True)

        assert before.vertices["Fick"].probe_count == 0
        assert before.probe_log == ()

    def test_unknown_vertex_is_ignored(self, session: ExamSession) -> None:
        before = session.state
        after = session.record_probe("Ohm", ProbeLayer.Recall, 1, 4, True)

        assert after is before

    @pytest.mark.parametrize("score", [0, 6, -1, 3.5, "4", True])
    def test_rejects_invalid_score(self, session: ExamSession, score: object) -> None:
        with pytest.raises(InvalidProbeError):
            session.record_probe("Fick", ProbeLayer.Recall, 1, score, True)  # pyright: ignore [reportArgumentType]

    def test_rejects_invalid_level(self, session: ExamSession) -> None:
        with pytest.raises(InvalidProbeError):
            session.record_probe("Fick", ProbeLayer.Recall, 7, 3, True)

    def test_rejects_invalid_layer(self, session: ExamSession) -> None:
        with pytest.raises(InvalidProbeError):
            session.record_probe("Fick", "anatomy", 1, 3, True)

    def test_invalid_probe_leaves_state_alone(self, session: ExamSession) -> None:
        before = session.state
        with pytest.raises(InvalidProbeError):
            session.record_probe("Ohm", ProbeLayer.Recall, 1, 9, True)

        assert session.state is before


class TestAdvanceVertex(object):
    """Tests for ExamSession.advance_vertex()."""

    def test_moves_through_queue(self, session: ExamSession) -> None:
        queue = session.state.queue

        assert session.advance_vertex() == queue[1]
        assert session.current_vertex == queue[1]
        assert session.state.phase is Phase.Probe

    def test_exhausting_queue_enters_fill(self, utcnow: TimestampProvider) -> None:
        s = ExamSession(utcnow=utcnow)
        s.init_session("Both", [], "Broad BFS", ["A", "B"], {})

        assert s.advance_vertex() == "B"
        assert s.advance_vertex() is None
        assert s.state.phase is Phase.Fill
        assert s.state.current_index == 2

    def test_advancing_past_the_end_is_a_no_op(self, utcnow: TimestampProvider) -> None:
        s = ExamSession(utcnow=utcnow)
        s.init_session("Both", [], "Broad BFS", ["A"], {})
        s.advance_vertex()
        s.set_phase(Phase.Hypercorrect)
        before = s.state

        assert s.advance_vertex() is None
        assert s.state is before
        assert s.state.phase is Phase.Hypercorrect


class TestSetPhase(object):
    """Tests for ExamSession.set_phase() and the flag setters."""

    def test_accepts_value_strings(self, session: ExamSession) -> None:
        assert session.set_phase("retest").phase is Phase.Retest

    def test_unknown_phase_is_ignored(self, session: ExamSession) -> None:
        before = session.state
        assert session.set_phase("teach") is before

    def test_idle_only_through_reset(self, session: ExamSession) -> None:
        assert session.set_phase(Phase.Idle).phase is Phase.Probe
        assert session.reset().phase is Phase.Idle

    def test_mark_filled_and_corrected(self, session: ExamSession) -> None:
        session.mark_filled("Fick")
        state = session.mark_corrected("Starling")

        assert state.vertices["Fick"].filled is True
        assert state.vertices["Fick"].corrected is False
        assert state.vertices["Starling"].corrected is True

    def test_marking_unknown_vertex_is_ignored(self, session: ExamSession) -> None:
        before = session.state
        assert session.mark_filled("Ohm") is before


class TestQueries(object):
    """Tests for the per-vertex queries."""

    def test_layer_completion_follows_the_log(self, session: ExamSession) -> None:
        session.record_probe("Fick", ProbeLayer.Recall, 1, 4, True)
        assert session.is_complete("Fick") is False
        assert session.next_unprobed_layer("Fick") is ProbeLayer.Mechanism

        session.record_probe("Fick", ProbeLayer.Mechanism, 2, 5, True)
        assert session.is_complete("Fick") is True

    def test_unknown_vertex(self, session: ExamSession) -> None:
        assert session.is_complete("Ohm") is False
        assert session.next_unprobed_layer("Ohm") is None
        assert session.get_vertex("Ohm") is None
        assert session.get_vertex_probes("Ohm") == []

    def test_layer_scores_keep_latest(self, session: ExamSession) -> None:
        session.record_probe("Fick", ProbeLayer.Mechanism, 1, 2, False)
        session.record_probe("Fick", ProbeLayer.Recall, 1, 4, True)
        session.record_probe("Fick", ProbeLayer.Mechanism, 1, 3, True)

        assert session.layer_scores("Fick") == {ProbeLayer.Recall: 4, ProbeLayer.Mechanism: 3}


class TestScenarios(object):
    """End-to-end walks through a session."""

    def test_full_walk(self, utcnow: TimestampProvider) -> None:
        """Probe three vertices, exhaust the queue, fill the gap."""
        s = ExamSession(utcnow=utcnow)
        s.init_session("Both", [], "Broad BFS", ["A", "B", "C"], {})

        s.record_probe("A", ProbeLayer.Recall, 1, 5, True)
        s.record_probe("A", ProbeLayer.Mechanism, 2, 4, True)
        assert s.is_complete("A")
        s.advance_vertex()

        s.record_probe("B", ProbeLayer.Recall, 1, 2, False)
        s.record_probe("B", ProbeLayer.Mechanism, 1, 1, False)
        assert s.is_complete("B")
        s.advance_vertex()

        s.record_probe("C", ProbeLayer.Recall, 1, 3, False)
        assert s.advance_vertex() is None
        assert s.state.phase is Phase.Fill

        assert [v.name for v in s.get_gaps()] == ["B"]
        assert [v.name for v in s.get_strengths()] == ["A"]

        s.mark_filled("B")
        summary = s.get_session_summary()
        assert summary.total_vertices == 3
        assert summary.probed == 3
        assert summary.gaps == 1
        assert summary.strengths == 1
        assert summary.filled == 1
        assert summary.mean_score == 3.3
        assert summary.phase is Phase.Fill

    def test_hypercorrection(self, utcnow: TimestampProvider) -> None:
        """A confidently wrong answer becomes both a gap and a hypercorrection target."""
        s = ExamSession(utcnow=utcnow)
        s.start([], TargetBody.Both, "Broad BFS")
        s.record_probe("Laplace", ProbeLayer.Mechanism, 2, 1, True)

        assert [v.name for v in s.get_hypercorrection_targets()] == ["Laplace"]
        assert [v.name for v in s.get_gaps()] == ["Laplace"]

        s.set_phase(Phase.Hypercorrect)
        s.mark_corrected("Laplace")
        assert s.get_session_summary().corrected == 1
