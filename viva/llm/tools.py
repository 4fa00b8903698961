"""Tools exposing an exam session to a conversational agent."""

from __future__ import annotations

import logging
import math
import typing as t

from langchain_core.tools import StructuredTool

from viva.exam import ExamError, ExamSession
from viva.lib.json import jsonable, JSONValue
from viva.lib.util import round_half_up
from viva.model import LAYER_ORDER, LAYER_QUESTION_HINTS, MAX_SCORE, MIN_SCORE, Phase, ProbeLayer, TargetBody

from .analysis import BackgroundAnalyzer

logger = logging.getLogger(__name__)

ToolResult = dict[str, JSONValue]

SETTABLE_PHASES = [p.value for p in Phase if p is not Phase.Idle]


def coerce_layer(value: str | None) -> ProbeLayer:
    try:
        return ProbeLayer((value or "").strip().lower())
    except ValueError:
        return ProbeLayer.Recall


def coerce_score(value: float | None, default: int = MIN_SCORE) -> int:
    """Round half-up and clamp into the 1-5 range; missing or non-finite values take ``default``."""
    if value is None or not math.isfinite(value):
        return default
    return max(MIN_SCORE, min(MAX_SCORE, int(round_half_up(value))))


def coerce_body(value: str | None) -> TargetBody:
    for member in TargetBody:
        if member.value.lower() == (value or "").strip().lower():
            return member
    return TargetBody.Both


def parse_domains(value: str | None) -> list[str]:
    """``"all"`` or an empty string selects every domain."""
    if not value or value.strip().lower() == "all":
        return []
    return [d.strip() for d in value.split(",") if d.strip()]


def make_exam_tools(
    session: ExamSession,
    analyzer: BackgroundAnalyzer | None = None,
    *,
    default_depth: str = "Broad BFS",
) -> list[StructuredTool]:
    """Create the exam tool set bound to ``session``.

    When an ``analyzer`` is given, probes recorded through the async tool
    path are also submitted to it for deep analysis; the caller collects the
    results with ``analyzer.drain()`` or from the returned tasks. Every tool
    returns a JSON-able dict; misuse is reported as ``{"error": ...}``.
    """

    def _require_session() -> ToolResult | None:
        if session.state.phase is Phase.Idle:
            return {"error": "no exam in progress, call exam_start first"}
        return None

    def _exam_start(domains: str = "all", body: str = "Both", depth: str | None = None) -> ToolResult:
        """Start a new exam on the vertices of the selected domains."""
        selected = parse_domains(domains)
        state = session.start(selected, coerce_body(body), depth or default_depth)
        if analyzer is not None:
            analyzer.reset(state.session_id)

        first = state.current_vertex
        first_state = session.get_vertex(first) if first is not None else None
        return t.cast(
            ToolResult,
            jsonable({
                "status": "started",
                "session_id": state.session_id,
                "body": state.body,
                "domains": list(state.domains) or ["All"],
                "depth": state.depth,
                "total_vertices": len(state.queue),
                "first_vertex": first,
                "first_vertex_description": first_state.description if first_state else "",
                "first_vertex_hint": (
                    f"Start with a clinical anchor, then ask one simple recall question about {first}."
                    if first is not None
                    else None
                ),
                "vertex_names": list(state.queue),
            }),
        )

    def _record(
        vertex: str,
        layer: str | None,
        level: float | None,
        score: float | None,
        confident: bool | None,
        answer_summary: str,
    ) -> tuple[ToolResult, ProbeLayer, int, bool]:
        probe_layer = coerce_layer(layer)
        probe_score = coerce_score(score)
        is_confident = bool(confident)
        session.record_probe(
            vertex,
            probe_layer,
            coerce_score(level),
            probe_score,
            is_confident,
            answer_summary,
        )

        vertex_state = session.get_vertex(vertex)
        assert vertex_state is not None
        complete = session.is_complete(vertex)
        next_layer = session.next_unprobed_layer(vertex)
        if complete:
            instruction = "Vertex fully probed. Call exam_advance_vertex to move on."
        elif next_layer is not None:
            instruction = (
                f"Probe the {next_layer.value} layer next. "
                f"Ask a short question about {LAYER_QUESTION_HINTS[next_layer]}."
            )
        else:
            instruction = "All layers probed. Call exam_advance_vertex."

        summary = session.get_session_summary()
        scores = session.layer_scores(vertex)
        result = t.cast(
            ToolResult,
            jsonable({
                "vertex": vertex,
                "layer": probe_layer,
                "score": probe_score,
                "quadrant": vertex_state.quadrant,
                "layers_probed": list(vertex_state.probed_layers),
                "layer_scores": {layer.value: scores[layer] for layer in LAYER_ORDER if layer in scores},
                "vertex_complete": complete,
                "next_layer": next_layer,
                "vertex_description": vertex_state.description,
                "should_advance": complete,
                "instruction": instruction,
                "probed": summary.probed,
                "total": summary.total_vertices,
            }),
        )
        return result, probe_layer, probe_score, is_confident

    def _check_probe(vertex: str) -> ToolResult | None:
        if error := _require_session():
            return error
        if not vertex:
            return {"error": "vertex parameter is required"}
        if session.get_vertex(vertex) is None:
            return {"error": f"unknown vertex {vertex!r}"}
        return None

    def _exam_record_probe(
        vertex: str = "",
        layer: str | None = None,
        score: float | None = None,
        confident: bool | None = None,
        answer_summary: str = "",
        level: float | None = None,
        question: str = "",
    ) -> ToolResult:
        """Record a scored probe (sync path, no deep analysis)."""
        if error := _check_probe(vertex):
            return error
        try:
            result, *_ = _record(vertex, layer, level, score, confident, answer_summary)
        except ExamError as e:
            return {"error": str(e)}
        return result

    async def _aexam_record_probe(
        vertex: str = "",
        layer: str | None = None,
        score: float | None = None,
        confident: bool | None = None,
        answer_summary: str = "",
        level: float | None = None,
        question: str = "",
    ) -> ToolResult:
        """Record a scored probe and hand it to the background analyzer."""
        if error := _check_probe(vertex):
            return error
        try:
            result, probe_layer, probe_score, is_confident = _record(
                vertex, layer, level, score, confident, answer_summary
            )
        except ExamError as e:
            return {"error": str(e)}

        if analyzer is not None:
            vertex_state = session.get_vertex(vertex)
            analyzer.submit(
                vertex,
                vertex_state.description if vertex_state else "",
                probe_layer,
                question,
                answer_summary,
                probe_score,
                is_confident,
                body=session.state.body,
                probe_count=len(session.state.probe_log),
            )
            result["analysis_pending"] = True
        return result

    def _exam_advance_vertex() -> ToolResult:
        """Move on to the next vertex in the queue."""
        if error := _require_session():
            return error
        vertex = session.advance_vertex()
        state = session.state
        summary = session.get_session_summary()
        if vertex is None:
            if state.phase is not Phase.Fill:
                session.set_phase(Phase.Fill)
            return t.cast(
                ToolResult,
                jsonable({
                    "done": True,
                    "phase": Phase.Fill,
                    "gaps": [v.name for v in session.get_gaps()],
                    "hypercorrection_targets": [v.name for v in session.get_hypercorrection_targets()],
                    "probed": summary.probed,
                }),
            )

        vertex_state = session.get_vertex(vertex)
        return {
            "done": False,
            "vertex": vertex,
            "description": vertex_state.description if vertex_state else "",
            "position": f"{state.current_index + 1}/{len(state.queue)}",
        }

    def _exam_get_state(include_history: bool = False) -> ToolResult:
        """Summarize the exam: phase, scores, gaps, strengths and targets."""
        state = session.state
        payload: dict[str, t.Any] = {
            "session_id": state.session_id,
            "phase": state.phase,
            "body": state.body,
            "domains": list(state.domains),
            "summary": session.get_session_summary(),
            "current_vertex": state.current_vertex,
            "gaps": [
                {"name": v.name, "score": v.best_score, "quadrant": v.quadrant, "sub_topics": list(v.sub_topics)}
                for v in session.get_gaps()
            ],
            "strengths": [{"name": v.name, "score": v.best_score} for v in session.get_strengths()],
            "hypercorrection_targets": [
                {"name": v.name, "score": v.best_score, "description": v.description}
                for v in session.get_hypercorrection_targets()
            ],
        }
        if include_history:
            payload["probe_history"] = list(state.probe_log)
        return t.cast(ToolResult, jsonable(payload))

    def _exam_set_phase(phase: str = "") -> ToolResult:
        """Switch the exam into one of the teaching or probing phases."""
        if error := _require_session():
            return error
        if not phase:
            return {"error": "phase parameter is required"}
        if phase not in SETTABLE_PHASES:
            return {"error": f"invalid phase, must be one of: {', '.join(SETTABLE_PHASES)}"}

        session.set_phase(phase)
        target = Phase(phase)
        instructions = ""
        if target is Phase.Fill:
            gaps = [v.name for v in session.get_gaps()]
            instructions = (
                f"FILL phase: For each of these {len(gaps)} gaps, provide a model SAQ-style answer. "
                f"Gaps: {', '.join(gaps)}"
            )
        elif target is Phase.Hypercorrect:
            targets = [v.name for v in session.get_hypercorrection_targets()]
            instructions = (
                f"HYPERCORRECT phase: Address {len(targets)} high-confidence errors. For each, surface the "
                f"contradiction, present evidence, and give a vivid mechanistic correction. "
                f"Targets: {', '.join(targets)}"
            )
        elif target is Phase.Retest:
            gaps = session.get_gaps()
            instructions = (
                f"RETEST phase: Re-probe {len(gaps)} gap vertices with different angle questions. "
                f"Score again. Name 2-3 open loops at the end."
            )
        logger.info(f"phase changed to {target.value}")
        return {"phase": target.value, "instructions": instructions}

    def _mark(vertex: str, flag: t.Literal["filled", "corrected"]) -> ToolResult:
        if not vertex:
            return {"error": "vertex parameter is required"}
        if session.get_vertex(vertex) is None:
            return {"error": f"unknown vertex {vertex!r}"}
        if flag == "filled":
            session.mark_filled(vertex)
        else:
            session.mark_corrected(vertex)
        return {"vertex": vertex, flag: True}

    def _exam_mark_filled(vertex: str = "") -> ToolResult:
        """Mark a gap vertex as filled once its model answer was delivered."""
        return _mark(vertex, "filled")

    def _exam_mark_corrected(vertex: str = "") -> ToolResult:
        """Mark a hypercorrection target as corrected."""
        return _mark(vertex, "corrected")

    def _exam_end(notes: str = "") -> ToolResult:
        """End the exam, returning the final summary and study report."""
        if error := _require_session():
            return error
        summary = session.get_session_summary()
        report = session.build_report(notes=notes)
        session.reset()
        if analyzer is not None:
            analyzer.reset()
        logger.info("exam ended", extra={"session_id": report.session_id, "probed": summary.probed})
        return t.cast(
            ToolResult,
            jsonable({
                "status": "ended",
                "final_summary": summary,
                "report": report,
            }),
        )

    return [
        StructuredTool.from_function(
            func=_exam_start,
            name="exam_start",
            description=(
                "Initialize an exam session. Call this when the user wants to start a viva. Domains is a "
                "comma-separated list (Physiology, Pharmacology, Measurement/Physics) or 'all'; body is ANZCA, "
                "CICM or Both; depth is Broad BFS, Deep DFS or Random. Returns the vertex queue ordered by "
                "priority for the selected domains and body."
            ),
        ),
        StructuredTool.from_function(
            func=_exam_record_probe,
            coroutine=_aexam_record_probe,
            name="exam_record_probe",
            description=(
                "Record the result of probing a vertex. Call after evaluating the user's verbal answer. "
                "Specify the layer (recall, mechanism, clinical, quantitative), the probe level 1-5 and a "
                "score 1-5 (1=no knowledge, 3=borderline, 5=expert), whether the user sounded confident and "
                "a short summary of the answer. Returns layer completion status and the next layer to probe."
            ),
        ),
        StructuredTool.from_function(
            func=_exam_advance_vertex,
            name="exam_advance_vertex",
            description="Move to the next vertex in the queue. Call once the current vertex is fully probed.",
        ),
        StructuredTool.from_function(
            func=_exam_get_state,
            name="exam_get_state",
            description=(
                "Get the current exam state including vertex scores, gaps, strengths and the session summary."
            ),
        ),
        StructuredTool.from_function(
            func=_exam_set_phase,
            name="exam_set_phase",
            description=(
                "Transition the exam to a specific phase: probe, dig, fill, hypercorrect or retest. "
                "Returns instructions for the new phase."
            ),
        ),
        StructuredTool.from_function(
            func=_exam_mark_filled,
            name="exam_mark_filled",
            description="Mark a gap vertex as filled after delivering its model answer.",
        ),
        StructuredTool.from_function(
            func=_exam_mark_corrected,
            name="exam_mark_corrected",
            description="Mark a hypercorrection target as corrected after delivering the correction.",
        ),
        StructuredTool.from_function(
            func=_exam_end,
            name="exam_end",
            description="End the exam session, returning the final summary and study report, and reset state.",
        ),
    ]
