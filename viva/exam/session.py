"""Session state machine (the fast path).

``ExamSession`` owns the authoritative ``SessionState`` of one examination.
Every operation is synchronous and in-memory, and replaces the held state
with a freshly built value. Callers that misuse the API with an unknown
vertex or phase get the unchanged state back. Only out-of-domain probe
values, and an unknown body passed to ``start``, raise.
"""

from __future__ import annotations

import datetime
import logging
import typing as t

from viva.model import MAX_SCORE, MIN_SCORE, Phase, ProbeLayer, ProbeResult, SessionState, SessionSummary, \
    StudyReport, TargetBody, VertexState

from . import analytics, policy
from .errors import InvalidBodyError, InvalidProbeError
from .quadrant import classify
from .queue import build_queue, parse_body
from .report import build_report, layer_scores

logger = logging.getLogger(__name__)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def validate_layer(layer: ProbeLayer | str) -> ProbeLayer:
    if isinstance(layer, ProbeLayer):
        return layer
    try:
        return ProbeLayer(layer)
    except ValueError:
        raise InvalidProbeError(f"invalid layer {layer!r}, expected one of {[m.value for m in ProbeLayer]}") from None


def validate_score(name: str, value: t.Any) -> int:
    """Reject anything but an integer in the 1-5 range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidProbeError(f"{name} must be an integer, got {value!r}")
    if not MIN_SCORE <= value <= MAX_SCORE:
        raise InvalidProbeError(f"{name} must be between {MIN_SCORE} and {MAX_SCORE}, got {value}")
    return value


class ExamSession(object):
    def __init__(self, utcnow: t.Callable[[], datetime.datetime] | None = None) -> None:
        self._utcnow = utcnow or _utcnow
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_vertex(self) -> str | None:
        return self._state.current_vertex

    # -- transitions -------------------------------------------------------

    def init_session(
        self,
        body: TargetBody | str,
        domains: t.Iterable[str],
        depth: str,
        queue: t.Sequence[str],
        vertex_states: t.Mapping[str, VertexState],
    ) -> SessionState:
        """Replace the whole session with a fresh one in the probe phase.

        Always succeeds: an unrecognised body is recorded as ``Both``. Use
        ``start`` to have the body validated.
        """
        try:
            target = parse_body(body)
        except InvalidBodyError:
            logger.warning("unknown target body, recording Both", extra={"body": str(body)})
            target = TargetBody.Both
        queue = tuple(queue)
        vertices = {name: vertex_states.get(name) or VertexState(name=name) for name in queue}
        self._state = SessionState(
            phase=Phase.Probe,
            body=target,
            domains=tuple(domains),
            depth=depth,
            queue=queue,
            current_index=0,
            vertices=vertices,
            probe_log=(),
            started_at=self._utcnow(),
        )
        logger.info(
            "exam session started",
            extra={
                "session_id": self._state.session_id,
                "body": self._state.body.value,
                "vertices": len(queue),
            },
        )
        return self._state

    def start(self, domains: t.Iterable[str], body: TargetBody | str, depth: str) -> SessionState:
        """Build the queue for ``domains``/``body`` and start a session on it."""
        domains = tuple(domains)
        target = parse_body(body)
        queue, states = build_queue(domains, target)
        return self.init_session(target, domains, depth, queue, states)

    def record_probe(
        self,
        vertex: str,
        layer: ProbeLayer | str,
        level: int,
        score: int,
        confident: bool,
        answer_summary: str = "",
    ) -> SessionState:
        layer = validate_layer(layer)
        level = validate_score("level", level)
        score = validate_score("score", score)

        current = self._state.vertices.get(vertex)
        if current is None:
            logger.warning(f"ignoring probe for unknown vertex {vertex!r}")
            return self._state

        quadrant = classify(score, confident)
        probed_layers = current.probed_layers
        if layer not in probed_layers:
            probed_layers = probed_layers + (layer,)
        updated = current.model_copy(
            update={
                "best_score": max(current.best_score, score),
                "quadrant": quadrant,
                "probe_count": current.probe_count + 1,
                "probed_layers": probed_layers,
            }
        )
        result = ProbeResult(
            vertex=vertex,
            layer=layer,
            level=level,
            score=score,
            confident=confident,
            answer_summary=answer_summary,
            quadrant=quadrant,
            timestamp=self._utcnow(),
        )
        self._state = self._state.model_copy(
            update={
                "vertices": {**self._state.vertices, vertex: updated},
                "probe_log": self._state.probe_log + (result,),
            }
        )
        logger.debug(
            "recorded probe",
            extra={
                "vertex": vertex,
                "layer": layer.value,
                "score": score,
                "quadrant": quadrant.value,
            },
        )
        return self._state

    def advance_vertex(self) -> str | None:
        """Move the pointer to the next queued vertex and return its name.

        Exhausting the queue switches the session to the fill phase and
        returns None. Further calls keep returning None without touching the
        state.
        """
        size = len(self._state.queue)
        if self._state.current_index >= size:
            logger.debug("advance requested past the end of the queue")
            return None

        index = self._state.current_index + 1
        update: dict[str, t.Any] = {"current_index": index}
        if index >= size:
            update["phase"] = Phase.Fill
            logger.info("vertex queue exhausted, entering fill phase")
        self._state = self._state.model_copy(update=update)
        return self._state.current_vertex

    def set_phase(self, phase: Phase | str) -> SessionState:
        if not isinstance(phase, Phase):
            try:
                phase = Phase(phase)
            except ValueError:
                logger.warning(f"ignoring unknown phase {phase!r}")
                return self._state
        if phase is Phase.Idle:
            logger.warning("the idle phase is only reachable through reset()")
            return self._state
        self._state = self._state.model_copy(update={"phase": phase})
        return self._state

    def mark_filled(self, vertex: str) -> SessionState:
        return self._set_flag(vertex, "filled")

    def mark_corrected(self, vertex: str) -> SessionState:
        return self._set_flag(vertex, "corrected")

    def _set_flag(self, vertex: str, flag: t.Literal["filled", "corrected"]) -> SessionState:
        current = self._state.vertices.get(vertex)
        if current is None:
            logger.warning(f"cannot mark unknown vertex {vertex!r} as {flag}")
            return self._state
        updated = current.model_copy(update={flag: True})
        self._state = self._state.model_copy(update={"vertices": {**self._state.vertices, vertex: updated}})
        return self._state

    def reset(self) -> SessionState:
        self._state = SessionState()
        return self._state

    # -- queries -----------------------------------------------------------

    def get_vertex(self, vertex: str) -> VertexState | None:
        return self._state.vertices.get(vertex)

    def get_vertex_probes(self, vertex: str) -> list[ProbeResult]:
        return [p for p in self._state.probe_log if p.vertex == vertex]

    def layer_scores(self, vertex: str) -> dict[ProbeLayer, int]:
        return layer_scores(self.get_vertex_probes(vertex))

    def is_complete(self, vertex: str) -> bool:
        current = self._state.vertices.get(vertex)
        if current is None:
            return False
        scores = [p.score for p in self.get_vertex_probes(vertex)]
        return policy.is_layer_complete(current.probed_layers, scores)

    def next_unprobed_layer(self, vertex: str) -> ProbeLayer | None:
        current = self._state.vertices.get(vertex)
        if current is None:
            return None
        return policy.next_unprobed_layer(current.probed_layers)

    def get_gaps(self) -> list[VertexState]:
        return analytics.gaps(self._state.vertices.values())

    def get_strengths(self) -> list[VertexState]:
        return analytics.strengths(self._state.vertices.values())

    def get_hypercorrection_targets(self) -> list[VertexState]:
        return analytics.hypercorrection_targets(self._state.vertices.values())

    def get_session_summary(self) -> SessionSummary:
        return analytics.summarize(self._state.vertices.values(), self._state.phase)

    def build_report(self, notes: str = "") -> StudyReport:
        return build_report(self._state, now=self._utcnow(), notes=notes)
