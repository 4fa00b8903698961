"""Background analyzer (the slow path).

The analyzer keeps its own per-vertex belief model, built from every probe it
is asked to analyze, and asks a chat model to recalibrate each raw score in
light of the whole layer history. Results are advisory: they are folded into
the conversational agent's next prompt and never written back into the
session state.

An analysis can take seconds. ``submit`` schedules one as a task so the fast
path never waits on it. Each result carries the session id that was current
when the analysis started; after ``reset`` the caller should drop results
tagged with the previous id.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
import typing as t

import jinja2
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from viva.exam import classify, is_layer_complete, next_unprobed_layer, validate_layer, validate_score
from viva.lib.util import dedupe, round_half_up
from viva.model import BeliefState, DepthReached, ExamSessionID, LayerProbe, MAX_SCORE, MIN_SCORE, \
    new_session_id, ProbeAnalysis, ProbeLayer, TargetBody, VertexBelief

from .context import render_context_injection
from .verdict import DeepVerdict

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a medical examination assessment expert analyzing answers given during a voice-based "
    "anaesthesia and intensive care primary exam viva. Be strict and specific."
)

FALLBACK_REASONING = "Fallback analysis: deep analysis unavailable."


def overall_strength(layers: t.Sequence[LayerProbe]) -> float:
    """Mean layer score, one decimal."""
    if not layers:
        return 0.0
    return round_half_up(sum(lp.score for lp in layers) / len(layers), 1)


def confidence_calibration(layers: t.Sequence[LayerProbe]) -> float:
    """Fraction of probes where confidence matched correctness (score >= 3).

    Confidently wrong and unconfidently right answers both count against it.
    An empty history is perfectly calibrated.
    """
    if not layers:
        return 1.0
    matched = sum(1 for lp in layers if (lp.score >= 3) == lp.confident)
    return round_half_up(matched / len(layers), 2)


def suggest_next_layer(belief: VertexBelief) -> ProbeLayer | None:
    """Next layer to probe according to the belief, None once it is complete."""
    if is_layer_complete(belief.probed_layers, belief.scores):
        return None
    return next_unprobed_layer(belief.probed_layers)


# calibration below this, over at least two probes, is reported as a session insight
POOR_CALIBRATION: t.Final[float] = 0.5


def session_insights(beliefs: t.Mapping[str, VertexBelief]) -> list[str]:
    """Cross-vertex observations for the teaching phase, in vertex order."""
    insights: list[str] = []
    for vertex, belief in beliefs.items():
        if len(belief.layers) >= 2 and belief.confidence_calibration < POOR_CALIBRATION:
            insights.append(
                f"{vertex}: confidence poorly calibrated ({belief.confidence_calibration:.2f} over "
                f"{len(belief.layers)} probes)"
            )
        if belief.known_misconceptions:
            insights.append(f"{vertex}: misconceptions noted: {'; '.join(belief.known_misconceptions)}")
    return insights


def parse_depth(value: str) -> DepthReached:
    try:
        return DepthReached(value.strip().lower())
    except ValueError:
        return DepthReached.Surface


class BackgroundAnalyzer(object):
    def __init__(
        self,
        model: BaseChatModel,
        env: jinja2.Environment,
        *,
        timeout_seconds: float = 30.0,
        utcnow: t.Callable[[], datetime.datetime] | None = None,
        session_id: ExamSessionID | None = None,
    ) -> None:
        self.model = model
        self.env = env
        self.timeout_seconds = timeout_seconds
        self._utcnow = utcnow or (lambda: datetime.datetime.now(datetime.UTC))
        self._belief = BeliefState(session_id=session_id or new_session_id())
        self._locks: dict[str, asyncio.Lock] = {}
        self._pending: set[asyncio.Task[ProbeAnalysis]] = set()

    @property
    def belief(self) -> BeliefState:
        return self._belief

    @property
    def session_id(self) -> ExamSessionID:
        return self._belief.session_id

    def get_vertex_belief(self, vertex: str) -> VertexBelief | None:
        return self._belief.vertex_beliefs.get(vertex)

    def next_layer(self, vertex: str) -> ProbeLayer | None:
        belief = self.get_vertex_belief(vertex)
        if belief is None:
            return ProbeLayer.Recall
        return next_unprobed_layer(belief.probed_layers)

    def is_vertex_complete(self, vertex: str) -> bool:
        belief = self.get_vertex_belief(vertex)
        if belief is None:
            return False
        return is_layer_complete(belief.probed_layers, belief.scores)

    def reset(self, session_id: ExamSessionID | None = None) -> BeliefState:
        """Start a fresh belief model.

        Analyses still in flight keep writing into the discarded model and
        return results tagged with the old session id.
        """
        previous = self._belief.session_id
        self._belief = BeliefState(session_id=session_id or new_session_id())
        self._locks = {}
        logger.info(
            "belief state reset",
            extra={
                "previous_session_id": previous,
                "session_id": self._belief.session_id,
                "in_flight": len(self._pending),
            },
        )
        return self._belief

    def submit(
        self,
        vertex: str,
        description: str,
        layer: ProbeLayer | str,
        question: str,
        answer_summary: str,
        raw_score: int,
        confident: bool,
        *,
        body: TargetBody | str = TargetBody.Both,
        probe_count: int | None = None,
    ) -> asyncio.Task[ProbeAnalysis]:
        """Schedule ``analyze_probe`` on the running loop and return the task.

        Input validation happens here, before anything is scheduled.
        """
        validate_layer(layer)
        validate_score("score", raw_score)
        task = asyncio.get_running_loop().create_task(
            self.analyze_probe(
                vertex,
                description,
                layer,
                question,
                answer_summary,
                raw_score,
                confident,
                body=body,
                probe_count=probe_count,
            ),
            name=f"analyze:{vertex}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> list[ProbeAnalysis]:
        """Wait for every submitted analysis and return the ones that finished.

        A task that raised or was cancelled is logged and left out.
        """
        tasks = list(self._pending)
        if not tasks:
            return []
        analyses: list[ProbeAnalysis] = []
        for task, result in zip(tasks, await asyncio.gather(*tasks, return_exceptions=True)):
            if isinstance(result, BaseException):
                logger.error(
                    "background analysis failed",
                    exc_info=result,
                    extra={"task": task.get_name()},
                )
                continue
            analyses.append(result)
        return analyses

    async def analyze_probe(
        self,
        vertex: str,
        description: str,
        layer: ProbeLayer | str,
        question: str,
        answer_summary: str,
        raw_score: int,
        confident: bool,
        *,
        body: TargetBody | str = TargetBody.Both,
        probe_count: int | None = None,
    ) -> ProbeAnalysis:
        layer = validate_layer(layer)
        raw_score = validate_score("score", raw_score)

        # bind to the belief model current at call time; a reset while the
        # model call is in flight must not leak this probe into the new one
        belief_state = self._belief
        lock = self._locks.setdefault(vertex, asyncio.Lock())

        probe = LayerProbe(
            layer=layer,
            question=question,
            answer_summary=answer_summary,
            score=raw_score,
            confident=confident,
            timestamp=self._utcnow(),
        )
        async with lock:
            current = belief_state.vertex_beliefs.get(vertex) or VertexBelief()
            layers = current.layers + (probe,)
            updated = current.model_copy(
                update={
                    "layers": layers,
                    "overall_strength": overall_strength(layers),
                    "confidence_calibration": confidence_calibration(layers),
                }
            )
            belief_state.vertex_beliefs[vertex] = updated
            belief_state.session_insights = session_insights(belief_state.vertex_beliefs)

        if probe_count is None:
            probe_count = sum(len(b.layers) for b in belief_state.vertex_beliefs.values())
        body_name = body.value if isinstance(body, TargetBody) else str(body)

        try:
            prompt = self.env.get_template("analysis/deep_analysis.j2").render(
                vertex=vertex,
                description=description,
                layer=layer.value,
                layer_description=layer.description,
                question=question,
                answer_summary=answer_summary,
                raw_score=raw_score,
                confident=confident,
                history=[
                    {
                        "layer": lp.layer.value,
                        "score": lp.score,
                        "confident": lp.confident,
                        "answer_summary": lp.answer_summary,
                    }
                    for lp in layers
                ],
                next_layer=(nl.value if (nl := suggest_next_layer(updated)) is not None else None),
                body=body_name,
                probe_count=probe_count,
            )
            verdict = await asyncio.wait_for(self._run_deep_analysis(prompt), timeout=self.timeout_seconds)
            adjusted_score = max(MIN_SCORE, min(MAX_SCORE, int(round_half_up(verdict.adjusted_score))))
        except TimeoutError:
            logger.warning(
                f"deep analysis timed out after {self.timeout_seconds}s, using fallback",
                extra={"vertex": vertex, "layer": layer.value},
            )
            return await self._fallback(belief_state, lock, vertex, raw_score, confident)
        except Exception:
            logger.exception("deep analysis failed, using fallback", extra={"vertex": vertex, "layer": layer.value})
            return await self._fallback(belief_state, lock, vertex, raw_score, confident)

        adjusted_confidence = verdict.adjusted_confidence
        misconceptions = dedupe(verdict.misconceptions)

        async with lock:
            current = belief_state.vertex_beliefs.get(vertex) or VertexBelief()
            if misconceptions:
                current = current.model_copy(
                    update={"known_misconceptions": dedupe(current.known_misconceptions + misconceptions)}
                )
                belief_state.vertex_beliefs[vertex] = current
                belief_state.session_insights = session_insights(belief_state.vertex_beliefs)
            suggested = suggest_next_layer(current)

        analysis = ProbeAnalysis(
            session_id=belief_state.session_id,
            vertex=vertex,
            adjusted_score=adjusted_score,
            adjusted_confidence=adjusted_confidence,
            quadrant=classify(adjusted_score, adjusted_confidence),
            reasoning=verdict.reasoning.strip(),
            follow_up_angles=dedupe(verdict.follow_up_angles),
            misconceptions=misconceptions,
            depth_reached=parse_depth(verdict.depth_reached),
            suggested_next_layer=suggested,
        )
        logger.debug(
            "deep analysis complete",
            extra={
                "vertex": vertex,
                "raw_score": raw_score,
                "adjusted_score": adjusted_score,
                "quadrant": analysis.quadrant.value,
            },
        )
        return analysis

    async def _run_deep_analysis(self, prompt: str) -> DeepVerdict:
        messages = [
            SystemMessage(content=SYSTEM_PROMPT),
            HumanMessage(content=prompt),
        ]
        # LangChain's with_structured_output has incomplete types, so we check the result
        structured_model = self.model.with_structured_output(DeepVerdict)  # pyright: ignore[reportUnknownVariableType]
        result = await structured_model.ainvoke(messages)  # pyright: ignore[reportUnknownVariableType]
        if isinstance(result, DeepVerdict):
            return result
        if isinstance(result, dict):
            return DeepVerdict.model_validate(result)
        raise ValueError(f"unparseable verdict: {result!r}")

    async def _fallback(
        self, belief_state: BeliefState, lock: asyncio.Lock, vertex: str, raw_score: int, confident: bool
    ) -> ProbeAnalysis:
        async with lock:
            current = belief_state.vertex_beliefs.get(vertex) or VertexBelief()
            suggested = suggest_next_layer(current)
        return ProbeAnalysis(
            session_id=belief_state.session_id,
            vertex=vertex,
            adjusted_score=raw_score,
            adjusted_confidence=confident,
            quadrant=classify(raw_score, confident),
            reasoning=FALLBACK_REASONING,
            depth_reached=DepthReached.Surface,
            suggested_next_layer=suggested,
            fallback=True,
        )

    def generate_context_injection(self, vertex: str, analysis: ProbeAnalysis) -> str:
        belief = None
        if analysis.session_id == self._belief.session_id:
            belief = self.get_vertex_belief(vertex)
        return render_context_injection(self.env, vertex, analysis, belief)
