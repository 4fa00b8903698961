from __future__ import annotations

import datetime

from viva.model import GapEntry, HypercorrectionEntry, LAYER_ORDER, ProbeLayer, ProbeResult, SessionState, \
    StrengthEntry, StudyReport

from . import analytics


def layer_scores(probes: list[ProbeResult]) -> dict[ProbeLayer, int]:
    """Most recent score per probed layer, in canonical layer order."""
    latest: dict[ProbeLayer, int] = {}
    for probe in probes:
        latest[probe.layer] = probe.score
    return {layer: latest[layer] for layer in LAYER_ORDER if layer in latest}


def build_report(state: SessionState, *, now: datetime.datetime, notes: str = "") -> StudyReport:
    """Project a session into a study report.

    Rendering and persisting the report are left to the caller.
    """
    vertices = list(state.vertices.values())
    duration = 0
    if state.started_at is not None:
        duration = max(0, round((now - state.started_at).total_seconds() / 60))

    by_vertex: dict[str, list[ProbeResult]] = {}
    for probe in state.probe_log:
        by_vertex.setdefault(probe.vertex, []).append(probe)

    return StudyReport(
        session_id=state.session_id,
        body=state.body,
        domains=state.domains,
        depth=state.depth,
        phase=state.phase,
        generated_at=now,
        duration_minutes=duration,
        summary=analytics.summarize(vertices, state.phase),
        gaps=tuple(
            GapEntry(name=v.name, best_score=v.best_score, quadrant=v.quadrant, sub_topics=v.sub_topics)
            for v in analytics.gaps(vertices)
        ),
        strengths=tuple(StrengthEntry(name=v.name, best_score=v.best_score) for v in analytics.strengths(vertices)),
        hypercorrection_targets=tuple(
            HypercorrectionEntry(
                name=v.name, best_score=v.best_score, description=v.description, corrected=v.corrected
            )
            for v in analytics.hypercorrection_targets(vertices)
        ),
        probe_history=state.probe_log,
        layer_scores={name: layer_scores(probes) for name, probes in by_vertex.items()},
        notes=notes,
    )
