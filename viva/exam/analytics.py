"""Read-only projections over per-vertex session state."""

from __future__ import annotations

import decimal
import typing as t

from viva.model import Phase, Quadrant, SessionSummary, VertexState


def gaps(vertices: t.Iterable[VertexState]) -> list[VertexState]:
    """Vertices last classified as a gap, confidently wrong answers included."""
    return [v for v in vertices if v.quadrant in (Quadrant.Gap, Quadrant.HypercorrectionTarget)]


def strengths(vertices: t.Iterable[VertexState]) -> list[VertexState]:
    return [v for v in vertices if v.quadrant is Quadrant.Solid or v.best_score >= 4]


def hypercorrection_targets(vertices: t.Iterable[VertexState]) -> list[VertexState]:
    return [v for v in vertices if v.quadrant is Quadrant.HypercorrectionTarget]


def mean_score(vertices: t.Iterable[VertexState]) -> float:
    """Mean best score over probed vertices, rounded half-up to one decimal."""
    scores = [v.best_score for v in vertices if v.probed]
    if not scores:
        return 0.0
    mean = decimal.Decimal(sum(scores)) / decimal.Decimal(len(scores))
    return float(mean.quantize(decimal.Decimal("0.1"), rounding=decimal.ROUND_HALF_UP))


def summarize(vertices: t.Iterable[VertexState], phase: Phase) -> SessionSummary:
    vs = list(vertices)
    return SessionSummary(
        total_vertices=len(vs),
        probed=sum(1 for v in vs if v.probed),
        gaps=len(gaps(vs)),
        strengths=len(strengths(vs)),
        hypercorrection_targets=len(hypercorrection_targets(vs)),
        filled=sum(1 for v in vs if v.filled),
        corrected=sum(1 for v in vs if v.corrected),
        mean_score=mean_score(vs),
        phase=phase,
    )
