"""Context injection rendering for the conversational agent."""

from __future__ import annotations

import typing as t

import jinja2

from viva.model import LAYER_ORDER, ProbeAnalysis, VertexBelief


def render_context_injection(
    env: jinja2.Environment, vertex: str, analysis: ProbeAnalysis, belief: VertexBelief | None = None
) -> str:
    """Render the text block merged into the agent's next-turn context.

    Only the prompt is affected; the session state never sees the analysis.
    """
    template = env.get_template("analysis/context_injection.j2")
    return template.render(**_build_context(vertex, analysis, belief)).strip()


def _build_context(vertex: str, analysis: ProbeAnalysis, belief: VertexBelief | None) -> dict[str, t.Any]:
    next_layer = analysis.suggested_next_layer
    return {
        "vertex": vertex,
        "layers_probed": len(belief.probed_layers) if belief is not None else 0,
        "total_layers": len(LAYER_ORDER),
        "adjusted_score": analysis.adjusted_score,
        "quadrant": analysis.quadrant.value,
        "depth_reached": analysis.depth_reached.value,
        "misconceptions": list(analysis.misconceptions),
        "next_layer": next_layer.value if next_layer is not None else None,
        "next_layer_description": next_layer.description if next_layer is not None else None,
        "follow_up_angles": list(analysis.follow_up_angles),
    }
