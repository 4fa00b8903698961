from __future__ import annotations

import pydantic as p

from .base import ValueModel
from .exam import ProbeLayer, Quadrant, TargetBody


class VertexDefinition(ValueModel):
    """Static description of a topic in the examination graph."""

    name: str
    description: str
    domains: frozenset[str]
    sub_topics: tuple[str, ...] = ()
    weights: dict[TargetBody, float] = p.Field(default_factory=dict)

    def weight_for(self, body: TargetBody) -> float:
        return self.weights.get(body, 1.0)


class VertexState(ValueModel):
    """Per-session progress on a single vertex."""

    name: str
    description: str = ""
    domains: frozenset[str] = frozenset()
    sub_topics: tuple[str, ...] = ()

    best_score: int = p.Field(default=0, ge=0, le=5)
    quadrant: Quadrant | None = None
    probe_count: int = p.Field(default=0, ge=0)
    filled: bool = False
    corrected: bool = False
    probed_layers: tuple[ProbeLayer, ...] = ()

    @classmethod
    def from_definition(cls, definition: VertexDefinition) -> VertexState:
        return cls(
            name=definition.name,
            description=definition.description,
            domains=definition.domains,
            sub_topics=definition.sub_topics,
        )

    @property
    def probed(self) -> bool:
        return self.probe_count > 0
