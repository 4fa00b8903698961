from __future__ import annotations

import logging
import typing as t

from viva.model import TargetBody, VertexDefinition, VertexState

from .catalog import CATALOG
from .errors import InvalidBodyError

logger = logging.getLogger(__name__)


def parse_body(body: TargetBody | str) -> TargetBody:
    """Accept a ``TargetBody`` or its name, case-insensitively."""
    if isinstance(body, TargetBody):
        return body
    for member in TargetBody:
        if member.value.lower() == body.strip().lower():
            return member
    raise InvalidBodyError(f"unknown body {body!r}, expected one of {[m.value for m in TargetBody]}")


def build_queue(
    domains: t.Iterable[str],
    body: TargetBody | str,
    catalog: t.Sequence[VertexDefinition] = CATALOG,
) -> tuple[tuple[str, ...], dict[str, VertexState]]:
    """Build the vertex traversal order for a new session.

    An empty ``domains`` selects every vertex. For a single body the
    filtered vertices are stable-sorted by descending body weight, so equal
    weights keep catalog order; ``TargetBody.Both`` keeps catalog order.
    """
    target = parse_body(body)
    requested = set(domains)

    selected = [v for v in catalog if not requested or (v.domains & requested)]
    if target is not TargetBody.Both:
        selected = sorted(selected, key=lambda v: -v.weight_for(target))

    queue = tuple(v.name for v in selected)
    states = {v.name: VertexState.from_definition(v) for v in selected}
    logger.debug(
        "built vertex queue",
        extra={
            "body": target.value,
            "domains": sorted(requested),
            "queue": list(queue),
        },
    )
    return queue, states
