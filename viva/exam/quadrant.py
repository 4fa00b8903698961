from __future__ import annotations

from viva.model import Quadrant


def classify(score: int, confident: bool) -> Quadrant:
    """Map a 1-5 score and a confidence flag to a quadrant.

    Rules are evaluated in order and the first match wins. Both the session
    state machine and the background analyzer classify through this
    function so their quadrants stay comparable.
    """
    if score >= 4 and confident:
        return Quadrant.Solid
    if score >= 3 and not confident:
        return Quadrant.Underconfident
    if score >= 3 and confident:
        return Quadrant.Solid
    if score <= 2 and confident:
        return Quadrant.HypercorrectionTarget
    return Quadrant.Gap
