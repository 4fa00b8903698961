"""Slow-path deep analysis of probe answers."""

__all__ = [
    "BackgroundAnalyzer",
    "DeepVerdict",
    "FALLBACK_REASONING",
    "confidence_calibration",
    "overall_strength",
    "render_context_injection",
    "session_insights",
    "suggest_next_layer",
]

from .analyzer import BackgroundAnalyzer, confidence_calibration, FALLBACK_REASONING, overall_strength, \
    session_insights, suggest_next_layer
from .context import render_context_injection
from .verdict import DeepVerdict
