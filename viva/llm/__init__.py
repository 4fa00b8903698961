"""LLM integration using LangChain."""

__all__ = [
    # Provider types
    "ProviderType",
    # Analysis
    "BackgroundAnalyzer",
    "DeepVerdict",
    "render_context_injection",
    # Tools
    "make_exam_tools",
]

from .analysis import BackgroundAnalyzer, DeepVerdict, render_context_injection
from .provider import ProviderType
from .tools import make_exam_tools
