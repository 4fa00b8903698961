__all__ = [
    "BootConfiguration",
    "ExamContainer",
    "LLMContainer",
    "TemplateContainer",
    "VivaContainer",
    "create_chat_model",
]

from .exam import ExamContainer
from .llm import create_chat_model, LLMContainer
from .template import TemplateContainer
from .viva import BootConfiguration, VivaContainer
