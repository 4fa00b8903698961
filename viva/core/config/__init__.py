__all__ = [
    "AnalysisSettings",
    "ExamSettings",
    "LLMSecrets",
    "LLMSettings",
    "LoggingSettings",
    "ModelSettings",
    "Secrets",
    "Settings",
    "TemplateSettings",
]


from .exam import AnalysisSettings, ExamSettings
from .llm import LLMSettings, ModelSettings
from .logging import LoggingSettings
from .secrets import LLMSecrets, Secrets
from .settings import Settings
from .template import TemplateSettings
