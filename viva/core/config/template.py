from .base import BaseSettings


class TemplateSettings(BaseSettings):
    # relative to the repository root
    llm_path: str = "viva/templates/llm"
