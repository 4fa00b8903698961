import pydantic as p
from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import PydanticBaseSettingsSource

from viva.model import DeploymentEnvironment

from .base import BaseSettings
from .exam import ExamSettings
from .llm import LLMSettings
from .logging import LoggingSettings
from .source import OverrideSettingsSource, YAMLCascadingSettingsSource
from .template import TemplateSettings


class Settings(BaseSettings):
    """Whole application configuration.

    ``root``, ``env`` and ``override`` locate the documents; every other field
    is a section read from ``<root>/<section>.yaml`` and its per-environment
    counterpart, with command-line overrides applied on top.
    """

    root: p.FileUrl
    env: DeploymentEnvironment
    override: tuple[str, ...]

    # no usable default, logging.yaml must exist
    logging: LoggingSettings = p.Field(default=..., validate_default=True)
    llm: LLMSettings = p.Field(default_factory=LLMSettings)
    template: TemplateSettings = p.Field(default_factory=TemplateSettings)
    exam: ExamSettings = p.Field(default_factory=ExamSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # earlier sources win, so overrides sit ahead of the YAML documents
        return init_settings, OverrideSettingsSource(settings_cls), YAMLCascadingSettingsSource(settings_cls)
