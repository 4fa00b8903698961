"""Prompt template environment."""

import pathlib

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Provider, ThreadSafeSingleton

import viva.lib.json
from viva.core import di


@di.inject
def provide_prompt_env(template_path: str, root_path: pathlib.Path = di.Provide["root"]) -> jinja2.Environment:
    """Jinja2 environment for LLM prompts, rooted at ``template_path`` under the repository.

    Prompts are plain text, so autoescape is off and block tags leave no
    stray whitespace behind. ``tojson`` goes through viva's JSON encoder.
    """
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(root_path / template_path),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    env.policies["json.dumps_function"] = viva.lib.json.dumps
    return env


class TemplateContainer(DeclarativeContainer):
    config: Configuration = Configuration(strict=True)
    llm: Provider[jinja2.Environment] = ThreadSafeSingleton(provide_prompt_env, config.llm_path)
