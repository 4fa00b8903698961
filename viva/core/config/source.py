import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import viva.lib.util as util
from viva.model import DeploymentEnvironment


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: t.Required[tuple[str, ...]]


# fields that locate the configuration rather than hold a section of it
LOCATOR_FIELDS: t.Final[frozenset[str]] = frozenset(CurrentState.__annotations__)


class SectionSource(PydanticBaseSettingsSource):
    """Supplies whole settings sections, one per top-level field.

    Subclasses implement ``read_section``, returning ``None`` when they have
    nothing for that section.
    """

    @property
    def state(self) -> CurrentState:
        # init kwargs are consulted first, so they are already in current_state
        return t.cast(CurrentState, self.current_state)

    def read_section(self, name: str) -> t.Any:
        raise NotImplementedError

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        return self.read_section(field_name), field_name, True

    def __call__(self) -> dict[str, t.Any]:
        sections: dict[str, t.Any] = {}
        for name in self.settings_cls.model_fields:
            if name in LOCATOR_FIELDS:
                continue
            try:
                value = self.read_section(name)
            except (OSError, yaml.YAMLError) as e:
                raise SettingsError(f"{type(self).__name__}: could not read section {name!r}: {e}") from e
            if value is not None:
                sections[name] = value
        return sections


class OverrideSettingsSource(SectionSource):
    """Apply ``-o a.b.c=value`` overrides on top of the YAML cascade.

    Values are parsed as YAML, so ``-o exam.analysis.enabled=false`` yields a
    boolean. Partial documents are deep-merged over the YAML cascade, which
    requires this source to be consulted before it.
    """

    @functools.cached_property
    def overrides(self) -> dict[str, t.Any]:
        tree: dict[str, t.Any] = {}
        for option in self.state["override"]:
            key, sep, raw = option.partition("=")
            if not sep or not key.strip():
                raise SettingsError(f"override {option!r} is not of the form key=value")
            *parents, leaf = key.strip().split(".")
            node = tree
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = yaml.safe_load(raw.strip())
        return tree

    def read_section(self, name: str) -> t.Any:
        return self.overrides.get(name)


class YAMLCascadingSettingsSource(SectionSource):
    """Read ``<root>/<section>.yaml``, then ``<root>/env.d/<env>/<section>.yaml``.

    Mappings from later files are deep-merged over earlier ones; anything else
    simply replaces what came before.
    """

    @functools.cached_property
    def directories(self) -> list[Path]:
        root = self.state["root"]
        if root.scheme != "file" or root.path is None:
            raise SettingsError(f"configuration root {root} is not a local directory")
        base = Path(root.path)
        env = self.state["env"]
        # local reads only the root documents
        if env is DeploymentEnvironment.Local:
            return [base]
        return [base, base / "env.d" / env.value]

    def read_section(self, name: str) -> t.Any:
        merged: t.Any = None
        for directory in self.directories:
            path = directory / f"{name}.yaml"
            if not path.exists():
                continue
            doc = yaml.safe_load(path.read_text(encoding="utf8"))
            if isinstance(merged, dict) and isinstance(doc, dict):
                merged = util.deep_update(t.cast(dict[t.Any, t.Any], merged), t.cast(dict[t.Any, t.Any], doc))
            elif doc is not None:
                merged = doc
        return merged
