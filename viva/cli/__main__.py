from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
from pathlib import Path

import pydantic as p

import viva
import viva.lib.cli as click
from viva.core import VivaContainer
from viva.model import DeploymentEnvironment

_RepositoryRoot = Path(viva.__file__).resolve().parents[1]


class VivaCommands(click.Group):
    """Loads each command group from ``viva.cli.<name>`` on first use."""

    commands_available = ("exam",)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # command modules loaded so far, wired into the container at boot
        self.loaded: list[types.ModuleType] = []

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands_available)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in self.commands_available:
            return None
        mod = importlib.import_module(f"viva.cli.{cmd_name}")
        self.loaded.append(mod)
        return getattr(mod, cmd_name)


@click.group(cls=VivaCommands)
@click.option("-E", "--env", default=DeploymentEnvironment.Local.value, type=click.EnumType(DeploymentEnvironment))
@click.option("-c", "--config-root", default=str(_RepositoryRoot / "config"), type=click.DirectoryURLType())
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a configuration value, e.g. -o exam.analysis.enabled=false",
)
@click.option("-D", "--debug", is_flag=True, default=False)
@click.pass_context
def main(
    ctx: click.Context,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    override: tuple[str, ...],
    debug: bool,
):
    """Adaptive oral examination tools."""
    group = ctx.command
    assert isinstance(group, VivaCommands)
    VivaContainer.boot(
        ctx.obj,
        debug=debug,
        env=env,
        config_root=config_root,
        override=override,
        wiring=tuple(group.loaded),
    )


def execute_command(*_args: str) -> None:
    threading.current_thread().name = "viva-0"
    args = list(_args or sys.argv)
    prog = Path(args[0]).name
    container = VivaContainer()
    debugging = "-D" in args[1:] or "--debug" in args[1:]

    try:
        with main.make_context(prog, args=args[1:]) as ctx:
            ctx.obj = container
            main.invoke(ctx)
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except click.ClickException as ex:
        ex.show()
        sys.exit(ex.exit_code)
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red") + str(ex), file=sys.stderr)
        if debugging:
            traceback.print_exc()
        sys.exit(1)
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    execute_command(*sys.argv)
