"""Config command implementations."""

import click

from castctl.exceptions import CastCtlError
from castctl.models import AppConfig


def _echo_error(error: CastCtlError) -> None:
    click.echo(f"Error: {error.user_message}", err=True)
    if error.recovery_hint:
        click.echo(error.recovery_hint, err=True)


@click.group(name="config")
def config():
    """Inspect and create the configuration file."""
    pass


@config.command(name="path")
@click.pass_obj
def config_path(state):
    """Print the configuration file path."""
    click.echo(str(state.config_path))


@config.command(name="show")
@click.pass_obj
def config_show(state):
    """Print the effective configuration as JSON."""
    try:
        loaded = state.config
    except CastCtlError as e:
        _echo_error(e)
        raise SystemExit(1)

    source = state.config_path if state.config_path.exists() else "built-in defaults"
    click.echo(f"# {source}")
    click.echo(loaded.model_dump_json(indent=2))


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@click.pass_obj
def config_init(state, force: bool):
    """Write the default configuration to the configuration file."""
    path = state.config_path
    if path.exists() and not force:
        click.echo(f"{path} already exists (use --force to overwrite)", err=True)
        raise SystemExit(1)

    AppConfig().save(path)
    click.echo(f"[OK] Wrote default configuration to {path}")
