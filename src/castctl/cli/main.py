"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional

import click

from castctl import __version__
from castctl.cli.registry import CommandRegistry, CommandSpec
from castctl.cli.state import CliState
from castctl.exceptions import CastCtlError, format_error_for_display
from castctl.models import AppConfig, CommandState

from .commands import build_registry, config

logger = logging.getLogger(__name__)

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path]) -> None:
    """
    Configure logging for the application.

    Command progress is reported through logging, so the console handler is
    always installed on stderr.

    Args:
        verbose: Verbosity count (0 = INFO, 1+ = DEBUG for castctl loggers)
        debug: If True, DEBUG for every logger, including pychromecast and zeroconf
        log_file: Also write the log to this file (rotating, optional)
    """
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in [h for h in root_logger.handlers if getattr(h, "castctl", False)]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.castctl = True
    root_logger.addHandler(console_handler)

    if log_file:
        # Rotating file handler (keeps last 5 files, max 10MB each)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.castctl = True
        root_logger.addHandler(file_handler)

    # castctl DEBUG records go to the console with -v and always to the log file
    castctl_level = logging.DEBUG if (verbose or log_file) and not debug else logging.NOTSET
    logging.getLogger("castctl").setLevel(castctl_level)

    logger.debug(f"Logging configured: level={logging.getLevelName(level)}, file={log_file}")


def create_transport():
    """Build the event loop and the Cast transport that posts onto it."""
    # Lazy import keeps pychromecast and zeroconf out of --help and config commands
    from castctl.transport import EventLoop
    from castctl.transport.chromecast import ChromecastTransport

    loop = EventLoop()
    return loop, ChromecastTransport(loop)


def report_error(error: Exception) -> None:
    """Show a clean error message without traceback."""
    user_message, recovery_hint = format_error_for_display(error)
    click.echo(f"Error: {user_message}", err=True)
    if recovery_hint:
        click.echo(recovery_hint, err=True)


def run_command(ctx: click.Context, spec: CommandSpec, args: dict[str, Any]) -> None:
    """Build the orchestrator for ``spec`` and run it to completion."""
    from castctl.orchestration import CommandRunner

    state: CliState = ctx.obj
    try:
        app_config = state.config
        loop, transport = create_transport()
        command = spec.build(args, app_config, transport)
        final_state = CommandRunner(loop).run(command)
    except CastCtlError as e:
        logger.debug(f"{spec.name} aborted: {e.technical_message}", exc_info=True)
        report_error(e)
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Error running {spec.name}")
        report_error(e)
        sys.exit(1)

    if final_state == CommandState.FAILED:
        ctx.exit(1)


def make_command(spec: CommandSpec) -> click.Command:
    """Turn a CommandSpec into a click command."""

    @click.pass_context
    def callback(ctx: click.Context, **kwargs: Any) -> None:
        run_command(ctx, spec, kwargs)

    return click.Command(
        name=spec.name,
        params=spec.click_params(),
        callback=callback,
        help=spec.help,
    )


def _state(ctx: click.Context) -> CliState:
    root = ctx.find_root()
    if root.obj is None:
        root.obj = CliState(root.params.get("config_path"))
    return root.obj


class CastGroup(click.Group):
    """
    Group whose device commands come from a CommandRegistry.

    Launchers from the configuration file appear as commands next to the
    built-ins, so the registry is built from the configuration before the
    subcommand is resolved.
    """

    def registry(self, ctx: click.Context) -> CommandRegistry:
        registry = ctx.meta.get("castctl.registry")
        if registry is None:
            try:
                app_config = _state(ctx).config
            except CastCtlError as e:
                # Reported when a command needs the config
                logger.debug(f"Using default launchers: {e.technical_message}")
                app_config = AppConfig()
            registry = build_registry(app_config)
            ctx.meta["castctl.registry"] = registry
        return registry

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self.registry(ctx).names()))

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        spec = self.registry(ctx).get(cmd_name)
        return make_command(spec) if spec is not None else None


@click.group(cls=CastGroup)
@click.version_option(version=__version__, prog_name="castctl")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Show castctl debug messages'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable DEBUG logging for everything, including pychromecast'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Also write the log to this file'
)
@click.option(
    '--config', 'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar='CASTCTL_CONFIG',
    help='Configuration file (default: ~/.castctl/config.json)'
)
@click.pass_context
def cli(ctx, verbose: int, debug: bool, log_file: Optional[Path], config_path: Optional[Path]):
    """
    castctl - control Cast receivers from the command line.

    \b
    Examples:
      # Watch devices appear on the network
      castctl discover

      # Show what a device is doing
      castctl status 192.168.1.20

      # Show text with the hello-text receiver
      castctl hello 192.168.1.20 Hello World

      # Open a page with the DashCast launcher
      castctl dashcast 192.168.1.20 https://example.com

      # Play tic-tac-toe against a receiver
      castctl tictactoe 192.168.1.20 <APP_ID>
    """
    setup_logging(verbose, debug, log_file)
    _state(ctx)


cli.add_command(config)


if __name__ == "__main__":
    cli()
