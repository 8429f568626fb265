"""CLI commands for castctl."""

from castctl.cli.registry import CommandRegistry
from castctl.models import AppConfig

from .config import config
from .device import DISCOVER, STATUS, WATCH
from .game import TICTACTOE
from .launch import HELLO, RUN, launcher_spec

BUILTIN_SPECS = (DISCOVER, STATUS, WATCH, RUN, HELLO, TICTACTOE)


def build_registry(app_config: AppConfig) -> CommandRegistry:
    """Registry of the built-in commands plus the launchers in ``app_config``."""
    registry = CommandRegistry()
    for spec in BUILTIN_SPECS:
        registry.register(spec)
    for name, launcher in app_config.launchers.items():
        registry.register(launcher_spec(name, launcher))
    return registry


__all__ = ["BUILTIN_SPECS", "build_registry", "config", "launcher_spec"]
