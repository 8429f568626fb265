"""
Command registry.

Maps a command name to a CommandSpec that declares its click parameters and
builds its orchestrator. The CLI turns every spec into a click command; URL
launchers from the configuration are added as specs at runtime.

Example:
    ```python
    registry = CommandRegistry()
    registry.register(CommandSpec(
        name="status",
        help="Show receiver status.",
        params=(host_argument, port_option),
        build=lambda args, config, transport: StatusCommand(
            device_context("status", args, config), transport, config
        ),
    ))
    command = registry.get("status").build({"host": "192.0.2.1", "port": None}, config, transport)
    ```
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import click

from castctl.models import AppConfig
from castctl.orchestration import Command
from castctl.transport.protocols import Transport

# Names launchers from the configuration may not use
BUILTIN_COMMANDS = frozenset({"config", "discover", "hello", "run", "status", "tictactoe", "watch"})

Builder = Callable[[dict[str, Any], AppConfig, Transport], Command]


@dataclass(frozen=True)
class CommandSpec:
    """Argument shape and orchestrator factory of one command."""

    name: str
    help: str
    build: Builder
    params: tuple[Callable[[], click.Parameter], ...] = field(default_factory=tuple)

    def click_params(self) -> list[click.Parameter]:
        """Fresh click parameters (click objects must not be shared between commands)."""
        return [make() for make in self.params]


class CommandRegistry:
    """Ordered collection of command specs."""

    def __init__(self) -> None:
        self._specs: dict[str, CommandSpec] = {}

    def register(self, spec: CommandSpec) -> None:
        if spec.name in self._specs:
            raise ValueError(f"command '{spec.name}' is already registered")
        self._specs[spec.name] = spec

    def get(self, name: str) -> CommandSpec | None:
        return self._specs.get(name)

    def names(self) -> list[str]:
        return list(self._specs)

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._specs.values())

    def __contains__(self, name: str) -> bool:
        return name in self._specs
