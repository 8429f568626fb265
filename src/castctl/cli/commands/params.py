"""Shared click parameters and context helpers for device commands."""

from typing import Any

import click

from castctl.models import AppConfig, CommandContext


def host_argument() -> click.Argument:
    return click.Argument(["host"])


def port_option() -> click.Option:
    return click.Option(
        ["--port", "-p"],
        type=click.IntRange(1, 65535),
        default=None,
        help="Device port (default: 8009, or 'default_port' from the config)",
    )


def app_argument() -> click.Argument:
    return click.Argument(["app_id"], metavar="APP")


def namespace_option() -> click.Option:
    return click.Option(["--namespace", "-n"], default=None, help="Message namespace (urn:x-cast:...)")


def device_context(command: str, args: dict[str, Any], config: AppConfig, **fields: Any) -> CommandContext:
    """Build the CommandContext of a device command from parsed arguments."""
    return CommandContext(
        command=command,
        host=args["host"],
        port=args.get("port") or config.default_port,
        **fields,
    )
