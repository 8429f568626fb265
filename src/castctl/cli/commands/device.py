"""discover, status and watch."""

import click

from castctl.cli.registry import CommandSpec
from castctl.models import CommandContext
from castctl.orchestration import DiscoverCommand, StatusCommand, WatchCommand

from .params import device_context, host_argument, port_option


def _timeout_option() -> click.Option:
    return click.Option(
        ["--timeout", "-t"],
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Stop after this many seconds (default: run until Ctrl+C)",
    )


def _app_option() -> click.Option:
    return click.Option(["--app", "-a", "app_id"], default=None, help="Launch APP and watch its messages")


def _build_discover(args, config, transport):
    if args.get("timeout") is not None:
        config = config.model_copy(update={"discover_timeout": args["timeout"]})
    return DiscoverCommand(CommandContext(command="discover"), transport, config)


DISCOVER = CommandSpec(
    name="discover",
    help="List devices as they appear and disappear on the network.",
    build=_build_discover,
    params=(_timeout_option,),
)

STATUS = CommandSpec(
    name="status",
    help="Show the receiver status of HOST.",
    build=lambda args, config, transport: StatusCommand(
        device_context("status", args, config), transport, config
    ),
    params=(host_argument, port_option),
)

WATCH = CommandSpec(
    name="watch",
    help="Log messages from HOST until interrupted.",
    build=lambda args, config, transport: WatchCommand(
        device_context("watch", args, config, app_id=args.get("app_id")), transport, config
    ),
    params=(host_argument, port_option, _app_option),
)
