"""tictactoe."""

import click

from castctl.cli.registry import CommandSpec
from castctl.orchestration import TicTacToeCommand

from .params import app_argument, device_context, host_argument, namespace_option, port_option


def _name_option() -> click.Option:
    return click.Option(["--name"], default=None, help="Player name sent when joining")


def _build_tictactoe(args, config, transport):
    context = device_context(
        "tictactoe",
        args,
        config,
        app_id=args["app_id"],
        namespace=args.get("namespace") or config.tictactoe.namespace,
    )
    return TicTacToeCommand(
        context,
        transport,
        config,
        player_name=args.get("name") or config.tictactoe.player_name,
    )


TICTACTOE = CommandSpec(
    name="tictactoe",
    help="Join the tic-tac-toe game running as APP on HOST and play random moves.",
    build=_build_tictactoe,
    params=(host_argument, app_argument, port_option, namespace_option, _name_option),
)
