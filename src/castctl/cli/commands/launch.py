"""run, hello and the configured URL launchers."""

import click

from castctl.cli.registry import CommandSpec
from castctl.models import UrlLauncher
from castctl.orchestration import RunCommand, SendCommand

from .params import app_argument, device_context, host_argument, namespace_option, port_option


def _text_argument() -> click.Argument:
    return click.Argument(["text"], nargs=-1, required=True)


def _url_argument() -> click.Argument:
    return click.Argument(["url"])


def _build_hello(args, config, transport):
    context = device_context(
        "hello",
        args,
        config,
        app_id=config.hello.app_id,
        namespace=config.hello.namespace,
        payload=" ".join(args["text"]),
    )
    return SendCommand(
        context, transport, config, wait_for_ack=True, grace_period=config.hello_grace_period
    )


RUN = CommandSpec(
    name="run",
    help="Launch APP on HOST, optionally opening a namespace, then disconnect.",
    build=lambda args, config, transport: RunCommand(
        device_context("run", args, config, app_id=args["app_id"], namespace=args.get("namespace")),
        transport,
        config,
    ),
    params=(host_argument, app_argument, port_option, namespace_option),
)

HELLO = CommandSpec(
    name="hello",
    help="Show TEXT on HOST with the hello-text receiver.",
    build=_build_hello,
    params=(host_argument, _text_argument, port_option),
)


def launcher_spec(name: str, launcher: UrlLauncher) -> CommandSpec:
    """Command that opens a URL with ``launcher`` and disconnects right away."""

    def build(args, config, transport):
        context = device_context(
            name,
            args,
            config,
            app_id=launcher.app_id,
            namespace=launcher.namespace,
            payload=launcher.build_payload(args["url"]),
        )
        return SendCommand(context, transport, config, wait_for_ack=False)

    return CommandSpec(
        name=name,
        help=launcher.description or f"Open URL on HOST with application {launcher.app_id}.",
        build=build,
        params=(host_argument, _url_argument, port_option),
    )
