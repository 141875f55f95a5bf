"""Main module for cli tool."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import asyncclick as click
from mashumaro.exceptions import InvalidFieldValue, MissingField
from rich.logging import RichHandler

from fastmile import Credentials, Gateway, GatewayConfig
from fastmile.gatewayconfig import DEFAULT_CONFIG_FILE, load_config

from .common import CatchAllExceptions, json_formatter_cb


def build_config(
    stored: dict[str, Any],
    *,
    host: str | None,
    timeout: int | None,
    username: str | None,
    password: str | None,
    status_path: str | None = None,
) -> GatewayConfig:
    """Merge the stored configuration with command line values.

    Values given on the command line take precedence.
    """
    try:
        config = GatewayConfig.from_dict(stored)
    except (MissingField, InvalidFieldValue, TypeError, ValueError) as ex:
        logging.warning("Ignoring invalid stored configuration: %s", ex)
        config = GatewayConfig()

    if host:
        config.host = host
    if timeout:
        config.timeout = timeout
    if status_path:
        config.status_path = status_path
    stored_credentials = config.credentials or Credentials()
    username = username or stored_credentials.username
    password = password or stored_credentials.password
    config.credentials = Credentials(username, password) if username else None
    return config


@click.group(
    invoke_without_command=True,
    cls=CatchAllExceptions(click.Group),
    result_callback=json_formatter_cb,
)
@click.option(
    "--host",
    envvar="FASTMILE_HOST",
    required=False,
    help="The host name or IP address of the gateway. Defaults to 192.168.1.1",
)
@click.option(
    "--username",
    "-u",
    default=None,
    required=False,
    envvar="FASTMILE_USERNAME",
    help="Username of the gateway web admin account.",
)
@click.option(
    "--password",
    "-p",
    default=None,
    required=False,
    envvar="FASTMILE_PASSWORD",
    help="Password of the gateway web admin account.",
)
@click.option(
    "--timeout",
    envvar="FASTMILE_TIMEOUT",
    default=None,
    type=int,
    required=False,
    help="Timeout in seconds for gateway requests. Defaults to 5",
)
@click.option(
    "--path",
    "status_path",
    envvar="FASTMILE_PATH",
    default=None,
    required=False,
    help="Path of the legacy status api. Defaults to /prelogin_status_web_app.cgi",
)
@click.option(
    "--config-file",
    envvar="FASTMILE_CONFIG_FILE",
    default=str(DEFAULT_CONFIG_FILE),
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file holding saved credentials and defaults.",
)
@click.option(
    "-d",
    "--debug",
    envvar="FASTMILE_DEBUG",
    default=False,
    is_flag=True,
    help="Print debug output",
)
@click.option(
    "--json/--no-json",
    envvar="FASTMILE_JSON",
    default=False,
    is_flag=True,
    help="Output command results as JSON.",
)
@click.version_option(package_name="python-fastmile")
@click.pass_context
async def cli(
    ctx, host, username, password, timeout, status_path, config_file, debug, json
):
    """A tool for managing Nokia FastMile cellular gateways."""
    # no need to perform any checks if we are just displaying the help
    if "--help" in sys.argv:
        # Context object is required to avoid crashing on sub-groups
        ctx.obj = object()
        return

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_time=False)],
    )

    config = build_config(
        load_config(config_file),
        host=host,
        timeout=timeout,
        username=username,
        password=password,
        status_path=status_path,
    )
    gateway = Gateway(config)

    @asynccontextmanager
    async def async_wrapped_gateway(gateway: Gateway):
        try:
            yield gateway
        finally:
            await gateway.close()

    ctx.obj = await ctx.with_async_resource(async_wrapped_gateway(gateway))

    if ctx.invoked_subcommand is None:
        from .status import status

        return await ctx.invoke(status)


def _register_commands() -> None:
    from .config import config
    from .control import reboot, reconnect
    from .login import login
    from .status import status

    for command in (status, login, reconnect, reboot, config):
        cli.add_command(command)
    cli.add_command(reboot, name="restart")


_register_commands()
