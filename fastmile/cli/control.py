"""Module for cli commands changing the gateway state."""

from __future__ import annotations

import asyncclick as click

from fastmile import Gateway

from .common import echo, login, pass_gateway
from .status import show_status


@click.command()
@click.option("--apn", default=None, help="Access point name. Defaults to internet")
@click.option(
    "--wait",
    "wait_time",
    type=int,
    default=None,
    help="Seconds to keep the APN down. Defaults to 1",
)
@pass_gateway
async def reconnect(gateway: Gateway, apn: str | None, wait_time: int | None):
    """Reconnect the cellular link by cycling the APN."""
    await login(gateway)
    apn = apn or gateway.config.apn
    if wait_time is None:
        wait_time = gateway.config.wait_time

    echo(f"Bringing APN {apn} down, up again after {wait_time} seconds...")
    response = await gateway.reconnect(apn, wait_time)
    echo("[bold green]Reconnection successful![/bold green]\n")

    echo("[cyan]Current gateway status:[/cyan]\n")
    await show_status(gateway, "table", "all")
    return response


@click.command()
@pass_gateway
async def reboot(gateway: Gateway):
    """Reboot the gateway."""
    await login(gateway)
    echo("Sending reboot command...")
    response = await gateway.reboot()
    if response is None:
        echo("Gateway closed the connection, reboot is in progress")
    echo("[bold yellow]Gateway is rebooting...[/bold yellow]")
    echo(
        "[cyan]This may take 1-2 minutes. "
        "The gateway will be unavailable during this time.[/cyan]"
    )
    return response
