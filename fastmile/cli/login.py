"""Module for the cli login command."""

from __future__ import annotations

import asyncclick as click

from fastmile import Gateway
from fastmile.gatewayconfig import save_config

from .common import echo, pass_gateway
from .common import login as login_gateway
from .status import show_status


@click.command()
@click.option(
    "--save-config",
    "-s",
    "save_config_",
    is_flag=True,
    help="Save the host and credentials to the configuration file.",
)
@pass_gateway
@click.pass_context
async def login(ctx: click.Context, gateway: Gateway, save_config_: bool):
    """Log in and show the authenticated gateway status."""
    session = await login_gateway(gateway)
    echo(f"[yellow]Session ID:[/yellow] {session.sid}")
    echo(f"[yellow]Token:[/yellow] {session.token}")

    if save_config_:
        path = save_config(gateway.config, ctx.find_root().params["config_file"])
        echo(f"[green]Configuration saved to {path}[/green]")

    echo("\n[cyan]Fetching gateway status...[/cyan]\n")
    await show_status(gateway, "table", "all")
    return session
