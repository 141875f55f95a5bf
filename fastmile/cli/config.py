"""Module for the cli config command."""

from __future__ import annotations

import asyncclick as click

from fastmile.gatewayconfig import load_config

from .common import echo


@click.command()
@click.pass_context
async def config(ctx: click.Context):
    """Show the saved configuration."""
    path = ctx.find_root().params["config_file"]
    stored = load_config(path)
    if not stored:
        echo("[yellow]No configuration file found.[/yellow]")
        echo("[cyan]To save credentials, use:[/cyan]")
        echo("  fastmile -u <username> -p <password> login --save-config")
        return None

    credentials = stored.get("credentials") or {}
    echo(f"[bold cyan]Saved configuration ({path}):[/bold cyan]\n")
    echo(f"[yellow]Username:[/yellow] {credentials.get('username') or 'Not set'}")
    echo(
        f"[yellow]Password:[/yellow] "
        f"{'********' if credentials.get('password') else 'Not set'}"
    )
    echo(f"[yellow]Hostname:[/yellow] {stored.get('host') or 'Not set'}")
    echo(f"[yellow]Wait time:[/yellow] {stored.get('wait_time', 1)} seconds")
    echo(f"[yellow]APN:[/yellow] {stored.get('apn') or 'internet'}")
    if credentials.get("password"):
        stored["credentials"] = {**credentials, "password": "********"}
    return stored
