"""Module for the cli status command."""

from __future__ import annotations

import asyncio
from datetime import datetime

import asyncclick as click

from fastmile import FastmileException, Gateway
from fastmile.status import SECTION_NAMES

from .common import describe_error, echo, pass_gateway
from .formatter import FORMATS, format_compact, format_json, format_table


async def show_status(gateway: Gateway, output_format: str, section: str) -> dict:
    """Fetch the status and print it in output_format."""
    gateway_status = await gateway.status()
    if output_format == "json":
        click.echo(format_json(gateway_status, section))
    elif output_format == "compact":
        echo(format_compact(gateway_status, section))
    else:
        echo(format_table(gateway_status, section))
    return gateway_status.filtered(section)


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(FORMATS, case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--filter",
    "section",
    type=click.Choice(SECTION_NAMES, case_sensitive=False),
    default="all",
    show_default=True,
    help="Only show one section of the status.",
)
@click.option("--watch", "-w", is_flag=True, help="Refresh the status until stopped.")
@click.option(
    "--interval",
    "-i",
    type=int,
    default=5,
    show_default=True,
    help="Seconds between refreshes in watch mode.",
)
@pass_gateway
async def status(gateway: Gateway, output_format, section, watch, interval):
    """Show the gateway connection and radio status.

    Logs in first when credentials are available, the status is fetched
    without a session otherwise.
    """
    credentials = gateway.config.credentials
    if credentials and credentials.username and credentials.password:
        try:
            await gateway.login()
        except FastmileException as ex:
            echo(f"[yellow]Login failed, showing public status: {ex}[/yellow]")

    section = section.lower()
    if not watch:
        return await show_status(gateway, output_format.lower(), section)

    echo("[bold cyan]Starting watch mode... (Press Ctrl+C to exit)[/bold cyan]")
    while True:
        click.clear()
        echo(f"[bold]Last updated: {datetime.now():%X}[/bold]\n")
        try:
            await show_status(gateway, output_format.lower(), section)
        except FastmileException as ex:
            echo(f"[red]{describe_error(ex)}[/red]")
        await asyncio.sleep(interval)
