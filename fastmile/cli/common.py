"""Common cli module."""

from __future__ import annotations

import asyncio
import json
import sys
from gettext import gettext
from typing import Any, NoReturn

import asyncclick as click
from rich import print as _echo

from fastmile import (
    AuthenticationFailed,
    DecodeError,
    Gateway,
    OperationFailed,
    SessionContext,
    TimeoutError,
    TransportError,
)

pass_gateway = click.make_pass_decorator(Gateway)


def echo(*args, **kwargs) -> None:
    """Print a message."""
    ctx = click.get_current_context().find_root()
    if "json" not in ctx.params or ctx.params["json"] is False:
        _echo(*args, **kwargs)


def error(msg: str) -> NoReturn:
    """Print an error and exit."""
    echo(f"[bold red]{msg}[/bold red]")
    sys.exit(1)


def json_formatter_cb(result: Any, **kwargs) -> None:
    """Format and output the result as JSON, if requested."""
    if not kwargs.get("json") or result is None:
        return

    def to_serializable(val):
        if isinstance(val, SessionContext):
            return val.to_dict()
        return str(val)

    json_content = json.dumps(result, indent=4, default=to_serializable)
    print(json_content)


async def login(gateway: Gateway) -> SessionContext:
    """Log in to the gateway, exiting if no credentials are configured."""
    credentials = gateway.config.credentials
    if not credentials or not credentials.username or not credentials.password:
        error(
            "Username and password are required, use --username and --password "
            "or save them with 'fastmile login --save-config'"
        )
    echo(f"[cyan]Connecting to {gateway.host}...[/cyan]")
    session = await gateway.login()
    echo("[green]Authenticated[/green]")
    return session


def describe_error(exc: Exception) -> str:
    """Return a message telling the failure kinds apart."""
    if isinstance(exc, AuthenticationFailed):
        return f"Login rejected: {exc}"
    if isinstance(exc, TimeoutError):
        return f"Gateway did not answer in time: {exc}"
    if isinstance(exc, TransportError):
        return f"Unable to reach the gateway: {exc}"
    if isinstance(exc, DecodeError):
        return f"Unexpected response from the gateway: {exc}"
    if isinstance(exc, OperationFailed):
        return f"Gateway rejected the request: {exc}"
    return f"Raised error: {exc}"


def CatchAllExceptions(cls):
    """Capture all exceptions and prints them nicely.

    Idea from https://stackoverflow.com/a/44347763 and
    https://stackoverflow.com/questions/52213375
    """

    def _handle_exception(debug, exc) -> None:
        if isinstance(exc, click.ClickException):
            raise
        # Handle exit request from click.
        if isinstance(exc, click.exceptions.Exit):
            sys.exit(exc.exit_code)
        if isinstance(exc, click.exceptions.Abort):
            sys.exit(0)

        echo(f"[bold red]{describe_error(exc)}[/bold red]")
        if debug:
            raise
        echo("Run with --debug enabled to see stacktrace")
        sys.exit(1)

    class _CommandCls(cls):
        _debug = False

        async def make_context(self, info_name, args, parent=None, **extra):
            self._debug = any([arg for arg in args if arg in ["--debug", "-d"]])
            try:
                return await super().make_context(
                    info_name, args, parent=parent, **extra
                )
            except Exception as exc:
                _handle_exception(self._debug, exc)

        async def invoke(self, ctx):
            try:
                return await super().invoke(ctx)
            except Exception as exc:
                _handle_exception(self._debug, exc)

        def __call__(self, *args, **kwargs):
            """Run the coroutine in the event loop and print any exceptions.

            python click catches KeyboardInterrupt in main, raises Abort()
            and does sys.exit. asyncclick doesn't properly handle a coroutine
            receiving CancelledError on a KeyboardInterrupt, so we catch the
            KeyboardInterrupt here once asyncio.run has re-raised it. This
            avoids large stacktraces when a user presses Ctrl-C.
            """
            try:
                asyncio.run(self.main(*args, **kwargs))
            except KeyboardInterrupt:
                click.echo(gettext("\nAborted!"), file=sys.stderr)
                sys.exit(1)

    return _CommandCls
