"""Interface for a cellular gateway.

>>> from fastmile import Credentials, Gateway, GatewayConfig
>>> config = GatewayConfig("192.168.1.1", credentials=Credentials("admin", "pw"))
>>> async with Gateway(config) as gateway:
>>>     await gateway.login()
>>>     await gateway.reconnect()

A session is kept after :meth:`Gateway.login` but never refreshed; call
``login()`` again when the gateway starts rejecting requests.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from .auth import WebAppAuth
from .control import GatewayControl
from .exceptions import FastmileException
from .gatewayconfig import GatewayConfig
from .httpclient import HttpClient
from .session import SessionContext
from .status import GatewayStatus, fetch_status

_LOGGER = logging.getLogger(__name__)


class Gateway:
    """Gateway reachable through its web app api."""

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config
        self._http_client = HttpClient(config)
        self._auth = WebAppAuth(config=config, http_client=self._http_client)
        self._control = GatewayControl(config=config, http_client=self._http_client)
        self._session: SessionContext | None = None

    def __repr__(self) -> str:
        logged_in = "logged in" if self._session else "not logged in"
        return f"<Gateway at {self.host} - {logged_in}>"

    @property
    def host(self) -> str:
        """The gateway host."""
        return self._config.host

    @property
    def config(self) -> GatewayConfig:
        """The gateway configuration."""
        return self._config

    @property
    def session(self) -> SessionContext | None:
        """The session of the last successful login."""
        return self._session

    def _require_session(self) -> SessionContext:
        if self._session is None:
            raise FastmileException(f"Not logged in to {self.host}, call login() first")
        return self._session

    async def login(self) -> SessionContext:
        """Run a fresh login and keep the session."""
        self._session = None
        self._session = await self._auth.authenticate()
        return self._session

    async def modify_apn(
        self, enable_internet: bool, apn_name: str | None = None
    ) -> str:
        """Bring the APN up or down."""
        return await self._control.modify_apn(
            self._require_session(), enable_internet, apn_name or self._config.apn
        )

    async def reconnect(
        self, apn_name: str | None = None, wait_time: float | None = None
    ) -> str:
        """Bring the APN down, wait, and bring it up again.

        Returns the gateway response to bringing the APN up.
        """
        apn_name = apn_name or self._config.apn
        if wait_time is None:
            wait_time = self._config.wait_time
        await self.modify_apn(False, apn_name)
        _LOGGER.debug("%s: APN %s down, waiting %ss", self.host, apn_name, wait_time)
        await asyncio.sleep(wait_time)
        return await self.modify_apn(True, apn_name)

    async def reboot(self) -> str | None:
        """Reboot the gateway.

        The session is unusable afterwards and is dropped.
        """
        response = await self._control.reboot(self._require_session())
        self._session = None
        return response

    async def status(self) -> GatewayStatus:
        """Fetch the status, authenticated if logged in."""
        return await fetch_status(self._config, self._http_client, self._session)

    async def close(self) -> None:
        """Close the connection to the gateway."""
        self._session = None
        await self._http_client.close()

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
