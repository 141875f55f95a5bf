"""Module for HttpClient class."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from yarl import URL

from .exceptions import (
    DecodeError,
    TimeoutError,
    TransportError,
)
from .gatewayconfig import GatewayConfig
from .json import loads as json_loads

_LOGGER = logging.getLogger(__name__)


def get_cookie_jar() -> aiohttp.CookieJar:
    """Return a new cookie jar with the correct options for gateway communication."""
    return aiohttp.CookieJar(unsafe=True, quote_cookie=False)


class HttpClient:
    """HttpClient Class."""

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config
        self._client_session: aiohttp.ClientSession | None = None

    @property
    def client(self) -> aiohttp.ClientSession:
        """Return the underlying http client."""
        if self._config.http_client and issubclass(
            self._config.http_client.__class__, aiohttp.ClientSession
        ):
            return self._config.http_client

        if not self._client_session:
            self._client_session = aiohttp.ClientSession(cookie_jar=get_cookie_jar())
        return self._client_session

    async def get(
        self,
        url: URL,
        *,
        cookies_dict: dict[str, str] | None = None,
        return_json: bool = True,
    ) -> tuple[int, Any]:
        """Send an http get request to the gateway.

        The response body is decoded as json unless return_json is False.
        """
        return await self._request(
            "get", url, cookies_dict=cookies_dict, return_json=return_json
        )

    async def post(
        self,
        url: URL,
        *,
        data: bytes,
        headers: dict[str, str] | None = None,
        cookies_dict: dict[str, str] | None = None,
        return_json: bool = True,
    ) -> tuple[int, Any]:
        """Send an http post request to the gateway.

        Content-Length is always set from the encoded body.
        """
        headers = {**(headers or {}), "Content-Length": str(len(data))}
        return await self._request(
            "post",
            url,
            data=data,
            headers=headers,
            cookies_dict=cookies_dict,
            return_json=return_json,
        )

    async def _request(
        self,
        method: str,
        url: URL,
        *,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
        cookies_dict: dict[str, str] | None = None,
        return_json: bool,
    ) -> tuple[int, Any]:
        host = self._config.host
        _LOGGER.debug("%s to %s", method.upper(), url)
        self.client.cookie_jar.clear()
        if self._config.timeout is None:
            _LOGGER.warning("Request timeout is set to None.")
        # connect covers dns and connection setup, anything later means the
        # request was sent
        client_timeout = aiohttp.ClientTimeout(
            connect=self._config.timeout, sock_read=self._config.timeout
        )
        kwargs: dict[str, Any] = {
            "timeout": client_timeout,
            "cookies": cookies_dict,
            "headers": headers,
        }
        if data is not None:
            kwargs["data"] = data

        try:
            resp = await getattr(self.client, method)(url, **kwargs)
            async with resp:
                response_data: bytes = await resp.read()
        except aiohttp.ConnectionTimeoutError as ex:
            raise TimeoutError(
                f"Unable to connect to the gateway, timed out: {host}: {ex}",
                ex,
                request_sent=False,
            ) from ex
        except aiohttp.ClientConnectorError as ex:
            raise TransportError(
                f"Unable to connect to the gateway: {host}: {ex}",
                ex,
                request_sent=False,
            ) from ex
        except (aiohttp.ServerDisconnectedError, aiohttp.ClientOSError) as ex:
            raise TransportError(
                f"Gateway connection error: {host}: {ex}", ex, request_sent=True
            ) from ex
        except (aiohttp.ServerTimeoutError, asyncio.TimeoutError) as ex:
            raise TimeoutError(
                f"Unable to query the gateway, timed out: {host}: {ex}",
                ex,
                request_sent=True,
            ) from ex
        except aiohttp.ClientError as ex:
            raise TransportError(
                f"Unable to query the gateway: {host}: {ex}", ex
            ) from ex

        if resp.status != 200:
            _LOGGER.debug(
                "Gateway %s received status code %s with response %s",
                host,
                resp.status,
                str(response_data),
            )

        if not return_json:
            return resp.status, response_data.decode(errors="replace")

        try:
            return resp.status, json_loads(response_data)
        except ValueError as ex:
            raise DecodeError(
                f"Unable to decode response from {host} as json "
                f"(status {resp.status}): {response_data[:200]!r}"
            ) from ex

    async def close(self) -> None:
        """Close the ClientSession."""
        client = self._client_session
        self._client_session = None
        if client:
            await client.close()
