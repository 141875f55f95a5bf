from __future__ import annotations

import asyncio
import os
from unittest.mock import patch

import aiohttp
import pytest
from asyncclick.testing import CliRunner

from fastmile import Credentials, GatewayConfig

from .fakegateway import MOCK_PWD, MOCK_USER, MockGateway

MOCK_HOST = "127.0.0.1"


@pytest.fixture()
def mock_gateway(mocker):
    """Return a fake gateway answering all http requests."""
    gateway = MockGateway(MOCK_HOST)
    mocker.patch.object(aiohttp.ClientSession, "get", side_effect=gateway.get)
    mocker.patch.object(aiohttp.ClientSession, "post", side_effect=gateway.post)
    return gateway


@pytest.fixture()
def config():
    """Return a config with the credentials the fake gateway accepts."""
    return GatewayConfig(MOCK_HOST, credentials=Credentials(MOCK_USER, MOCK_PWD))


@pytest.fixture()
def runner():
    """Runner fixture that unsets the FASTMILE_ environment variables for tests."""
    fastmile_vars = {k: None for k in os.environ if k.startswith("FASTMILE_")}
    return CliRunner(env=fastmile_vars)


@pytest.fixture(autouse=True, scope="session")
def asyncio_sleep_fixture():  # noqa: PT004
    """Patch sleep to prevent tests actually waiting."""
    orig_asyncio_sleep = asyncio.sleep

    async def _asyncio_sleep(*_, **__):
        await orig_asyncio_sleep(0)

    with patch("asyncio.sleep", side_effect=_asyncio_sleep):
        yield
