"""Session authenticated control operations.

Both operations post a json envelope carrying the csrf token of the session,
with the session id sent as the ``sid`` cookie. The gateway validates both,
nothing is checked locally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mashumaro import field_options
from mashumaro.config import BaseConfig
from yarl import URL

from .exceptions import OperationFailed, TransportError
from .gatewayconfig import DEFAULT_APN, GatewayConfig, Ipv6Policy
from .httpclient import HttpClient
from .json import DataClassJSONMixin
from .json import dumps as json_dumps
from .session import SessionContext

_LOGGER = logging.getLogger(__name__)

SERVICE_INTERFACE = "Nokia.GenericService"
SERVICE_NAME = "OAM"


class ControlFunction(Enum):
    """Functions of the OAM service."""

    ModifyAPN = "ModifyAPN"
    Reboot = "Reboot"


@dataclass(frozen=True)
class ApnSettings(DataClassJSONMixin):
    """One APN instance as expected by ModifyAPN.

    Only the name and the internet and IPv6 flags are tunable, the rest are
    constants of the gateway schema.
    """

    class Config(BaseConfig):
        """Serialization config."""

        serialize_by_alias = True

    access_point_name: str = field(metadata=field_options(alias="AccessPointName"))
    internet: bool = field(metadata=field_options(alias="INTERNET"))
    ipv6: bool = field(metadata=field_options(alias="IPv6"))
    work_mode: str = field(
        default="RouteMode", metadata=field_options(alias="WorkMode")
    )
    voip: str | None = field(default=None, metadata=field_options(alias="VOIP"))
    iptv: bool = field(default=False, metadata=field_options(alias="IPTV"))
    user_name: str = field(default="", metadata=field_options(alias="UserName"))
    password: str = field(
        default="", repr=False, metadata=field_options(alias="Password")
    )
    confirm_password: str | None = field(
        default=None, repr=False, metadata=field_options(alias="confirmPwd")
    )
    authentication_mode: str = field(
        default="None", metadata=field_options(alias="AuthenticationMode")
    )
    ipv4: bool = field(default=True, metadata=field_options(alias="IPv4"))
    ipv4_netmask: str = field(default="", metadata=field_options(alias="IPv4NetMask"))
    mtu_size: str = field(default="", metadata=field_options(alias="MTUSize"))
    apn_instance_id: int = field(
        default=1, metadata=field_options(alias="APNInstanceID")
    )
    ip_mode: int = field(default=3, metadata=field_options(alias="ipMode"))
    mtu_mode: str = field(default="Automatic", metadata=field_options(alias="mtuMode"))
    ethernet_interface: str = field(
        default="", metadata=field_options(alias="EthernetInterface")
    )
    vlan_id: int = field(default=0, metadata=field_options(alias="VLANID"))

    @property
    def services(self) -> str:
        """Services carried by the APN."""
        return "TR069,INTERNET" if self.internet else "TR069"

    @classmethod
    def create(
        cls,
        apn_name: str,
        enable_internet: bool,
        ipv6_policy: Ipv6Policy = Ipv6Policy.TrackInternet,
    ) -> ApnSettings:
        """Create the settings for bringing the APN up or down."""
        ipv6 = enable_internet if ipv6_policy is Ipv6Policy.TrackInternet else True
        return cls(access_point_name=apn_name, internet=enable_internet, ipv6=ipv6)

    def to_param(self) -> dict[str, Any]:
        """Return the paralist entry for the settings."""
        return {**self.to_dict(), "Services": self.services}


@dataclass(frozen=True)
class ControlEnvelope:
    """Json rpc style envelope of a control request."""

    function: ControlFunction
    csrf_token: str = field(repr=False)
    paralist: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the request body."""
        return {
            "version": 1,
            "csrf_token": self.csrf_token,
            "id": 1,
            "interface": SERVICE_INTERFACE,
            "service": SERVICE_NAME,
            "function": self.function.value,
            "paralist": self.paralist,
        }


class GatewayControl:
    """Control operations available once logged in."""

    SERVICE_PATH = "/service_function_web_app.cgi"
    REBOOT_PATH = "/reboot_web_app.cgi"
    JSON_HEADERS = {"Content-Type": "application/json"}

    def __init__(
        self,
        *,
        config: GatewayConfig,
        http_client: HttpClient | None = None,
    ) -> None:
        self._config = config
        self._host = config.host
        self._http_client = http_client or HttpClient(config)
        self._service_url = URL(f"http://{self._host}{self.SERVICE_PATH}")
        self._reboot_url = URL(f"http://{self._host}{self.REBOOT_PATH}")

    async def _send(
        self, url: URL, session: SessionContext, envelope: ControlEnvelope
    ) -> str:
        _LOGGER.debug("%s >> %s", self._host, envelope.function.value)
        status_code, response = await self._http_client.post(
            url,
            data=json_dumps(envelope.to_dict()).encode(),
            headers=self.JSON_HEADERS,
            cookies_dict=session.cookies,
            return_json=False,
        )
        _LOGGER.debug("%s << %s", self._host, response)
        if status_code != 200:
            raise OperationFailed(
                f"{self._host} rejected {envelope.function.value}: {response}",
                status_code=status_code,
            )
        return response

    async def modify_apn(
        self,
        session: SessionContext,
        enable_internet: bool,
        apn_name: str = DEFAULT_APN,
    ) -> str:
        """Bring the APN up or down and return the raw gateway response."""
        settings = ApnSettings.create(
            apn_name, enable_internet, self._config.ipv6_policy
        )
        envelope = ControlEnvelope(
            ControlFunction.ModifyAPN, session.token, [settings.to_param()]
        )
        return await self._send(self._service_url, session, envelope)

    async def reboot(self, session: SessionContext) -> str | None:
        """Reboot the gateway.

        The gateway usually goes down before answering. A dropped connection
        or read timeout after the request was sent returns None, failures
        before that are raised.
        """
        envelope = ControlEnvelope(ControlFunction.Reboot, session.token)
        try:
            return await self._send(self._reboot_url, session, envelope)
        except TransportError as ex:
            if not ex.request_sent:
                raise
            _LOGGER.debug(
                "%s dropped the connection after the reboot request: %s",
                self._host,
                ex,
            )
            return None

    async def close(self) -> None:
        """Close the http client."""
        await self._http_client.close()
