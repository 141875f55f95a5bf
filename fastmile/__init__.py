"""Python interface for the web app api of Nokia FastMile cellular gateways.

The :class:`Gateway` class wraps login, control and status::

>>> from fastmile import Gateway, GatewayConfig, Credentials
>>> credentials = Credentials("admin", "pw")
>>> gateway = Gateway(GatewayConfig("192.168.1.1", credentials=credentials))
>>> await gateway.login()
>>> await gateway.reboot()

Errors are raised as subclasses of :class:`FastmileException` and are expected
to be handled by the user of the library.
"""

from importlib.metadata import version

from fastmile.auth import AuthState, NonceInfo, SaltInfo, WebAppAuth
from fastmile.control import ApnSettings, ControlFunction, GatewayControl
from fastmile.credentials import Credentials
from fastmile.exceptions import (
    AuthenticationFailed,
    DecodeError,
    FastmileException,
    OperationFailed,
    TimeoutError,
    TransportError,
)
from fastmile.gateway import Gateway
from fastmile.gatewayconfig import GatewayConfig, Ipv6Policy
from fastmile.session import SessionContext
from fastmile.status import DetailedStatus, GatewayStatus, LegacyStatus

__version__ = version("python-fastmile")


__all__ = [
    "Gateway",
    "GatewayConfig",
    "Ipv6Policy",
    "Credentials",
    "SessionContext",
    "WebAppAuth",
    "AuthState",
    "NonceInfo",
    "SaltInfo",
    "GatewayControl",
    "ControlFunction",
    "ApnSettings",
    "GatewayStatus",
    "DetailedStatus",
    "LegacyStatus",
    "FastmileException",
    "TransportError",
    "TimeoutError",
    "DecodeError",
    "AuthenticationFailed",
    "OperationFailed",
]
