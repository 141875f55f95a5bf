"""Configuration for connecting to a gateway.

A :class:`GatewayConfig` holds everything the client needs to reach and
authenticate against a gateway. It can be stored as json and loaded again:

>>> from fastmile import Credentials, GatewayConfig
>>> config = GatewayConfig("192.168.1.1", credentials=Credentials("admin", "pw"))
>>> save_config(config, path)
>>> GatewayConfig.from_dict(load_config(path)) == config
True

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Self

from aiohttp import ClientSession
from mashumaro import field_options
from mashumaro.config import BaseConfig
from mashumaro.types import SerializationStrategy

from .credentials import Credentials
from .json import DataClassJSONMixin
from .json import dumps as json_dumps
from .json import loads as json_loads

_LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "192.168.1.1"
DEFAULT_STATUS_PATH = "/prelogin_status_web_app.cgi"
DEFAULT_APN = "internet"
DEFAULT_CONFIG_FILE = Path("~/.config/fastmile/config.json")


class Ipv6Policy(Enum):
    """How the IPv6 flag of an APN is set when the APN is modified."""

    #: IPv6 follows the internet flag passed to modify_apn
    TrackInternet = "track_internet"
    #: IPv6 is always enabled
    AlwaysOn = "always_on"


class _DoNotSerialize(SerializationStrategy):
    def serialize(self, value: Any) -> None:
        return None

    def deserialize(self, value: Any) -> None:
        return None


@dataclass
class GatewayConfig(DataClassJSONMixin):
    """Class to represent parameters that determine how to connect to a gateway."""

    class Config(BaseConfig):
        """Serialization config."""

        omit_none = True

    DEFAULT_TIMEOUT = 5
    #: IP address or hostname
    host: str = DEFAULT_HOST
    #: Timeout in seconds for every request sent to the gateway
    timeout: int | None = DEFAULT_TIMEOUT
    #: Credentials of the web admin account
    credentials: Credentials | None = None
    #: Access point name used by reconnect
    apn: str = DEFAULT_APN
    #: Seconds to wait between bringing the APN down and up again
    wait_time: int = 1
    #: Path of the legacy status api
    status_path: str = DEFAULT_STATUS_PATH
    #: Value of the IPv6 flag sent with an APN modification
    ipv6_policy: Ipv6Policy = Ipv6Policy.TrackInternet

    # compare=False will be excluded from object comparison.
    #: Set a custom http_client for the gateway to use.
    http_client: ClientSession | None = field(
        default=None,
        compare=False,
        metadata=field_options(serialization_strategy=_DoNotSerialize()),
    )

    def __pre_serialize__(self) -> Self:
        return replace(self, http_client=None)


def load_config(path: Path | str = DEFAULT_CONFIG_FILE) -> dict[str, Any]:
    """Load the stored configuration as a dict.

    A missing file gives an empty dict, as does a file that cannot be read.
    """
    path = Path(path).expanduser()
    if not path.exists():
        return {}
    try:
        data = json_loads(path.read_bytes())
    except (OSError, ValueError) as ex:
        _LOGGER.warning("Could not load config file %s: %s", path, ex)
        return {}
    if not isinstance(data, dict):
        _LOGGER.warning("Ignoring config file %s, expected a json object", path)
        return {}
    return data


def save_config(config: GatewayConfig, path: Path | str = DEFAULT_CONFIG_FILE) -> Path:
    """Write the configuration to path and return the resolved path."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json_dumps(config.to_dict(), indent=True))
    _LOGGER.debug("Saved config for %s to %s", config.host, path)
    return path
