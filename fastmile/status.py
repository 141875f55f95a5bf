"""Gateway status telemetry.

Newer firmware serves a detailed status api, older firmware only the
prelogin status page. :func:`fetch_status` probes the detailed api first and
falls back to the legacy one, returning a tagged :class:`GatewayStatus`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from yarl import URL

from .exceptions import DecodeError, TransportError
from .gatewayconfig import GatewayConfig
from .httpclient import HttpClient
from .session import SessionContext

_LOGGER = logging.getLogger(__name__)

DETAILED_STATUS_PATH = "/status_get_web_app.cgi"

#: RSRP reported by the gateway when the radio has no 5G cell
NO_SIGNAL_RSRP = -32768

SECTIONS: dict[str, tuple[str, ...]] = {
    "wan": ("wan_ip_status", "connection_status", "apn_cfg", "cellular_stats"),
    "5g": ("cell_5G_stats_cfg",),
    "lte": ("cell_LTE_stats_cfg",),
}
SECTION_NAMES = ["all", *SECTIONS]


@dataclass(frozen=True)
class CellStats:
    """Radio statistics of a 5G or LTE cell."""

    rsrp: int | None
    rsrq: int | None
    snr: int | None
    rssi: int | None
    level: int
    band: str | None
    cell_id: int | str | None
    bandwidth: str | None

    @staticmethod
    def from_stat(stat: dict[str, Any]) -> CellStats:
        """Create the stats from a ``stat`` entry of the status api."""
        return CellStats(
            rsrp=stat.get("RSRPCurrent"),
            rsrq=stat.get("RSRQCurrent"),
            snr=stat.get("SNRCurrent"),
            rssi=stat.get("RSSICurrent"),
            level=int(stat.get("SignalStrengthLevel") or 0),
            band=stat.get("Band"),
            cell_id=stat.get("PhysicalCellID"),
            bandwidth=stat.get("Bandwidth"),
        )

    @property
    def connected(self) -> bool:
        """Return True if the cell reports a usable signal."""
        return self.rsrp != NO_SIGNAL_RSRP and self.level > 0

    @property
    def quality(self) -> str:
        """Signal quality label for the strength level."""
        if self.level >= 4:
            return "Excellent"
        if self.level == 3:
            return "Good"
        if self.level == 2:
            return "Fair"
        if self.level == 1:
            return "Poor"
        return "No Signal"


@dataclass(frozen=True)
class GatewayStatus:
    """Status payload of the gateway."""

    #: Which status api answered
    kind = "unknown"

    data: dict[str, Any]

    def _first(self, section: str) -> dict[str, Any] | None:
        if entries := self.data.get(section):
            return entries[0]
        return None

    @property
    def connected(self) -> bool | None:
        """Return the cellular connection state, if reported."""
        if (conn := self._first("connection_status")) is None:
            return None
        return conn.get("ConnectionStatus") == 1

    @property
    def apn(self) -> dict[str, Any] | None:
        """Return the active APN entry."""
        return self._first("apn_cfg")

    @property
    def traffic(self) -> tuple[int, int] | None:
        """Return received and sent bytes of the cellular interface."""
        if (stats := self._first("cellular_stats")) is None:
            return None
        return int(stats.get("BytesReceived", 0)), int(stats.get("BytesSent", 0))

    @property
    def wan(self) -> dict[str, Any] | None:
        """Return the WAN ip status reported by the legacy api."""
        return self._first("wan_ip_status")

    @property
    def cell_5g(self) -> CellStats | None:
        """Return the 5G cell statistics."""
        if (cfg := self._first("cell_5G_stats_cfg")) is None:
            return None
        return CellStats.from_stat(cfg.get("stat", {}))

    @property
    def cell_lte(self) -> CellStats | None:
        """Return the LTE cell statistics."""
        if (cfg := self._first("cell_LTE_stats_cfg")) is None:
            return None
        return CellStats.from_stat(cfg.get("stat", {}))

    def filtered(self, section: str | None = None) -> dict[str, Any]:
        """Return the raw payload limited to section."""
        if not section or section == "all":
            return self.data
        return {key: self.data.get(key) for key in SECTIONS[section]}


@dataclass(frozen=True)
class DetailedStatus(GatewayStatus):
    """Status from the detailed status api."""

    kind = "detailed"


@dataclass(frozen=True)
class LegacyStatus(GatewayStatus):
    """Status from the legacy prelogin status api."""

    kind = "legacy"


async def _fetch(
    http_client: HttpClient, url: URL, session: SessionContext | None
) -> dict[str, Any]:
    _, resp_dict = await http_client.get(
        url, cookies_dict=session.cookies if session else None
    )
    if not isinstance(resp_dict, dict):
        raise DecodeError(f"Unexpected status response from {url}: {resp_dict!r}")
    return resp_dict


async def fetch_status(
    config: GatewayConfig,
    http_client: HttpClient,
    session: SessionContext | None = None,
) -> GatewayStatus:
    """Fetch the gateway status, preferring the detailed api."""
    base = f"http://{config.host}"
    try:
        return DetailedStatus(
            await _fetch(http_client, URL(base + DETAILED_STATUS_PATH), session)
        )
    except (TransportError, DecodeError) as ex:
        _LOGGER.debug(
            "Detailed status unavailable on %s, trying legacy api: %s",
            config.host,
            ex,
        )

    return LegacyStatus(
        await _fetch(http_client, URL(base + config.status_path), session)
    )
