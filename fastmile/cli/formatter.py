"""Rendering of gateway status for the cli."""

from __future__ import annotations

from fastmile.json import dumps as json_dumps
from fastmile.status import CellStats, GatewayStatus

QUALITY_STYLES = {
    "Excellent": "green",
    "Good": "green",
    "Fair": "yellow",
    "Poor": "red",
    "No Signal": "red",
}
FORMATS = ["table", "compact", "json"]


def _show(section: str | None, name: str) -> bool:
    return not section or section in ("all", name)


def _mb(value: int, digits: int = 2) -> str:
    return f"{value / (1024 * 1024):.{digits}f}"


def _state(flag: bool, up: str, down: str) -> str:
    return f"[green]{up}[/green]" if flag else f"[red]{down}[/red]"


def _row(label: str, value: object) -> str:
    return f"  [yellow]{label + ':':<13}[/yellow] {value}"


def _header(title: str) -> list[str]:
    return [f"[bold cyan]== {title} ==[/bold cyan]"]


def _cell_rows(cell: CellStats, *, rssi: bool = False) -> list[str]:
    style = QUALITY_STYLES[cell.quality]
    rows = [
        _row("RSRP", f"{cell.rsrp} dBm"),
        _row("RSRQ", f"{cell.rsrq} dB"),
    ]
    if rssi:
        rows.append(_row("RSSI", f"{cell.rssi} dBm"))
    rows += [
        _row("SNR", f"{cell.snr} dB"),
        _row(
            "Signal",
            f"[{style}]{cell.quality}[/{style}] (Level {cell.level})",
        ),
    ]
    if cell.band:
        rows.append(_row("Band", cell.band))
    if cell.cell_id:
        rows.append(_row("Cell ID", cell.cell_id))
    if rssi and cell.bandwidth:
        rows.append(_row("Bandwidth", cell.bandwidth))
    return rows


def format_table(status: GatewayStatus, section: str | None = None) -> str:
    """Render the status as titled blocks."""
    lines: list[str] = []

    if _show(section, "wan"):
        lines += _header("Connection Status")
        if (connected := status.connected) is not None:
            lines.append(_row("Status", _state(connected, "Connected", "Disconnected")))
        if apn := status.apn:
            active = apn.get("X_ALU_COM_ConnectionState") == 1
            lines.append(_row("APN", apn.get("APN")))
            lines.append(_row("APN Status", _state(active, "Active", "Inactive")))
            lines.append(_row("IPv4", apn.get("X_ALU_COM_IPAddressV4") or "N/A"))
            lines.append(_row("IPv6", apn.get("X_ALU_COM_IPAddressV6") or "N/A"))
        if traffic := status.traffic:
            lines.append(_row("Data RX", f"{_mb(traffic[0])} MB"))
            lines.append(_row("Data TX", f"{_mb(traffic[1])} MB"))
        lines.append("")

        if wan := status.wan:
            lines += _header("WAN IP Status")
            lines.append(_row("Status", _state(wan.get("gwwanup") == 1, "UP", "DOWN")))
            lines.append(_row("IPv4", wan.get("ExternalIPAddress") or "N/A"))
            lines.append(_row("IPv6", wan.get("ExternalIPv6Address") or "N/A"))
            lines.append("")

    if _show(section, "5g"):
        lines += _header("5G Cell Stats")
        if (cell := status.cell_5g) is None:
            lines.append("  [red]No 5G stats available.[/red]")
        elif not cell.connected:
            lines.append("  [red]No 5G connection available.[/red]")
        else:
            lines += _cell_rows(cell)
        lines.append("")

    if _show(section, "lte"):
        lines += _header("LTE Cell Stats")
        if (cell := status.cell_lte) is None:
            lines.append("  [red]No LTE stats available.[/red]")
        else:
            lines += _cell_rows(cell, rssi=True)

    return "\n".join(lines)


def format_compact(status: GatewayStatus, section: str | None = None) -> str:
    """Render the status as a single line."""
    parts: list[str] = []

    if _show(section, "wan"):
        if (connected := status.connected) is not None:
            parts.append(f"Status: {'Connected' if connected else 'Disconnected'}")
        if apn := status.apn:
            parts.append(f"APN: {apn.get('APN')}")
            parts.append(f"IPv4: {apn.get('X_ALU_COM_IPAddressV4') or 'N/A'}")
        if traffic := status.traffic:
            parts.append(f"RX: {_mb(traffic[0], 1)}MB TX: {_mb(traffic[1], 1)}MB")
        if wan := status.wan:
            parts.append(f"WAN: {'UP' if wan.get('gwwanup') == 1 else 'DOWN'}")
            parts.append(f"IPv4: {wan.get('ExternalIPAddress') or 'N/A'}")

    if _show(section, "5g") and (cell := status.cell_5g) and cell.connected:
        parts.append(f"5G: RSRP={cell.rsrp} RSRQ={cell.rsrq} SNR={cell.snr}")

    if _show(section, "lte") and (cell := status.cell_lte):
        parts.append(f"LTE: RSRP={cell.rsrp} RSRQ={cell.rsrq} SNR={cell.snr}")

    return " | ".join(parts)


def format_json(status: GatewayStatus, section: str | None = None) -> str:
    """Render the raw status payload, limited to section."""
    return json_dumps(status.filtered(section), indent=True)
