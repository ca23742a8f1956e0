"""
WiFiLens NetworkManager Collaborators
======================================

Radio scanner and connector backed by NetworkManager's ``nmcli``.

The scanner asks for terse, colon-separated output::

    nmcli -t -f IN-USE,SSID,BSSID,FREQ,SIGNAL,SECURITY device wifi list

In terse mode literal colons inside a field (every BSSID, some SSIDs)
are escaped as ``\\:``. ``SIGNAL`` is a 0-100 quality percentage, which
is mapped onto dBm with the usual linear approximation
(100% ~ -50 dBm, 0% ~ -100 dBm). ``SECURITY`` becomes the capabilities
string; open networks report ``--``.

References:
    - NetworkManager. nmcli(1) manual page.
      https://networkmanager.dev/docs/api/latest/nmcli.html
"""

from __future__ import annotations

import asyncio
import re
from typing import Optional

from shared.logger import LensLogger

from wifilens.core.models import WiFiNetwork

logger = LensLogger("collectors.nmcli")

SCAN_FIELDS: tuple[str, ...] = ("IN-USE", "SSID", "BSSID", "FREQ", "SIGNAL", "SECURITY")


# ---------------------------------------------------------------------------
# Terse output parsing
# ---------------------------------------------------------------------------


def split_terse(line: str) -> list[str]:
    """Split a terse nmcli line on unescaped ``:`` characters."""
    fields: list[str] = []
    current: list[str] = []
    chars = iter(line)
    for ch in chars:
        if ch == "\\":
            current.append(next(chars, ""))
        elif ch == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def percent_to_dbm(percent: int) -> int:
    """Approximate dBm for an nmcli signal-quality percentage."""
    percent = max(0, min(100, percent))
    return round(percent / 2) - 100


def _parse_int(text: str) -> Optional[int]:
    match = re.search(r"-?\d+", text)
    return int(match.group(0)) if match else None


def parse_scan_output(output: str, *, active_only: bool = False) -> list[WiFiNetwork]:
    """Parse ``nmcli -t device wifi list`` output into networks.

    Args:
        output: Terse output using :data:`SCAN_FIELDS`.
        active_only: Keep only the network currently in use, mirroring
            platforms that can report nothing but the associated network.
    """
    networks: list[WiFiNetwork] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = split_terse(line)
        if len(parts) < len(SCAN_FIELDS):
            logger.debug("Skipping short nmcli line", fields=len(parts))
            continue

        in_use, ssid, bssid, freq, signal, security = parts[: len(SCAN_FIELDS)]
        if active_only and in_use.strip() != "*":
            continue

        percent = _parse_int(signal)
        networks.append(
            WiFiNetwork(
                ssid=ssid,
                bssid=bssid.strip() or None,
                capabilities=security.strip() or "--",
                frequency_mhz=_parse_int(freq),
                signal_level_dbm=percent_to_dbm(percent) if percent is not None else None,
            )
        )
    return networks


# ---------------------------------------------------------------------------
# Subprocess helper
# ---------------------------------------------------------------------------


async def _run(argv: list[str]) -> tuple[int, str, str]:
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await process.communicate()
    except BaseException:
        # Timed out or cancelled: the child must not outlive the call.
        if process.returncode is None:
            process.kill()
        await process.wait()
        raise
    return (
        process.returncode if process.returncode is not None else -1,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class NmcliScanner:
    """Radio scanner driving ``nmcli device wifi list``.

    Usage::

        scanner = NmcliScanner(interface="wlan0")
        networks = await scanner.scan()

    Raises:
        RuntimeError: When nmcli exits with a non-zero status.
        OSError: When the nmcli binary cannot be executed.
    """

    def __init__(
        self,
        interface: Optional[str] = None,
        *,
        rescan: bool = True,
        active_only: bool = False,
        binary: str = "nmcli",
    ) -> None:
        self._interface = interface
        self._rescan = rescan
        self._active_only = active_only
        self._binary = binary

    def command(self) -> list[str]:
        argv = [self._binary, "-t", "-f", ",".join(SCAN_FIELDS), "device", "wifi", "list"]
        if self._interface:
            argv += ["ifname", self._interface]
        argv += ["--rescan", "yes" if self._rescan else "no"]
        return argv

    async def scan(self) -> list[WiFiNetwork]:
        code, stdout, stderr = await _run(self.command())
        if code != 0:
            raise RuntimeError(f"nmcli scan failed ({code}): {stderr.strip()}")
        networks = parse_scan_output(stdout, active_only=self._active_only)
        logger.info("nmcli scan complete", networks=len(networks))
        return networks


# ---------------------------------------------------------------------------
# Connector
# ---------------------------------------------------------------------------


class NmcliConnector:
    """Radio connector driving ``nmcli device wifi connect``.

    A refused connection is a soft failure and returns ``False``. A
    missing binary raises ``OSError``, which the engine treats as a
    failed attempt.
    """

    def __init__(self, interface: Optional[str] = None, *, binary: str = "nmcli") -> None:
        self._interface = interface
        self._binary = binary

    def command(self, ssid: str, password: str, is_wpa: bool) -> list[str]:
        argv = [self._binary, "device", "wifi", "connect", ssid]
        if password:
            argv += ["password", password]
            if not is_wpa:
                argv += ["wep-key-type", "key"]
        if self._interface:
            argv += ["ifname", self._interface]
        return argv

    async def connect(self, ssid: str, password: str, is_wpa: bool) -> bool:
        code, _stdout, stderr = await _run(self.command(ssid, password, is_wpa))
        if code != 0:
            logger.warning("nmcli connect refused", ssid=ssid, detail=stderr.strip())
            return False
        logger.info("nmcli connected", ssid=ssid)
        return True
