"""
WiFiLens Scan File Reader
==========================

Offline radio scanner that replays a JSON scan dump, for environments
without radio access and for reproducing a user's situation.

Accepted layouts::

    [ {"SSID": "HomeNet", "BSSID": "aa:bb:...", "capabilities": "[WPA2-PSK-CCMP]",
       "frequency": 2437, "level": -55, "timestamp": 1718000000}, ... ]

    {"networks": [ {"ssid": "HomeNet", "signal_level_dbm": -55, ...}, ... ]}

Scanner-native and snake_case field names may be mixed. Entries that do
not validate are skipped with a warning.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from shared.logger import LensLogger

from wifilens.core.models import WiFiNetwork

logger = LensLogger("collectors.scan_file")


class ScanFileError(ValueError):
    """The scan dump is unreadable or not in a supported layout."""


def parse_scan_document(document: Any) -> list[WiFiNetwork]:
    """Validate a decoded scan document into networks."""
    if isinstance(document, dict):
        document = document.get("networks")
    if not isinstance(document, list):
        raise ScanFileError("scan dump must be a list or an object with a 'networks' list")

    networks: list[WiFiNetwork] = []
    for index, entry in enumerate(document):
        try:
            networks.append(WiFiNetwork.model_validate(entry))
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid scan entry", index=index, errors=exc.error_count()
            )
    return networks


class ScanFileReader:
    """Radio scanner backed by a JSON scan dump.

    Usage::

        scanner = ScanFileReader("scan.json")
        networks = await scanner.scan()
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[WiFiNetwork]:
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                document = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ScanFileError(f"{self._path}: invalid JSON ({exc.msg})") from exc

        networks = parse_scan_document(document)
        logger.info("Scan dump loaded", path=str(self._path), networks=len(networks))
        return networks

    async def scan(self) -> list[WiFiNetwork]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load)
