"""
Pytest configuration and shared fixtures.
"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from shared.config import ExtractorConfig, ResolverConfig, WifiLensConfig
from wifilens.core.models import WiFiNetwork


class FakeScanner:
    """Radio scanner returning a canned list, or raising."""

    def __init__(
        self,
        networks: Optional[List[Any]] = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        on_scan: Optional[Callable[[], None]] = None,
    ):
        self.networks = list(networks or [])
        self.error = error
        self.delay = delay
        self.on_scan = on_scan
        self.calls = 0

    async def scan(self):
        self.calls += 1
        if self.on_scan is not None:
            self.on_scan()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.networks)


class FakeOCR:
    """OCR engine returning canned text per script; unknown scripts yield ''."""

    def __init__(self, texts: Optional[Dict[str, str]] = None, failing: tuple = ()):
        self.texts = dict(texts or {})
        self.failing = set(failing)
        self.calls: List[str] = []

    async def recognize(self, image_ref: str, script: str) -> str:
        self.calls.append(script)
        if script in self.failing:
            raise RuntimeError(f"OCR crashed for {script}")
        return self.texts.get(script, "")


class FakeConnector:
    """Radio connector recording every attempt."""

    def __init__(self, result: bool = True, error: Optional[BaseException] = None):
        self.result = result
        self.error = error
        self.calls: List[tuple] = []

    async def connect(self, ssid: str, password: str, is_wpa: bool) -> bool:
        self.calls.append((ssid, password, is_wpa))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def make_network() -> Callable[..., WiFiNetwork]:
    """Factory for scanned networks with WPA2 security by default."""

    def _make(
        ssid: str,
        level: Optional[int] = -50,
        capabilities: Optional[str] = "[WPA2-PSK-CCMP][ESS]",
        bssid: Optional[str] = None,
    ) -> WiFiNetwork:
        return WiFiNetwork(
            ssid=ssid,
            bssid=bssid,
            capabilities=capabilities,
            signal_level_dbm=level,
            frequency_mhz=2437,
        )

    return _make


@pytest.fixture
def home_scan(make_network) -> List[WiFiNetwork]:
    """Scan with an exact and a near-miss HomeNet."""
    return [
        make_network("HomeNet", level=-55),
        make_network("HomeNett", level=-60),
    ]


@pytest.fixture
def fake_scanner() -> type:
    return FakeScanner


@pytest.fixture
def fake_ocr() -> type:
    return FakeOCR


@pytest.fixture
def fake_connector() -> type:
    return FakeConnector


@pytest.fixture
def config() -> WifiLensConfig:
    """Default configuration with a short collaborator timeout."""
    return WifiLensConfig(resolver=ResolverConfig(collaborator_timeout=2.0))


@pytest.fixture
def two_hint_config() -> WifiLensConfig:
    """Configuration with only the latin and chinese script hints."""
    return WifiLensConfig(
        extractor=ExtractorConfig(script_hints=["latin", "chinese"]),
        resolver=ResolverConfig(collaborator_timeout=2.0),
    )


@pytest.fixture
def scan_dump(tmp_path) -> Callable[[Any], str]:
    """Write a JSON scan dump and return its path."""

    def _write(document: Any, name: str = "scan.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def sample_scan_document() -> List[Dict[str, Any]]:
    """Scanner-native scan entries, including hidden and open networks."""
    return [
        {"SSID": "HomeNet", "BSSID": "aa:bb:cc:00:00:01",
         "capabilities": "[WPA2-PSK-CCMP][ESS]", "frequency": 2437, "level": -55},
        {"SSID": "HomeNett", "BSSID": "aa:bb:cc:00:00:02",
         "capabilities": "[WPA2-PSK-CCMP][ESS]", "frequency": 5180, "level": -60},
        {"SSID": "", "BSSID": "aa:bb:cc:00:00:03",
         "capabilities": "[WPA2-PSK-CCMP][ESS]", "level": -40},
        {"SSID": "FreeAirport", "BSSID": "aa:bb:cc:00:00:04",
         "capabilities": "[ESS]", "level": -45},
        {"ssid": "Cafe", "capabilities": "[WPA3-SAE-CCMP]", "signal_level_dbm": -70},
    ]
