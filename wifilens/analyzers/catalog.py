"""
WiFiLens Network Catalog Builder
=================================

Turns raw scanner output into the catalog used as the universe for
SSID matching. Three stages, always in this order:

    1. Drop hidden / placeholder entries.
    2. Drop entries advertising no recognized security (policy toggle).
    3. Deduplicate by SSID, keeping the strongest signal.

Deduplication relies on placeholders already being gone: several hidden
access points share the same placeholder SSID and must not collapse into
a single bogus entry.

Signal levels are dBm, so -40 is stronger than -70. Levels are compared
as signed numbers, never as magnitudes.

Reference:
    Android Developers. ScanResult.capabilities.
    https://developer.android.com/reference/android/net/wifi/ScanResult
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from shared.config import CatalogConfig
from shared.logger import LensLogger

from wifilens.core.models import SecurityLabel, WiFiNetwork

logger = LensLogger("analyzers.catalog")

HIDDEN_PLACEHOLDERS: tuple[str, ...] = ("<hidden>", "<unknown>", "<unknown ssid>")
SECURITY_MARKERS: tuple[str, ...] = ("WEP", "WPA", "PSK", "EAP", "SAE")


# ---------------------------------------------------------------------------
# Stage 1: hidden networks
# ---------------------------------------------------------------------------


def is_hidden(network: WiFiNetwork, placeholders: Iterable[str] = HIDDEN_PLACEHOLDERS) -> bool:
    """Whether *network* carries no usable SSID."""
    ssid = network.ssid or ""
    if not ssid.strip() or not ssid.strip("\x00"):
        return True
    lowered = {p.lower() for p in placeholders}
    return ssid.strip().lower() in lowered


def filter_hidden_networks(
    networks: Sequence[WiFiNetwork],
    placeholders: Iterable[str] = HIDDEN_PLACEHOLDERS,
) -> list[WiFiNetwork]:
    placeholders = tuple(placeholders)
    return [n for n in networks if not is_hidden(n, placeholders)]


# ---------------------------------------------------------------------------
# Stage 2: unsecured networks
# ---------------------------------------------------------------------------


def is_secured(capabilities: Optional[str], markers: Iterable[str] = SECURITY_MARKERS) -> bool:
    """Whether *capabilities* contains at least one security marker."""
    if not capabilities:
        return False
    upper = capabilities.upper()
    return any(marker.upper() in upper for marker in markers)


def filter_unsecured_networks(
    networks: Sequence[WiFiNetwork],
    markers: Iterable[str] = SECURITY_MARKERS,
) -> list[WiFiNetwork]:
    markers = tuple(markers)
    return [n for n in networks if is_secured(n.capabilities, markers)]


# ---------------------------------------------------------------------------
# Stage 3: deduplication
# ---------------------------------------------------------------------------


def _stronger(candidate: WiFiNetwork, current: WiFiNetwork) -> bool:
    if candidate.signal_level_dbm is None:
        return False
    if current.signal_level_dbm is None:
        return True
    return candidate.signal_level_dbm > current.signal_level_dbm


def deduplicate_by_ssid(networks: Sequence[WiFiNetwork]) -> list[WiFiNetwork]:
    """Collapse access points sharing an SSID into one entry.

    The strongest signal wins; ties keep the first-seen entry and an
    undefined level never displaces a defined one. Output order is the
    first-seen order of each SSID.
    """
    unique: dict[str, WiFiNetwork] = {}
    for network in networks:
        existing = unique.get(network.ssid)
        if existing is None or _stronger(network, existing):
            unique[network.ssid] = network
    return list(unique.values())


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def build_catalog(
    raw: Sequence[WiFiNetwork],
    *,
    drop_unsecured: bool = True,
    placeholders: Iterable[str] = HIDDEN_PLACEHOLDERS,
    security_markers: Iterable[str] = SECURITY_MARKERS,
) -> list[WiFiNetwork]:
    """Filter hidden, filter unsecured, then deduplicate *raw* scan results."""
    if not raw:
        return []

    visible = filter_hidden_networks(raw, placeholders)
    secured = filter_unsecured_networks(visible, security_markers) if drop_unsecured else visible
    catalog = deduplicate_by_ssid(secured)

    logger.debug(
        "Catalog built",
        raw=len(raw),
        visible=len(visible),
        secured=len(secured),
        unique=len(catalog),
    )
    return catalog


class CatalogBuilder:
    """Catalog pipeline bound to a :class:`CatalogConfig`.

    Usage::

        builder = CatalogBuilder(config.catalog)
        catalog = builder.build(scan_results)
    """

    def __init__(self, config: Optional[CatalogConfig] = None) -> None:
        self._config = config or CatalogConfig()

    @property
    def config(self) -> CatalogConfig:
        return self._config

    def build(self, raw: Sequence[WiFiNetwork]) -> list[WiFiNetwork]:
        return build_catalog(
            raw,
            drop_unsecured=self._config.drop_unsecured,
            placeholders=self._config.hidden_placeholders,
            security_markers=self._config.security_markers,
        )


# ---------------------------------------------------------------------------
# Security classification
# ---------------------------------------------------------------------------

# Markers checked for each label, strongest first. SAE is the WPA3 handshake.
_LABEL_MARKERS: tuple[tuple[SecurityLabel, tuple[str, ...]], ...] = (
    (SecurityLabel.WPA3, ("WPA3", "SAE")),
    (SecurityLabel.WPA2, ("WPA2",)),
    (SecurityLabel.WPA, ("WPA",)),
    (SecurityLabel.WEP, ("WEP",)),
    (SecurityLabel.PSK, ("PSK",)),
    (SecurityLabel.ENTERPRISE, ("EAP",)),
)


def classify_security(capabilities: Optional[str]) -> SecurityLabel:
    """Return the strongest security label advertised in *capabilities*.

    Priority: WPA3 > WPA2 > WPA > WEP > PSK > Enterprise > Unsecured.
    ``Unknown`` when capabilities are absent.

    Examples::

        >>> classify_security("[WPA2-PSK-CCMP][RSN-PSK-CCMP][ESS]")
        <SecurityLabel.WPA2: 'WPA2'>
        >>> classify_security("[ESS]")
        <SecurityLabel.UNSECURED: 'Unsecured'>
    """
    if not capabilities:
        return SecurityLabel.UNKNOWN
    upper = capabilities.upper()
    for label, markers in _LABEL_MARKERS:
        if any(marker in upper for marker in markers):
            return label
    return SecurityLabel.UNSECURED
