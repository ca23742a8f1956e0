"""
WiFiLens Core Data Models
==========================

Pydantic-based domain models for the credential extraction and network
resolution engine: extracted credentials, scanned networks, match
results, the failure taxonomy and the outcome of one resolution flow.

All values are transient. They are created per scan or extraction
attempt and discarded once the flow ends; nothing here is persisted.

References:
    - ZXing. Barcode Contents: Wi-Fi Network config (Android).
      https://github.com/zxing/zxing/wiki/Barcode-Contents
    - Pydantic v2 Documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SecurityKind(str, enum.Enum):
    """Authentication scheme carried by a set of credentials."""

    WPA = "WPA"
    WEP = "WEP"
    OPEN = "OPEN"

    @property
    def is_wpa(self) -> bool:
        """Boolean form expected by the radio connector."""
        return self is SecurityKind.WPA


class SecurityLabel(str, enum.Enum):
    """Display label for a network's advertised security.

    Members are declared strongest first; :func:`classify_security`
    walks them in this order.
    """

    WPA3 = "WPA3"
    WPA2 = "WPA2"
    WPA = "WPA"
    WEP = "WEP"
    PSK = "PSK"
    ENTERPRISE = "Enterprise"
    UNSECURED = "Unsecured"
    UNKNOWN = "Unknown"


class FailureKind(str, enum.Enum):
    """Outcome taxonomy surfaced to callers of the engine.

    Collaborator exceptions never leave the engine; they are downgraded
    to one of these kinds.
    """

    MALFORMED_PAYLOAD = "malformed_payload"
    NO_CREDENTIAL_FOUND = "no_credential_found"
    EMPTY_CATALOG = "empty_catalog"
    NO_MATCH_ABOVE_THRESHOLD = "no_match_above_threshold"
    COLLABORATOR_FAILURE = "collaborator_failure"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class WiFiCredentials(BaseModel):
    """Credentials extracted from a QR payload or label text.

    Attributes:
        ssid: Network name. Non-empty whenever extraction succeeded.
        password: Pre-shared key; empty for open networks.
        security: Authentication scheme. For free text this is always
            the assumed WPA default, not a detection.
        hidden: Whether the QR payload flagged the network as hidden.
    """

    model_config = ConfigDict(frozen=True)

    ssid: str
    password: str = ""
    security: SecurityKind = SecurityKind.WPA
    hidden: bool = False

    @property
    def is_wpa(self) -> bool:
        return self.security.is_wpa

    def with_ssid(self, ssid: str) -> WiFiCredentials:
        """Return a copy naming a different network. The password is kept."""
        return self.model_copy(update={"ssid": ssid})

    def __repr__(self) -> str:
        # Keep passwords out of logs and tracebacks.
        return (
            f"WiFiCredentials(ssid={self.ssid!r}, password='***', "
            f"security={self.security.value}, hidden={self.hidden})"
        )

    __str__ = __repr__


class ParseFailure(BaseModel):
    """Explicit failure marker returned by the QR payload parser."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind = FailureKind.MALFORMED_PAYLOAD
    reason: str = ""


# ---------------------------------------------------------------------------
# Scanned networks
# ---------------------------------------------------------------------------


class WiFiNetwork(BaseModel):
    """A network reported by the radio scanner.

    Field aliases accept the scanner's native names (``SSID``,
    ``BSSID``, ``frequency``, ``level``, ``timestamp``) so raw scan
    dictionaries validate directly.

    Attributes:
        ssid: Service Set Identifier (network name).
        bssid: Access point MAC address, when reported.
        capabilities: Security token string, e.g. ``[WPA2-PSK-CCMP][ESS]``.
        frequency_mhz: Operating frequency in MHz.
        signal_level_dbm: Signal strength in dBm (closer to zero is stronger).
        observed_at: When the scanner last saw the network.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    ssid: str = Field(default="", alias="SSID")
    bssid: Optional[str] = Field(default=None, alias="BSSID")
    capabilities: Optional[str] = None
    frequency_mhz: Optional[int] = Field(default=None, alias="frequency")
    signal_level_dbm: Optional[int] = Field(default=None, alias="level")
    observed_at: Optional[datetime] = Field(default=None, alias="timestamp")


class MatchResult(BaseModel):
    """A catalog entry paired with its similarity to the target SSID.

    ``score`` is on a 0-100 scale; higher is more similar.
    """

    model_config = ConfigDict(frozen=True)

    network: WiFiNetwork
    score: float = Field(ge=0.0, le=100.0)


# ---------------------------------------------------------------------------
# Resolution outcome
# ---------------------------------------------------------------------------


class ResolutionOutcome(BaseModel):
    """Result of one credential-resolution flow.

    Attributes:
        source: Where the credentials came from (``qr``, ``image``, ``text``).
        credentials: Credentials to connect with; the SSID is replaced
            by the best match in the auto-select flow.
        extracted: Credentials exactly as extracted, before matching.
        candidates: Ranked catalog matches, best first.
        selected: Network chosen by auto-select, if any.
        verified: Whether the SSID was confirmed against a fresh scan.
        failure: Terminal failure; ``credentials`` is ``None`` when set.
        warnings: Non-terminal degradations, e.g. an unverified SSID.
        message: Human-readable summary.
    """

    source: str
    credentials: Optional[WiFiCredentials] = None
    extracted: Optional[WiFiCredentials] = None
    candidates: list[MatchResult] = Field(default_factory=list)
    selected: Optional[WiFiNetwork] = None
    verified: bool = False
    failure: Optional[FailureKind] = None
    warnings: list[FailureKind] = Field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None and self.credentials is not None
