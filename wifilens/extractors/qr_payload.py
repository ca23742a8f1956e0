"""
WiFiLens QR Payload Codec
==========================

Parses and builds the de-facto standard WiFi QR payload::

    WIFI:S:<ssid>;T:<WPA|WEP|nopass|>;P:<password>;H:<true|false>;;

Each field is ``<tag>:<value>`` terminated by an unescaped ``;`` and the
record ends with ``;;``. Inside values, ``\\``, ``;``, ``,`` and ``:``
may be escaped with a backslash.

The parser is total: malformed input yields a :class:`ParseFailure`,
never an exception.

References:
    - ZXing. Barcode Contents: Wi-Fi Network config (Android).
      https://github.com/zxing/zxing/wiki/Barcode-Contents
    - Wi-Fi Alliance. (2022). Wi-Fi Easy Connect Specification v3.0,
      Section 5.2.1 (URI format for QR codes).
"""

from __future__ import annotations

from typing import Any, Union

from shared.logger import LensLogger

from wifilens.core.models import (
    FailureKind,
    ParseFailure,
    SecurityKind,
    WiFiCredentials,
)

logger = LensLogger("extractors.qr_payload")

PAYLOAD_PREFIX = "WIFI:"

# Security tokens accepted in the T: field. Anything else falls back to WPA,
# since most deployed codes omit T: for WPA networks.
SECURITY_TOKENS: dict[str, SecurityKind] = {
    "WPA": SecurityKind.WPA,
    "WPA2": SecurityKind.WPA,
    "WPA3": SecurityKind.WPA,
    "SAE": SecurityKind.WPA,
    "WEP": SecurityKind.WEP,
    "NOPASS": SecurityKind.OPEN,
}

_QR_TOKENS: dict[SecurityKind, str] = {
    SecurityKind.WPA: "WPA",
    SecurityKind.WEP: "WEP",
    SecurityKind.OPEN: "nopass",
}

_ESCAPED = ("\\", ";", ",", ":")


def split_fields(body: str, *, unescape: bool = True) -> list[str]:
    """Split a payload body into raw ``tag:value`` fields.

    With *unescape* a backslash protects the next character and is
    dropped. Without it every ``;`` terminates a field and backslashes
    are kept verbatim.
    """
    if not unescape:
        return [f for f in body.split(";") if f]

    fields: list[str] = []
    current: list[str] = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            current.append(next(chars, ""))
        elif ch == ";":
            if current:
                fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    if current:
        fields.append("".join(current))
    return fields


def _field_map(fields: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for raw in fields:
        tag, sep, value = raw.partition(":")
        if not sep:
            continue
        values.setdefault(tag.strip().upper(), value)
    return values


def parse_security(token: str | None) -> SecurityKind:
    """Map a ``T:`` token to a :class:`SecurityKind`, defaulting to WPA."""
    if not token:
        return SecurityKind.WPA
    return SECURITY_TOKENS.get(token.strip().upper(), SecurityKind.WPA)


def parse_qr_payload(
    data: Any, *, unescape: bool = True
) -> Union[WiFiCredentials, ParseFailure]:
    """Parse a WiFi QR payload into credentials.

    Args:
        data: Decoded QR text.
        unescape: Honour backslash escapes inside field values.

    Returns:
        :class:`WiFiCredentials` on success, :class:`ParseFailure`
        (kind ``malformed_payload``) otherwise.
    """
    if not isinstance(data, str):
        return ParseFailure(reason="payload is not text")

    if not data.startswith(PAYLOAD_PREFIX):
        return ParseFailure(reason=f"payload does not start with {PAYLOAD_PREFIX!r}")

    fields = _field_map(split_fields(data[len(PAYLOAD_PREFIX):], unescape=unescape))

    ssid = fields.get("S", "")
    if not ssid:
        logger.debug("QR payload without SSID field")
        return ParseFailure(
            kind=FailureKind.MALFORMED_PAYLOAD,
            reason="payload has no SSID (S:) field",
        )

    return WiFiCredentials(
        ssid=ssid,
        password=fields.get("P", ""),
        security=parse_security(fields.get("T")),
        hidden=fields.get("H", "").strip().lower() == "true",
    )


def escape_value(value: str) -> str:
    """Escape payload delimiters for a QR field value."""
    for ch in _ESCAPED:
        value = value.replace(ch, "\\" + ch)
    return value


def build_qr_payload(credentials: WiFiCredentials) -> str:
    """Build a QR payload string from credentials, for sharing.

    The inverse of :func:`parse_qr_payload` for escaped payloads.
    """
    parts = [
        f"S:{escape_value(credentials.ssid)}",
        f"T:{_QR_TOKENS[credentials.security]}",
        f"P:{escape_value(credentials.password)}",
    ]
    if credentials.hidden:
        parts.append("H:true")
    return PAYLOAD_PREFIX + ";".join(parts) + ";;"
