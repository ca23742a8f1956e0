"""
WiFiLens OCR Text Extractor
============================

Reads WiFi credentials out of free-form, possibly multilingual text as
returned by an OCR engine from a photographed router sticker or printed
note.

Matching policy:
    1. SSID label patterns are tried in table order; the first pattern
       matching anywhere in the text supplies the SSID.
    2. With an SSID in hand, password label patterns are tried the same
       way. No password match means an empty password, since a network
       name alone is actionable for open networks.
    3. When no SSID label matched, an unlabeled ``label: value`` pair
       separated by ``/`` or a newline is classified by keyword.
    4. Otherwise nothing is extracted.

The security kind is always the WPA default: free text carries no
reliable type signal, so callers should treat it as a best guess.

This module is pure and deterministic.
"""

from __future__ import annotations

import re
from typing import Optional

from shared.logger import LensLogger

from wifilens.core.models import SecurityKind, WiFiCredentials
from wifilens.extractors.labels import (
    HEURISTIC_KEYWORDS,
    LABEL_PATTERNS,
    QUOTE_CHARS,
    FieldKind,
    LabelKeyword,
    LabelPattern,
    patterns_for,
)

logger = LensLogger("extractors.ocr_text")

# Two "label: value" segments separated by a slash or a line break.
_DUAL_FIELD = re.compile(
    r"(?P<label1>[^:：\n/]+)[:：][^\S\n]*(?P<value1>[^/\n]+?)[^\S\n]*"
    r"(?:/|\n)"
    r"[^\S\n]*(?P<label2>[^:：\n/]+)[:：][^\S\n]*(?P<value2>[^\n]+)"
)


def clean_value(value: str) -> str:
    """Trim whitespace and surrounding quote characters from a value."""
    return value.strip().strip(QUOTE_CHARS).strip()


def _first_match(text: str, patterns: tuple[LabelPattern, ...], field: FieldKind) -> Optional[str]:
    for pattern in patterns_for(field, patterns):
        match = pattern.regex.search(text)
        if match is None:
            continue
        value = clean_value(match.group("value"))
        if value:
            logger.debug(
                "Label matched", field=field.value, language=pattern.language
            )
            return value
    return None


def classify_label(
    label: str,
    keywords: tuple[LabelKeyword, ...] = HEURISTIC_KEYWORDS,
) -> Optional[FieldKind]:
    """Classify a free-standing label as naming an SSID or a password.

    Password keywords are checked first so that labels such as
    ``network key`` classify as passwords.
    """
    lowered = label.strip().lower()
    if not lowered:
        return None
    for field in (FieldKind.PASSWORD, FieldKind.SSID):
        if any(k.field is field and k.keyword in lowered for k in keywords):
            return field
    return None


def extract_dual_field(
    text: str,
    keywords: tuple[LabelKeyword, ...] = HEURISTIC_KEYWORDS,
) -> Optional[WiFiCredentials]:
    """Apply the unlabeled ``label: value / label: value`` heuristic.

    The pair is accepted only when exactly one side classifies as an
    SSID and the other as a password. A rejected pair slides forward by
    one segment, so an unrelated ``Date: ...`` line ahead of the real
    pair does not hide it.
    """
    pos = 0
    while True:
        match = _DUAL_FIELD.search(text, pos)
        if match is None:
            return None

        sides = [
            (classify_label(match.group("label1"), keywords), clean_value(match.group("value1"))),
            (classify_label(match.group("label2"), keywords), clean_value(match.group("value2"))),
        ]
        values = {kind: value for kind, value in sides}
        if (
            set(values) == {FieldKind.SSID, FieldKind.PASSWORD}
            and values[FieldKind.SSID]
            and values[FieldKind.PASSWORD]
        ):
            return WiFiCredentials(
                ssid=values[FieldKind.SSID],
                password=values[FieldKind.PASSWORD],
                security=SecurityKind.WPA,
            )

        pos = match.start("label2")


def extract_from_ocr_text(
    text: Optional[str],
    *,
    patterns: tuple[LabelPattern, ...] = LABEL_PATTERNS,
    keywords: tuple[LabelKeyword, ...] = HEURISTIC_KEYWORDS,
) -> Optional[WiFiCredentials]:
    """Extract credentials from OCR text.

    Args:
        text: Recognized text; ``None`` or blank text yields ``None``.
        patterns: Ordered label pattern table.
        keywords: Keyword table for the unlabeled heuristic.

    Returns:
        :class:`WiFiCredentials`, or ``None`` when no network name could
        be found.
    """
    if not isinstance(text, str) or not text.strip():
        return None

    ssid = _first_match(text, patterns, FieldKind.SSID)
    if ssid is not None:
        password = _first_match(text, patterns, FieldKind.PASSWORD) or ""
        return WiFiCredentials(ssid=ssid, password=password, security=SecurityKind.WPA)

    credentials = extract_dual_field(text, keywords)
    if credentials is not None:
        logger.debug("Credentials recovered by dual-field heuristic")
    return credentials
