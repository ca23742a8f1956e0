"""
WiFiLens Label Tables
======================

Declarative per-language label data for reading credentials out of
free-form OCR text. The matching logic in :mod:`wifilens.extractors.ocr_text`
never names a language; adding a language means adding rows here.

Two tables:

* :data:`LABEL_PATTERNS` -- ordered ``(language, field, label)`` records.
  Order is priority: the first SSID record that matches anywhere in the
  text wins, and likewise for passwords. Longer labels come before the
  shorter labels they contain.
* :data:`HEURISTIC_KEYWORDS` -- keywords used to classify the labels of
  an unlabeled ``label: value / label: value`` pair.

``label`` is a regular-expression fragment. ``bounded`` labels must be
delimited by non-word characters, which keeps ``Red`` from matching
``Redmi`` and ``Pass`` from matching ``Password``. CJK labels are written
without spaces around them and are left unbounded.
"""

from __future__ import annotations

import enum
import functools
import re
from dataclasses import dataclass


class FieldKind(str, enum.Enum):
    """Which credential field a label names."""

    SSID = "ssid"
    PASSWORD = "password"


# ---------------------------------------------------------------------------
# Pattern template
# ---------------------------------------------------------------------------

# Horizontal whitespace only; values never span lines.
_HWS = r"[^\S\n]"
_COLON = r"[:：]"
_OPEN_QUOTE = r"[\"'“‘「『]?"
_CLOSE_QUOTE = r"[\"'”’」』]?"

# Either an explicit colon, or whitespace followed by a colon-free rest of line.
_SEPARATOR = rf"(?:{_HWS}*{_COLON}{_HWS}*|{_HWS}+(?=[^\n:：]*$))"

# Value runs to end of line but stops short of a following "/ label:" segment.
_VALUE = rf"(?P<value>(?:(?!{_HWS}*/{_HWS}*[^\n/:：]+[:：])[^\n])+?)"

QUOTE_CHARS = "\"'“”‘’「」『』"


@functools.lru_cache(maxsize=None)
def compile_label(label: str, bounded: bool) -> re.Pattern[str]:
    """Compile a label fragment into a full ``label: value`` pattern."""
    before = r"(?<!\w)" if bounded else ""
    after = r"(?!\w)" if bounded else ""
    return re.compile(
        rf"{before}(?:{label}){after}{_SEPARATOR}"
        rf"{_OPEN_QUOTE}{_VALUE}{_CLOSE_QUOTE}{_HWS}*$",
        re.IGNORECASE | re.MULTILINE,
    )


@dataclass(frozen=True, slots=True)
class LabelPattern:
    """One labeled field pattern: ``language`` tag, ``field`` and label regex."""

    language: str
    field: FieldKind
    label: str
    bounded: bool = True

    @property
    def regex(self) -> re.Pattern[str]:
        return compile_label(self.label, self.bounded)


@dataclass(frozen=True, slots=True)
class LabelKeyword:
    """A lower-case keyword classifying a heuristic label by containment."""

    language: str
    field: FieldKind
    keyword: str


_S = FieldKind.SSID
_P = FieldKind.PASSWORD


# ---------------------------------------------------------------------------
# Labeled patterns, in priority order
# ---------------------------------------------------------------------------

LABEL_PATTERNS: tuple[LabelPattern, ...] = (
    # -- SSID ------------------------------------------------------------
    LabelPattern("en", _S, r"SSID"),
    LabelPattern("en", _S, r"(?:Wi-?Fi|WLAN|Network)[ -]?name"),
    LabelPattern("en", _S, r"Network"),
    LabelPattern("en", _S, r"Wi-?Fi"),
    LabelPattern("zh", _S, r"网络名称", bounded=False),
    LabelPattern("zh", _S, r"網路名稱", bounded=False),
    LabelPattern("zh", _S, r"无线网络", bounded=False),
    LabelPattern("zh", _S, r"無線網路", bounded=False),
    LabelPattern("zh", _S, r"网络", bounded=False),
    LabelPattern("zh", _S, r"網路", bounded=False),
    LabelPattern("es", _S, r"Nombre de (?:la )?red"),
    LabelPattern("es", _S, r"Red"),
    LabelPattern("fr", _S, r"Nom du réseau"),
    LabelPattern("fr", _S, r"Réseau"),
    LabelPattern("de", _S, r"WLAN-Name"),
    LabelPattern("de", _S, r"Netzwerkname"),
    LabelPattern("de", _S, r"Netzwerk"),
    LabelPattern("ja", _S, r"ネットワーク名", bounded=False),
    LabelPattern("ja", _S, r"ネットワーク", bounded=False),
    LabelPattern("ko", _S, r"네트워크 이름", bounded=False),
    LabelPattern("ko", _S, r"네트워크", bounded=False),
    LabelPattern("en", _S, r"Name"),
    LabelPattern("zh", _S, r"名称", bounded=False),
    LabelPattern("zh", _S, r"名稱", bounded=False),
    # -- Password --------------------------------------------------------
    LabelPattern("en", _P, r"(?:Wi-?Fi |WLAN )?Password"),
    LabelPattern("en", _P, r"Passphrase"),
    LabelPattern("en", _P, r"(?:Network|WPA|Security|Wireless) key"),
    LabelPattern("en", _P, r"Pass"),
    LabelPattern("en", _P, r"Key"),
    LabelPattern("zh", _P, r"网络密码", bounded=False),
    LabelPattern("zh", _P, r"无线密码", bounded=False),
    LabelPattern("zh", _P, r"密码", bounded=False),
    LabelPattern("zh", _P, r"密碼", bounded=False),
    LabelPattern("zh", _P, r"口令", bounded=False),
    LabelPattern("es", _P, r"Contraseña"),
    LabelPattern("es", _P, r"Clave de red"),
    LabelPattern("es", _P, r"Clave"),
    LabelPattern("fr", _P, r"Mot de passe"),
    LabelPattern("fr", _P, r"Clé (?:réseau|de sécurité)"),
    LabelPattern("fr", _P, r"Clé"),
    LabelPattern("de", _P, r"WLAN-Schlüssel"),
    LabelPattern("de", _P, r"Netzwerkschlüssel"),
    LabelPattern("de", _P, r"Passwort"),
    LabelPattern("de", _P, r"Kennwort"),
    LabelPattern("ja", _P, r"パスワード", bounded=False),
    LabelPattern("ja", _P, r"暗号化?キー", bounded=False),
    LabelPattern("ko", _P, r"비밀번호", bounded=False),
    LabelPattern("ko", _P, r"네트워크 키", bounded=False),
    LabelPattern("ko", _P, r"암호", bounded=False),
)


# ---------------------------------------------------------------------------
# Heuristic keywords
# ---------------------------------------------------------------------------

HEURISTIC_KEYWORDS: tuple[LabelKeyword, ...] = (
    LabelKeyword("en", _S, "ssid"),
    LabelKeyword("en", _S, "network"),
    LabelKeyword("en", _S, "wifi"),
    LabelKeyword("en", _S, "wi-fi"),
    LabelKeyword("en", _S, "wlan"),
    LabelKeyword("en", _S, "name"),
    LabelKeyword("zh", _S, "网络"),
    LabelKeyword("zh", _S, "網路"),
    LabelKeyword("zh", _S, "名称"),
    LabelKeyword("zh", _S, "名稱"),
    LabelKeyword("es", _S, "red"),
    LabelKeyword("fr", _S, "réseau"),
    LabelKeyword("de", _S, "netzwerk"),
    LabelKeyword("ja", _S, "ネットワーク"),
    LabelKeyword("ko", _S, "네트워크"),
    LabelKeyword("en", _P, "password"),
    LabelKeyword("en", _P, "pass"),
    LabelKeyword("en", _P, "key"),
    LabelKeyword("zh", _P, "密码"),
    LabelKeyword("zh", _P, "密碼"),
    LabelKeyword("es", _P, "contraseña"),
    LabelKeyword("es", _P, "clave"),
    LabelKeyword("fr", _P, "mot de passe"),
    LabelKeyword("fr", _P, "clé"),
    LabelKeyword("de", _P, "passwort"),
    LabelKeyword("de", _P, "kennwort"),
    LabelKeyword("de", _P, "schlüssel"),
    LabelKeyword("ja", _P, "パスワード"),
    LabelKeyword("ko", _P, "비밀번호"),
    LabelKeyword("ko", _P, "암호"),
)


def patterns_for(field: FieldKind, patterns: tuple[LabelPattern, ...] = LABEL_PATTERNS) -> list[LabelPattern]:
    """Return the records for *field*, preserving table order."""
    return [p for p in patterns if p.field is field]
