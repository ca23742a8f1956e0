"""
WiFiLens Configuration Management
==================================

Centralized configuration for the WiFiLens resolution engine using
Python dataclasses and TOML-based persistence.

Every tunable the core exposes lives here: QR unescaping, OCR script
hints, catalog filtering policy, the fuzzy-match acceptance threshold,
and the orchestrator's auto-select and timeout behaviour.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Component Configs ==============================


@dataclass(frozen=False, slots=True)
class ExtractorConfig:
    """Configuration for the Credential Extractor.

    ``unescape_qr_fields`` honours backslash escapes inside QR payload
    fields. Setting it to ``False`` reproduces the legacy parser that
    split on every ``;`` and kept backslashes verbatim.

    ``script_hints`` is the ordered list of scripts passed to the OCR
    engine, one recognition call per hint.
    """

    unescape_qr_fields: bool = True
    script_hints: list[str] = field(
        default_factory=lambda: ["latin", "chinese", "japanese", "korean", "devanagari"]
    )


@dataclass(frozen=False, slots=True)
class CatalogConfig:
    """Configuration for the Network Catalog Builder.

    Networks without any recognized security marker are dropped by
    default because the connection flow always supplies a password.
    """

    drop_unsecured: bool = True
    hidden_placeholders: list[str] = field(
        default_factory=lambda: ["<hidden>", "<unknown>", "<unknown ssid>"]
    )
    security_markers: list[str] = field(
        default_factory=lambda: ["WEP", "WPA", "PSK", "EAP", "SAE"]
    )


@dataclass(frozen=False, slots=True)
class MatcherConfig:
    """Configuration for the Network Matcher.

    The threshold is on the 0-100 scale of the rapidfuzz scorers. At
    60.0 a single-character typo or a case difference still matches,
    while an unrelated name does not.
    """

    threshold: float = 60.0


@dataclass(frozen=False, slots=True)
class ResolverConfig:
    """Configuration for the Resolution Orchestrator.

    ``collaborator_timeout`` bounds every OCR, scan and connect call in
    seconds. ``0`` (or ``None`` in code) disables the timeout.
    """

    auto_select: bool = True
    collaborator_timeout: Optional[float] = 30.0


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and destinations."""

    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_json: bool = False
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class WifiLensConfig:
    """Master configuration aggregating all component and global settings.

    Usage:
        >>> config = WifiLensConfig.load()                  # from default path
        >>> config = WifiLensConfig.load("custom.toml")     # from custom path
        >>> config.matcher.threshold
        60.0
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> WifiLensConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root. Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`WifiLensConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            extractor=cls._build_section(ExtractorConfig, raw.get("extractor", {})),
            catalog=cls._build_section(CatalogConfig, raw.get("catalog", {})),
            matcher=cls._build_section(MatcherConfig, raw.get("matcher", {})),
            resolver=cls._build_section(ResolverConfig, raw.get("resolver", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> WifiLensConfig:
    """Module-level convenience wrapper around :meth:`WifiLensConfig.load`.

    Caches the result so that repeated imports share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = WifiLensConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
