"""
WiFiLens Console Output
========================

Rich-based presentation of extracted credentials, the network catalog,
ranked candidates and resolution outcomes.

Passwords are masked unless the presenter is created with
``show_password=True``. Every scanner- or user-supplied string is
markup-escaped before it reaches Rich.

References:
    - Rich library: https://github.com/Textualize/rich
    - Cisco. (2024). Wireless LAN Design Guide. Table 2-1:
      Signal Strength Recommendations.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared.console import LensConsole

from wifilens.analyzers.catalog import classify_security
from wifilens.core.models import (
    MatchResult,
    ResolutionOutcome,
    SecurityLabel,
    WiFiCredentials,
    WiFiNetwork,
)


# ---------------------------------------------------------------------------
# Colour mappings
# ---------------------------------------------------------------------------

_SECURITY_COLORS: dict[SecurityLabel, str] = {
    SecurityLabel.WPA3: "bold bright_green",
    SecurityLabel.WPA2: "bold green",
    SecurityLabel.WPA: "bold yellow",
    SecurityLabel.WEP: "bold red",
    SecurityLabel.PSK: "bold yellow",
    SecurityLabel.ENTERPRISE: "bold bright_blue",
    SecurityLabel.UNSECURED: "bold white on red",
    SecurityLabel.UNKNOWN: "dim",
}

_SIGNAL_COLORS: dict[str, str] = {
    "Excellent": "bold bright_green",
    "Good": "bold green",
    "Fair": "bold yellow",
    "Weak": "bold bright_red",
    "Very Weak": "bold red",
}


def signal_quality(dbm: int) -> str:
    """Bucket a dBm reading into a site-survey quality label."""
    if dbm > -50:
        return "Excellent"
    elif dbm > -60:
        return "Good"
    elif dbm > -70:
        return "Fair"
    elif dbm > -80:
        return "Weak"
    return "Very Weak"


def mask_password(password: str) -> str:
    if not password:
        return "(none)"
    return "•" * 8


def _signal_cell(network: WiFiNetwork) -> str:
    if network.signal_level_dbm is None:
        return "[dim]n/a[/dim]"
    color = _SIGNAL_COLORS[signal_quality(network.signal_level_dbm)]
    return f"[{color}]{network.signal_level_dbm} dBm[/{color}]"


def _security_cell(network: WiFiNetwork) -> str:
    label = classify_security(network.capabilities)
    color = _SECURITY_COLORS[label]
    return f"[{color}]{label.value}[/{color}]"


# ---------------------------------------------------------------------------
# Console Output
# ---------------------------------------------------------------------------


class LensConsoleOutput:
    """Rich-based console output for WiFiLens results.

    Usage::

        output = LensConsoleOutput()
        output.display_outcome(outcome)
        output.display_catalog(catalog)
    """

    def __init__(
        self, console: Optional[LensConsole] = None, *, show_password: bool = False
    ) -> None:
        self._console = console or LensConsole()
        self._show_password = show_password

    @property
    def console(self) -> LensConsole:
        return self._console

    def _password(self, credentials: WiFiCredentials) -> str:
        if self._show_password:
            return escape(credentials.password) or "(none)"
        return mask_password(credentials.password)

    def display_credentials(
        self, credentials: WiFiCredentials, title: str = "WiFi Credentials"
    ) -> None:
        """Display a credentials panel."""
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold")
        grid.add_column(style="bright_white")
        grid.add_row("SSID", escape(credentials.ssid))
        grid.add_row("Password", self._password(credentials))
        grid.add_row("Security", credentials.security.value)
        if credentials.hidden:
            grid.add_row("Hidden", "yes")

        self._console.print(
            Panel(grid, title=f"[bold]{title}[/bold]", border_style="bright_cyan", expand=False)
        )

    def display_catalog(self, networks: Sequence[WiFiNetwork]) -> None:
        """Display the cleaned network catalog."""
        self._console.section("Network Catalog")
        if not networks:
            self._console.warning("No usable networks in range.")
            return

        table = Table(
            title="Visible Networks",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        table.add_column("SSID", style="bold")
        table.add_column("Security", width=12)
        table.add_column("Signal", justify="right", width=10)
        table.add_column("Freq", justify="right", width=9)
        table.add_column("BSSID", style="dim", width=19)

        for network in networks:
            table.add_row(
                escape(network.ssid),
                _security_cell(network),
                _signal_cell(network),
                f"{network.frequency_mhz} MHz" if network.frequency_mhz else "",
                escape(network.bssid or ""),
            )

        self._console.print(table)
        self._console.blank()

    def display_candidates(self, target: str, candidates: Sequence[MatchResult]) -> None:
        """Display ranked candidates for *target*, best first."""
        self._console.section(f"Candidates for {escape(target)}")
        if not candidates:
            self._console.warning("No network resembles the extracted name.")
            return

        table = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        table.add_column("#", justify="right", width=3)
        table.add_column("SSID", style="bold")
        table.add_column("Score", justify="right", width=7)
        table.add_column("Security", width=12)
        table.add_column("Signal", justify="right", width=10)

        for rank, match in enumerate(candidates, start=1):
            table.add_row(
                str(rank),
                escape(match.network.ssid),
                f"{match.score:.1f}",
                _security_cell(match.network),
                _signal_cell(match.network),
            )

        self._console.print(table)
        self._console.blank()

    def display_outcome(self, outcome: ResolutionOutcome) -> None:
        """Display a resolution outcome: failure, warnings and credentials."""
        self._console.section("Resolution")

        if outcome.failure is not None:
            self._console.error(f"{outcome.failure.value}: {escape(outcome.message)}")
            return

        for warning in outcome.warnings:
            self._console.warning(f"{warning.value}: {escape(outcome.message)}")

        if outcome.credentials is not None:
            title = "Resolved Credentials" if outcome.verified else "Extracted Credentials"
            self.display_credentials(outcome.credentials, title=title)

        if outcome.candidates and outcome.selected is None:
            self.display_candidates(outcome.credentials.ssid, outcome.candidates)
        elif outcome.verified:
            self._console.success(escape(outcome.message))

