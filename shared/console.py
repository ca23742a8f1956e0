"""
WiFiLens Console Interface
===========================

Rich-powered console abstraction providing one presentation layer for
the WiFiLens command-line tools.

The class wraps :class:`rich.console.Console` and adds convenience methods
for the banner, section headers, status-coloured messages and
status spinners, all with consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- consistent palette across all WiFiLens output
# ---------------------------------------------------------------------------
_LENS_THEME = Theme(
    {
        "lens.banner": "bold bright_cyan",
        "lens.section": "bold bright_magenta",
        "lens.success": "bold green",
        "lens.warning": "bold yellow",
        "lens.error": "bold red",
        "lens.info": "bold bright_blue",
        "lens.dim": "dim white",
        "lens.highlight": "bold bright_white",
    }
)

_BANNER_ART = r"""[bright_cyan]
 __        ___ _____ _ _
 \ \      / (_)  ___(_) |    ___ _ __  ___
  \ \ /\ / /| | |_  | | |   / _ \ '_ \/ __|
   \ V  V / | |  _| | | |__|  __/ | | \__ \
    \_/\_/  |_|_|   |_|_____\___|_| |_|___/
[/bright_cyan]"""

_TAGLINE = "Credential Extraction & Network Resolution"


class LensConsole:
    """Unified console interface for the WiFiLens CLI.

    Usage::

        con = LensConsole()
        con.banner()
        con.section("Catalog")
        con.success("Resolved")
    """

    def __init__(self, *, quiet: bool = False, record: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording for export.
        """
        self._console = Console(
            theme=_LENS_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Banner / sections
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the WiFiLens banner with the version string."""
        subtitle = (
            f"[lens.highlight]{_TAGLINE}[/lens.highlight]\n"
            f"[lens.dim]Version: {version}[/lens.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n" + subtitle)),
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(
            f"  {title}  ",
            style="lens.section",
            characters="─",
        )

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def _emit(self, style: str, marker: str, message: str) -> None:
        """Print *message* (Rich markup) behind a coloured marker."""
        self._console.print(f"[{style}]{marker}[/{style}] {message}")

    def success(self, message: str) -> None:
        self._emit("lens.success", "[✔]", message)

    def warning(self, message: str) -> None:
        self._emit("lens.warning", "[⚠]", message)

    def error(self, message: str) -> None:
        self._emit("lens.error", "[✘]", message)

    # ------------------------------------------------------------------ #
    #  Status spinner
    # ------------------------------------------------------------------ #

    @contextmanager
    def status(
        self, message: str = "Working..."
    ) -> Generator[Any, None, None]:
        """Context-manager showing a spinner with a status message.

        Example::

            with con.status("Scanning networks..."):
                outcome = await engine.resolve_qr(payload)
        """
        with self._console.status(
            f"[lens.info]{message}[/lens.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as status_obj:
            yield status_obj

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()
