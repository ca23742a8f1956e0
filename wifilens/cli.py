"""
WiFiLens CLI
=============

Click-based command-line interface for WiFiLens. Resolves credentials
from QR payloads and recognized label text against the networks in
range, and shows the cleaned network catalog.

Commands:
    wifilens qr PAYLOAD           Parse and resolve a WiFi QR payload
    wifilens text FILE...         Resolve recognized label text
    wifilens catalog              Show the cleaned network catalog
    wifilens match SSID           Rank an SSID against the catalog
    wifilens payload --ssid NAME  Build a WiFi QR payload

Scan source options:
    --scan-file PATH    Replay a JSON scan dump
    --live              Scan through NetworkManager (nmcli)
    --interface IFACE   Wireless interface for --live / --connect

References:
    - Click Documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click
from rich.markup import escape

from shared.config import WifiLensConfig
from shared.console import LensConsole
from shared.logger import configure_logging

from wifilens import __version__
from wifilens.analyzers.matcher import NetworkMatcher
from wifilens.collectors.base import RadioScanner
from wifilens.collectors.nmcli import NmcliConnector, NmcliScanner
from wifilens.collectors.recognized_text import RecognizedTextOCR
from wifilens.collectors.scan_file import ScanFileReader
from wifilens.core.engine import CollaboratorError, ResolutionEngine
from wifilens.core.models import ResolutionOutcome, SecurityKind, WiFiCredentials
from wifilens.extractors.qr_payload import build_qr_payload
from wifilens.output.console import LensConsoleOutput


# ---------------------------------------------------------------------------
# Async helper
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click commands.

    Falls back to a worker thread when an event loop is already running
    in this thread.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            future = pool.submit(asyncio.run, coro)
            return future.result()
    else:
        return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------


def _scan_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--interface", "-i",
        type=str,
        default=None,
        help="Wireless interface used by --live and --connect (e.g., wlan0).",
    )(func)
    func = click.option(
        "--live",
        is_flag=True,
        default=False,
        help="Scan live through NetworkManager (nmcli).",
    )(func)
    func = click.option(
        "--scan-file",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Replay a JSON scan dump instead of scanning.",
    )(func)
    return func


def _resolve_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--show-password",
        is_flag=True,
        default=False,
        help="Print the password instead of masking it.",
    )(func)
    func = click.option(
        "--connect",
        is_flag=True,
        default=False,
        help="Connect to the resolved network through nmcli.",
    )(func)
    func = click.option(
        "--candidates",
        is_flag=True,
        default=False,
        help="List ranked candidates and pick one instead of auto-selecting.",
    )(func)
    return func


def _build_scanner(
    scan_file: Optional[str], live: bool, interface: Optional[str]
) -> Optional[RadioScanner]:
    if scan_file and live:
        raise click.UsageError("--scan-file and --live are mutually exclusive.")
    if scan_file:
        return ScanFileReader(scan_file)
    if live:
        return NmcliScanner(interface)
    return None


# ---------------------------------------------------------------------------
# CLI Group
# ---------------------------------------------------------------------------


@click.group(
    name="wifilens",
    help=(
        "WIFILENS - Credential Extraction & Network Resolution\n\n"
        "Pull WiFi credentials out of QR payloads and photographed labels, "
        "and match the extracted network name against the networks in range."
    ),
)
@click.version_option(__version__, prog_name="wifilens")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to WiFiLens configuration file (TOML).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and console output.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], quiet: bool) -> None:
    """WiFiLens - main CLI entry point."""
    ctx.ensure_object(dict)

    try:
        config = WifiLensConfig.load(config_path) if config_path else WifiLensConfig()
    except FileNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    settings = config.global_settings
    configure_logging(
        log_level="DEBUG" if settings.debug else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    console = LensConsole(quiet=quiet)
    ctx.obj["config"] = config
    ctx.obj["console"] = console
    ctx.obj["quiet"] = quiet

    # payload prints bare QR text for piping
    if not quiet and ctx.invoked_subcommand != "payload":
        console.banner(version=__version__)


# ---------------------------------------------------------------------------
# Resolution helpers
# ---------------------------------------------------------------------------


def _finish(
    engine: ResolutionEngine,
    output: LensConsoleOutput,
    outcome: ResolutionOutcome,
    connect: bool,
) -> None:
    """Display *outcome*, let the user pick a candidate, optionally connect."""
    output.display_outcome(outcome)
    if outcome.failure is not None or outcome.credentials is None:
        sys.exit(1)

    credentials = outcome.credentials
    if outcome.candidates and outcome.selected is None:
        choice = click.prompt(
            "Select network",
            type=click.IntRange(1, len(outcome.candidates)),
            default=1,
        )
        credentials = engine.select(outcome, outcome.candidates[choice - 1].network)
        output.display_credentials(credentials, title="Selected Credentials")

    if connect:
        with output.console.status(f"Connecting to {escape(credentials.ssid)}..."):
            connected = _run_async(engine.connect(credentials))
        if not connected:
            output.console.error(f"Could not connect to {escape(credentials.ssid)}.")
            sys.exit(1)
        output.console.success(f"Connected to {escape(credentials.ssid)}.")


def _engine(
    ctx: click.Context,
    scan_file: Optional[str],
    live: bool,
    interface: Optional[str],
    connect: bool,
    config: Optional[WifiLensConfig] = None,
    **collaborators: Any,
) -> ResolutionEngine:
    return ResolutionEngine(
        scanner=_build_scanner(scan_file, live, interface),
        connector=NmcliConnector(interface) if connect else None,
        config=config or ctx.obj["config"],
        **collaborators,
    )


# ---------------------------------------------------------------------------
# QR Command
# ---------------------------------------------------------------------------


@cli.command(
    name="qr",
    help=(
        "Parse and resolve a WiFi QR payload.\n\n"
        "PAYLOAD is the decoded QR text, e.g. 'WIFI:S:HomeNet;T:WPA;P:secret;;'. "
        "The network name is matched against a fresh scan when a scan source "
        "is given; otherwise it is used unverified."
    ),
)
@click.argument("payload", type=str)
@_scan_options
@_resolve_options
@click.pass_context
def qr_command(
    ctx: click.Context,
    payload: str,
    scan_file: Optional[str],
    live: bool,
    interface: Optional[str],
    candidates: bool,
    connect: bool,
    show_password: bool,
) -> None:
    """Parse and resolve a WiFi QR payload."""
    engine = _engine(ctx, scan_file, live, interface, connect)
    output = LensConsoleOutput(ctx.obj["console"], show_password=show_password)

    with output.console.status("Resolving QR payload..."):
        outcome = _run_async(
            engine.resolve_qr(payload, auto_select=False if candidates else None)
        )
    _finish(engine, output, outcome, connect)


# ---------------------------------------------------------------------------
# Text Command
# ---------------------------------------------------------------------------


@cli.command(
    name="text",
    help=(
        "Resolve recognized label text.\n\n"
        "Each FILE holds OCR output for one script hint, in the order of "
        "the configured extractor.script_hints. Every file is tried on its "
        "own, then all of them together."
    ),
)
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
)
@_scan_options
@_resolve_options
@click.pass_context
def text_command(
    ctx: click.Context,
    files: tuple[str, ...],
    scan_file: Optional[str],
    live: bool,
    interface: Optional[str],
    candidates: bool,
    connect: bool,
    show_password: bool,
) -> None:
    """Resolve recognized label text."""
    config: WifiLensConfig = ctx.obj["config"]
    output = LensConsoleOutput(ctx.obj["console"], show_password=show_password)
    auto_select = False if candidates else None

    texts = [Path(path).read_text(encoding="utf-8") for path in files]

    if len(texts) == 1:
        engine = _engine(ctx, scan_file, live, interface, connect)
        with output.console.status("Resolving label text..."):
            outcome = _run_async(engine.resolve_text(texts[0], auto_select=auto_select))
    else:
        hints = list(config.extractor.script_hints)
        if len(texts) > len(hints):
            raise click.UsageError(
                f"{len(texts)} files given but only {len(hints)} script hints configured."
            )
        hints = hints[: len(texts)]
        per_file = dataclasses.replace(
            config,
            extractor=dataclasses.replace(config.extractor, script_hints=hints),
        )
        engine = _engine(
            ctx,
            scan_file,
            live,
            interface,
            connect,
            config=per_file,
            ocr=RecognizedTextOCR(dict(zip(hints, texts))),
        )
        with output.console.status("Resolving label text..."):
            outcome = _run_async(engine.resolve_image(files[0], auto_select=auto_select))

    _finish(engine, output, outcome, connect)


# ---------------------------------------------------------------------------
# Catalog / Match Commands
# ---------------------------------------------------------------------------


def _load_catalog(ctx: click.Context, scan_file, live, interface):
    scanner = _build_scanner(scan_file, live, interface)
    if scanner is None:
        raise click.UsageError("A scan source is required: --scan-file PATH or --live.")

    engine = ResolutionEngine(scanner=scanner, config=ctx.obj["config"])
    try:
        return _run_async(engine.scan_catalog())
    except CollaboratorError as exc:
        ctx.obj["console"].error(f"Scan failed: {exc.detail}")
        sys.exit(1)


@cli.command(name="catalog", help="Show the cleaned catalog of networks in range.")
@_scan_options
@click.pass_context
def catalog_command(
    ctx: click.Context,
    scan_file: Optional[str],
    live: bool,
    interface: Optional[str],
) -> None:
    """Show the cleaned network catalog."""
    catalog = _load_catalog(ctx, scan_file, live, interface)
    LensConsoleOutput(ctx.obj["console"]).display_catalog(catalog)


@cli.command(name="match", help="Rank SSID against the catalog of networks in range.")
@click.argument("ssid", type=str)
@_scan_options
@click.option(
    "--threshold", "-t",
    type=click.FloatRange(0.0, 100.0),
    default=None,
    help="Similarity threshold on the 0-100 scale (default from config).",
)
@click.pass_context
def match_command(
    ctx: click.Context,
    ssid: str,
    scan_file: Optional[str],
    live: bool,
    interface: Optional[str],
    threshold: Optional[float],
) -> None:
    """Rank an SSID against the catalog."""
    config: WifiLensConfig = ctx.obj["config"]
    catalog = _load_catalog(ctx, scan_file, live, interface)

    matcher_config = config.matcher
    if threshold is not None:
        matcher_config = dataclasses.replace(matcher_config, threshold=threshold)
    ranked = NetworkMatcher(matcher_config).rank(ssid, catalog)

    LensConsoleOutput(ctx.obj["console"]).display_candidates(ssid, ranked)
    if not ranked:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Payload Command
# ---------------------------------------------------------------------------


@cli.command(
    name="payload",
    help=(
        "Build a WiFi QR payload for sharing.\n\n"
        "Prints the payload text; render it with any QR encoder."
    ),
)
@click.option("--ssid", "-s", required=True, type=str, help="Network name.")
@click.option("--password", "-p", default="", type=str, help="Pre-shared key.")
@click.option(
    "--security",
    type=click.Choice([kind.value for kind in SecurityKind], case_sensitive=False),
    default=SecurityKind.WPA.value,
    show_default=True,
    help="Authentication scheme.",
)
@click.option("--hidden", is_flag=True, default=False, help="Mark the network as hidden.")
def payload_command(ssid: str, password: str, security: str, hidden: bool) -> None:
    """Build a WiFi QR payload."""
    if not ssid:
        raise click.BadParameter("SSID must not be empty.", param_hint="--ssid")
    credentials = WiFiCredentials(
        ssid=ssid,
        password=password,
        security=SecurityKind(security.upper()),
        hidden=hidden,
    )
    click.echo(build_qr_payload(credentials))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the WiFiLens CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
