"""
WiFiLens Resolution Engine
===========================

Orchestrates one credential-resolution flow: extract credentials from a
QR payload or from OCR text, take a fresh radio scan, clean it into a
catalog, rank the catalog against the extracted network name, and either
substitute the best match or hand the ranked candidates back to the
caller.

The flow is a short pipeline:
    1. Extraction: QR parser, or OCR across the configured script hints
    2. Scan: fresh scan through the radio scanner, never cached
    3. Catalog: hidden/unsecured filtering and SSID deduplication
    4. Matching: fuzzy ranking against the extracted SSID
    5. Selection: auto-select the best match, or return candidates

Collaborators (OCR engine, radio scanner, radio connector) are the only
suspension points. Every call is awaited sequentially under a timeout,
and every collaborator exception is downgraded to a failure kind on the
:class:`~wifilens.core.models.ResolutionOutcome`. Task cancellation is
never swallowed.

References:
    - ZXing. Barcode Contents: Wi-Fi Network config (Android).
      https://github.com/zxing/zxing/wiki/Barcode-Contents
    - Python Documentation. asyncio.wait_for.
      https://docs.python.org/3/library/asyncio-task.html#asyncio.wait_for
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Sequence

from pydantic import ValidationError

from shared.config import WifiLensConfig
from shared.logger import LensLogger

from wifilens.analyzers.catalog import CatalogBuilder
from wifilens.analyzers.matcher import NetworkMatcher
from wifilens.collectors.base import OCREngine, RadioConnector, RadioScanner
from wifilens.core.models import (
    FailureKind,
    ParseFailure,
    ResolutionOutcome,
    WiFiCredentials,
    WiFiNetwork,
)
from wifilens.extractors.ocr_text import extract_from_ocr_text
from wifilens.extractors.qr_payload import parse_qr_payload

logger = LensLogger("core.engine")


class CollaboratorError(Exception):
    """An external collaborator raised, timed out or is not configured."""

    def __init__(self, collaborator: str, detail: str) -> None:
        super().__init__(f"{collaborator}: {detail}")
        self.collaborator = collaborator
        self.detail = detail


class ResolutionCancelled(Exception):
    """The caller's cancel event was set while the flow was running."""


def _check_cancel(cancel: Optional[asyncio.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise ResolutionCancelled()


class ResolutionEngine:
    """Credential extraction and network resolution orchestrator.

    Usage::

        engine = ResolutionEngine(ocr=ocr, scanner=scanner, connector=connector)
        outcome = await engine.resolve_qr("WIFI:S:HomeNet;T:WPA;P:secret123;;")
        if outcome.ok:
            await engine.connect(outcome.credentials)

    In the multi-candidate flow (``auto_select=False``) the caller picks
    one of ``outcome.candidates`` and amends the credentials with
    :meth:`select` before connecting.
    """

    def __init__(
        self,
        ocr: Optional[OCREngine] = None,
        scanner: Optional[RadioScanner] = None,
        connector: Optional[RadioConnector] = None,
        config: Optional[WifiLensConfig] = None,
    ) -> None:
        self._config = config or WifiLensConfig()
        self._ocr = ocr
        self._scanner = scanner
        self._connector = connector

        self._catalog_builder = CatalogBuilder(self._config.catalog)
        self._matcher = NetworkMatcher(self._config.matcher)

    @property
    def config(self) -> WifiLensConfig:
        return self._config

    # ------------------------------------------------------------------ #
    #  Collaborator calls
    # ------------------------------------------------------------------ #

    async def _call(
        self,
        collaborator: str,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        """Await one collaborator call under the configured timeout."""
        _check_cancel(cancel)
        timeout = self._config.resolver.collaborator_timeout
        try:
            if not timeout:
                result = await func(*args)
            else:
                result = await asyncio.wait_for(func(*args), timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Collaborator call timed out", collaborator=collaborator, timeout=timeout
            )
            raise CollaboratorError(collaborator, f"timed out after {timeout}s") from exc
        except Exception as exc:
            logger.warning(
                "Collaborator call failed",
                collaborator=collaborator,
                error=type(exc).__name__,
                exc_info=True,
            )
            raise CollaboratorError(collaborator, str(exc) or type(exc).__name__) from exc
        _check_cancel(cancel)
        return result

    # ------------------------------------------------------------------ #
    #  Building blocks
    # ------------------------------------------------------------------ #

    def _extract(self, text: Any) -> Optional[WiFiCredentials]:
        return extract_from_ocr_text(text)

    async def _recognize(
        self, image_ref: str, cancel: Optional[asyncio.Event]
    ) -> Optional[WiFiCredentials]:
        if self._ocr is None:
            raise CollaboratorError("ocr", "no OCR engine configured")

        recognized: list[str] = []
        for script in self._config.extractor.script_hints:
            try:
                text = await self._call(
                    "ocr", self._ocr.recognize, image_ref, script, cancel=cancel
                )
            except CollaboratorError:
                continue
            if not isinstance(text, str):
                logger.warning("OCR returned non-text result", script=script)
                continue

            recognized.append(text)
            credentials = self._extract(text)
            if credentials is not None:
                logger.info("Credentials recognized", script=script, ssid=credentials.ssid)
                return credentials

        if not recognized:
            raise CollaboratorError("ocr", "every recognition attempt failed")

        if len(recognized) > 1:
            credentials = self._extract("\n".join(recognized))
            if credentials is not None:
                logger.info("Credentials recognized from combined text", ssid=credentials.ssid)
                return credentials
        return None

    async def recognize(
        self, image_ref: str, cancel: Optional[asyncio.Event] = None
    ) -> Optional[WiFiCredentials]:
        """Recognize credentials in an image across the script hints.

        Each hint's text is tried on its own, in order, and the first
        successful extraction wins. When none succeeds the texts are
        joined with newlines and tried once more.

        Returns:
            Credentials, or ``None`` when text was recognized but held
            no credentials.

        Raises:
            CollaboratorError: If no OCR call produced any text.
            ResolutionCancelled: If *cancel* was set.
        """
        return await self._recognize(image_ref, cancel)

    def _coerce_networks(self, raw: Sequence[Any]) -> list[WiFiNetwork]:
        networks: list[WiFiNetwork] = []
        for entry in raw:
            if isinstance(entry, WiFiNetwork):
                networks.append(entry)
                continue
            try:
                networks.append(WiFiNetwork.model_validate(entry))
            except ValidationError:
                logger.warning("Dropping malformed scan entry", entry_type=type(entry).__name__)
        return networks

    async def scan_catalog(self, cancel: Optional[asyncio.Event] = None) -> list[WiFiNetwork]:
        """Take a fresh scan and return the cleaned catalog.

        Raises:
            CollaboratorError: If the scanner is missing, raised or timed out.
            ResolutionCancelled: If *cancel* was set.
        """
        if self._scanner is None:
            raise CollaboratorError("scanner", "no radio scanner configured")

        with logger.timed("radio scan"):
            raw = await self._call("scanner", self._scanner.scan, cancel=cancel)

        networks = self._coerce_networks(raw or [])
        catalog = self._catalog_builder.build(networks)
        logger.info("Catalog ready", scanned=len(networks), catalog=len(catalog))
        return catalog

    def select(self, outcome: ResolutionOutcome, network: WiFiNetwork) -> WiFiCredentials:
        """Amend the extracted credentials with the chosen network's SSID."""
        if outcome.extracted is None:
            raise ValueError("outcome carries no extracted credentials")
        return outcome.extracted.with_ssid(network.ssid)

    async def connect(self, credentials: WiFiCredentials) -> bool:
        """Hand the credentials to the radio connector.

        Returns ``False`` on a soft failure and also when the connector
        is missing, raised or timed out.
        """
        if self._connector is None:
            logger.warning("No radio connector configured")
            return False
        try:
            connected = await self._call(
                "connector",
                self._connector.connect,
                credentials.ssid,
                credentials.password,
                credentials.is_wpa,
            )
        except CollaboratorError:
            return False

        if connected:
            logger.info("Connected", ssid=credentials.ssid)
        else:
            logger.warning("Connection refused", ssid=credentials.ssid)
        return bool(connected)

    # ------------------------------------------------------------------ #
    #  Resolution flows
    # ------------------------------------------------------------------ #

    async def _resolve(
        self,
        source: str,
        credentials: WiFiCredentials,
        auto_select: Optional[bool],
        cancel: Optional[asyncio.Event],
    ) -> ResolutionOutcome:
        if auto_select is None:
            auto_select = self._config.resolver.auto_select

        try:
            catalog = await self.scan_catalog(cancel)
        except CollaboratorError as exc:
            return ResolutionOutcome(
                source=source,
                credentials=credentials,
                extracted=credentials,
                warnings=[FailureKind.COLLABORATOR_FAILURE],
                message=f"Scan failed ({exc.detail}); using {credentials.ssid!r} unverified",
            )

        if not catalog:
            return ResolutionOutcome(
                source=source,
                credentials=credentials,
                extracted=credentials,
                warnings=[FailureKind.EMPTY_CATALOG],
                message=f"No networks in range; using {credentials.ssid!r} unverified",
            )

        ranked = self._matcher.rank(credentials.ssid, catalog)
        if not ranked:
            return ResolutionOutcome(
                source=source,
                credentials=credentials,
                extracted=credentials,
                warnings=[FailureKind.NO_MATCH_ABOVE_THRESHOLD],
                message=f"No network resembles {credentials.ssid!r}; using it unverified",
            )

        if not auto_select:
            return ResolutionOutcome(
                source=source,
                credentials=credentials,
                extracted=credentials,
                candidates=ranked,
                message=f"{len(ranked)} candidate network(s) for {credentials.ssid!r}",
            )

        best = ranked[0].network
        logger.info(
            "Best match selected",
            extracted=credentials.ssid,
            selected=best.ssid,
            score=round(ranked[0].score, 1),
        )
        return ResolutionOutcome(
            source=source,
            credentials=credentials.with_ssid(best.ssid),
            extracted=credentials,
            candidates=ranked,
            selected=best,
            verified=True,
            message=f"Matched {credentials.ssid!r} to {best.ssid!r}",
        )

    @staticmethod
    def _cancelled(source: str, extracted: Optional[WiFiCredentials] = None) -> ResolutionOutcome:
        logger.info("Resolution cancelled", source=source)
        return ResolutionOutcome(
            source=source,
            extracted=extracted,
            failure=FailureKind.CANCELLED,
            message="Resolution cancelled",
        )

    async def resolve_qr(
        self,
        payload: Any,
        *,
        auto_select: Optional[bool] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ResolutionOutcome:
        """Resolve a decoded QR payload against a fresh scan."""
        with logger.operation("resolve_qr"):
            try:
                _check_cancel(cancel)
                parsed = parse_qr_payload(
                    payload, unescape=self._config.extractor.unescape_qr_fields
                )
                if isinstance(parsed, ParseFailure):
                    logger.info("QR payload rejected", reason=parsed.reason)
                    return ResolutionOutcome(
                        source="qr", failure=parsed.kind, message=parsed.reason
                    )
                return await self._resolve("qr", parsed, auto_select, cancel)
            except ResolutionCancelled:
                return self._cancelled("qr")

    async def resolve_image(
        self,
        image_ref: str,
        *,
        auto_select: Optional[bool] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ResolutionOutcome:
        """Recognize a label image and resolve the result against a fresh scan."""
        with logger.operation("resolve_image"):
            try:
                try:
                    credentials = await self._recognize(image_ref, cancel)
                except CollaboratorError as exc:
                    return ResolutionOutcome(
                        source="image",
                        failure=FailureKind.COLLABORATOR_FAILURE,
                        message=f"Text recognition failed ({exc.detail})",
                    )
                if credentials is None:
                    return ResolutionOutcome(
                        source="image",
                        failure=FailureKind.NO_CREDENTIAL_FOUND,
                        message="No WiFi credentials found in the recognized text",
                    )
                return await self._resolve("image", credentials, auto_select, cancel)
            except ResolutionCancelled:
                return self._cancelled("image")

    async def resolve_text(
        self,
        text: Optional[str],
        *,
        auto_select: Optional[bool] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ResolutionOutcome:
        """Resolve already recognized label text against a fresh scan."""
        with logger.operation("resolve_text"):
            try:
                _check_cancel(cancel)
                credentials = self._extract(text)
                if credentials is None:
                    return ResolutionOutcome(
                        source="text",
                        failure=FailureKind.NO_CREDENTIAL_FOUND,
                        message="No WiFi credentials found in the text",
                    )
                return await self._resolve("text", credentials, auto_select, cancel)
            except ResolutionCancelled:
                return self._cancelled("text")
