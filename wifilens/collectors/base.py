"""
WiFiLens Collaborator Protocols
================================

Contracts for the external collaborators the engine drives. The engine
only decides *what* to recognize, scan or connect with; these objects do
the work against the OCR engine and the radio.

Any of them may raise or hang. The engine wraps every call in a timeout
and downgrades failures to core outcomes.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, Union, runtime_checkable

from wifilens.core.models import WiFiNetwork


@runtime_checkable
class OCREngine(Protocol):
    """Recognizes text in an image for one script hint."""

    async def recognize(self, image_ref: str, script: str) -> str:
        ...


@runtime_checkable
class RadioScanner(Protocol):
    """Returns the currently visible networks.

    Platforms without active scanning may return only the associated
    network, or nothing. Entries may be :class:`WiFiNetwork` instances
    or raw scanner dictionaries.
    """

    async def scan(self) -> Sequence[Union[WiFiNetwork, dict[str, Any]]]:
        ...


@runtime_checkable
class RadioConnector(Protocol):
    """Attempts a connection; returns ``False`` on soft failure."""

    async def connect(self, ssid: str, password: str, is_wpa: bool) -> bool:
        ...
