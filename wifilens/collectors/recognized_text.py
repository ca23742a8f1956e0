"""
WiFiLens Recognized-Text OCR Source
====================================

An :class:`~wifilens.collectors.base.OCREngine` over text that has
already been recognized, one text per script hint. The CLI uses it to
feed label text files through the same script-hint policy the engine
applies to a live OCR engine.
"""

from __future__ import annotations

from typing import Mapping


class RecognizedTextOCR:
    """Returns pre-recognized text for each script hint.

    A hint with no text raises ``LookupError``, which the engine treats
    like an OCR failure for that hint.
    """

    def __init__(self, texts: Mapping[str, str]) -> None:
        self._texts = dict(texts)

    @property
    def scripts(self) -> list[str]:
        return list(self._texts)

    async def recognize(self, image_ref: str, script: str) -> str:
        try:
            return self._texts[script]
        except KeyError:
            raise LookupError(f"no recognized text for script {script!r}") from None
