"""
WiFiLens Extractors
====================

Pure text-to-credential transformations.

Modules:
    qr_payload  -- WIFI: QR payload parser and builder
    ocr_text    -- Multilingual label heuristics over OCR text
    labels      -- Declarative per-language label tables
"""

from wifilens.extractors.ocr_text import extract_from_ocr_text
from wifilens.extractors.qr_payload import build_qr_payload, parse_qr_payload

__all__ = [
    "build_qr_payload",
    "extract_from_ocr_text",
    "parse_qr_payload",
]
