"""
WiFiLens Collectors
====================

Adapters for the external collaborators driven by the engine.

Modules:
    base             -- OCREngine, RadioScanner and RadioConnector protocols
    nmcli            -- NetworkManager scanner and connector
    scan_file        -- JSON scan dump replay
    recognized_text  -- OCR source over pre-recognized text
"""

from wifilens.collectors.base import OCREngine, RadioConnector, RadioScanner
from wifilens.collectors.nmcli import NmcliConnector, NmcliScanner
from wifilens.collectors.recognized_text import RecognizedTextOCR
from wifilens.collectors.scan_file import ScanFileError, ScanFileReader

__all__ = [
    "NmcliConnector",
    "NmcliScanner",
    "OCREngine",
    "RadioConnector",
    "RadioScanner",
    "RecognizedTextOCR",
    "ScanFileError",
    "ScanFileReader",
]
