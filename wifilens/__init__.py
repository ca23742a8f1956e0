"""
WiFiLens -- Credential Extraction & Network Resolution
=======================================================

WiFiLens pulls WiFi credentials out of QR payloads and photographed
labels (router stickers, printed notes) and reconciles the extracted
network name with the networks the device can actually see, so the user
is offered the in-range network instead of an OCR-mangled name.

Modules:
    core.engine     -- Resolution orchestrator
    core.models     -- Pydantic domain models
    extractors      -- QR payload codec and OCR text extraction
    analyzers       -- Network catalog builder and fuzzy matcher
    collectors      -- OCR, scanner and connector adapters
    output          -- Console output
    cli             -- Click-based command-line interface

References:
    - ZXing. Barcode Contents: Wi-Fi Network config (Android).
      https://github.com/zxing/zxing/wiki/Barcode-Contents
    - RapidFuzz Documentation. https://rapidfuzz.github.io/RapidFuzz/
"""

__version__ = "1.0.0"
__tool__ = "WiFiLens"
__description__ = "Credential Extraction & Network Resolution"
