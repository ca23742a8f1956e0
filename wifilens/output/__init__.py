"""
WiFiLens Output
================

Output generation modules for WiFiLens.

Modules:
    console  -- Rich-based console display
"""

from wifilens.output.console import LensConsoleOutput

__all__ = [
    "LensConsoleOutput",
]
