"""
WiFiLens Shared Module
=======================

Configuration, structured logging and console presentation shared by
the WiFiLens engine and its command-line interface.
"""

from shared.config import WifiLensConfig, get_config

__all__ = ["WifiLensConfig", "get_config"]
