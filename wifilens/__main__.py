"""
WiFiLens Module Entry Point
============================

Allows running the WiFiLens CLI via: python -m wifilens
"""

from wifilens.cli import main

if __name__ == "__main__":
    main()
