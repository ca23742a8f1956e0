"""
WiFiLens Analyzers
===================

Pure transformations over scanned networks.

Modules:
    catalog  -- Hidden/unsecured filtering, SSID deduplication, security labels
    matcher  -- Fuzzy SSID ranking against the catalog
"""

from wifilens.analyzers.catalog import CatalogBuilder, build_catalog, classify_security
from wifilens.analyzers.matcher import NetworkMatcher, best_match, rank_by_similarity

__all__ = [
    "CatalogBuilder",
    "NetworkMatcher",
    "best_match",
    "build_catalog",
    "classify_security",
    "rank_by_similarity",
]
