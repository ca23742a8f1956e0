"""
WiFiLens Core
==============

Domain models for the credential extraction and network resolution
engine. The orchestrator itself lives in :mod:`wifilens.core.engine`.
"""

from wifilens.core.models import (
    FailureKind,
    MatchResult,
    ParseFailure,
    ResolutionOutcome,
    SecurityKind,
    SecurityLabel,
    WiFiCredentials,
    WiFiNetwork,
)

__all__ = [
    "FailureKind",
    "MatchResult",
    "ParseFailure",
    "ResolutionOutcome",
    "SecurityKind",
    "SecurityLabel",
    "WiFiCredentials",
    "WiFiNetwork",
]
