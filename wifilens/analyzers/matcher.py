"""
WiFiLens Network Matcher
=========================

Fuzzy-ranks an extracted SSID against the catalog of visible networks.

OCR- and QR-derived names carry transcription noise: misread glyphs,
case differences, dropped or doubled characters. The matcher scores each
catalog SSID against the target with rapidfuzz and keeps the entries
that clear an acceptance threshold.

Scoring works on normalized strings (lower-cased, punctuation folded to
spaces) and takes the better of the plain Indel ratio and the
token-sorted ratio, so ``cafe_free wifi`` and ``WiFi Cafe Free`` both
land near ``Cafe Free WiFi``. Scores are on a 0-100 scale.

References:
    - Bachmann, M. (2024). RapidFuzz. https://github.com/rapidfuzz/RapidFuzz
    - Levenshtein, V. I. (1966). Binary codes capable of correcting
      deletions, insertions, and reversals. Soviet Physics Doklady, 10(8).
"""

from __future__ import annotations

from typing import Optional, Sequence

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from shared.config import MatcherConfig
from shared.logger import LensLogger

from wifilens.core.models import MatchResult, WiFiNetwork

logger = LensLogger("analyzers.matcher")

DEFAULT_THRESHOLD: float = 60.0


def similarity(a: str, b: str) -> float:
    """Similarity of two SSIDs on a 0-100 scale."""
    if not a or not b:
        return 0.0
    return max(
        fuzz.ratio(a, b, processor=default_process),
        fuzz.token_sort_ratio(a, b, processor=default_process),
    )


def _validate_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 100.0:
        raise ValueError(f"threshold must be within 0-100, got {threshold}")
    return float(threshold)


def rank_by_similarity(
    target: Optional[str],
    catalog: Sequence[WiFiNetwork],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[MatchResult]:
    """Rank *catalog* by similarity to *target*, best first.

    Entries scoring below *threshold* are discarded. Normalization lets a
    case or punctuation variant score 100 like the literal name, so among
    equal scores a byte-exact SSID ranks first; remaining ties keep
    catalog order. An empty target or catalog yields an empty list.
    """
    if not target or not target.strip() or not catalog:
        return []

    scored = [
        MatchResult(network=network, score=similarity(target, network.ssid))
        for network in catalog
    ]
    survivors = [m for m in scored if m.score >= threshold]
    # sorted() is stable, so remaining ties keep catalog order.
    ranked = sorted(survivors, key=lambda m: (-m.score, m.network.ssid != target))

    logger.debug(
        "Ranked catalog",
        catalog=len(catalog),
        accepted=len(ranked),
        threshold=threshold,
    )
    return ranked


def best_match(
    target: Optional[str],
    catalog: Sequence[WiFiNetwork],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> Optional[WiFiNetwork]:
    """Return the top-ranked network, or ``None`` if nothing clears *threshold*."""
    ranked = rank_by_similarity(target, catalog, threshold=threshold)
    return ranked[0].network if ranked else None


class NetworkMatcher:
    """Matcher bound to a configured acceptance threshold.

    Usage::

        matcher = NetworkMatcher(config.matcher)
        candidates = matcher.rank("HomeNet", catalog)
    """

    def __init__(self, config: Optional[MatcherConfig] = None) -> None:
        config = config or MatcherConfig()
        self._threshold = _validate_threshold(config.threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    def rank(self, target: Optional[str], catalog: Sequence[WiFiNetwork]) -> list[MatchResult]:
        return rank_by_similarity(target, catalog, threshold=self._threshold)

    def best(self, target: Optional[str], catalog: Sequence[WiFiNetwork]) -> Optional[WiFiNetwork]:
        return best_match(target, catalog, threshold=self._threshold)
