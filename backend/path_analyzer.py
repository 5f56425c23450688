"""
Path Analyzer — normalize AS paths and tally which networks they cross.

Each merged route contributes to up to four buckets:
  DIRECT  short path whose first hop is not a major carrier
  T1      the major carrier right before the origin
  T2      last three hops (… -> END)
  T3      last four hops (… -> END)

Percentages are computed against the number of merged routes, so a bucket
never sums past 100%.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from asn_names import is_tier1_asn, resolve_asn_name
from models import ASNInfo, BGPRoute, PathInfo

logger = logging.getLogger(__name__)

END_MARKER = "END"
PATH_SEPARATOR = " -> "
DIRECT_KEY = "DIRECT"

TOP_PER_TIER = 5
MAX_REPORT_PATHS = 15


def deduplicate_path(path: Sequence[str]) -> list[str]:
    """Drop a hop when the next hop is the same ASN (prepending). Non-adjacent repeats stay."""
    return [asn for i, asn in enumerate(path) if i + 1 >= len(path) or asn != path[i + 1]]


def normalize_path(path: Sequence[str], asn_map: Mapping[str, ASNInfo]) -> tuple[list[str], list[str]]:
    """Return (deduplicated ASNs, display names) with the origin renamed to END."""
    deduped = deduplicate_path(path)
    names = [resolve_asn_name(asn, asn_map) for asn in deduped]
    if names:
        names[-1] = END_MARKER
    return deduped, names


@dataclass
class TierStats:
    """Insertion-ordered occurrence counts per bucket."""
    direct: dict[str, int] = field(default_factory=dict)
    tier1: dict[str, int] = field(default_factory=dict)
    tier2: dict[str, int] = field(default_factory=dict)
    tier3: dict[str, int] = field(default_factory=dict)

    @staticmethod
    def _bump(bucket: dict[str, int], key: str) -> None:
        bucket[key] = bucket.get(key, 0) + 1

    def classify(self, deduped: Sequence[str], names: Sequence[str]) -> None:
        """Apply the positional tier rules to one normalized path."""
        n = len(deduped)
        if n == 0:
            return

        if n <= 2 and not is_tier1_asn(deduped[0]):
            self._bump(self.direct, DIRECT_KEY)

        if n >= 2 and is_tier1_asn(deduped[n - 2]):
            self._bump(self.tier1, names[n - 2])

        if n >= 3:
            self._bump(self.tier2, PATH_SEPARATOR.join(names[-3:]))

        if n >= 4:
            self._bump(self.tier3, PATH_SEPARATOR.join(names[-4:]))

    def add_route(self, route: BGPRoute, asn_map: Mapping[str, ASNInfo]) -> bool:
        """Classify a route. Routes without a usable AS path are skipped."""
        if not route.asns:
            logger.debug("Skipping route for %s without AS path", route.prefix)
            return False
        deduped, names = normalize_path([str(asn) for asn in route.asns], asn_map)
        self.classify(deduped, names)
        return True


def percentage(count: int, total_paths: int) -> float:
    if total_paths <= 0:
        logger.warning("Percentage requested with %d total paths, reporting 0%%", total_paths)
        return 0.0
    return count / total_paths * 100


def rank_bucket(bucket: Mapping[str, int], tier: str, total_paths: int,
                limit: int = TOP_PER_TIER) -> list[PathInfo]:
    """Top entries of one bucket by percentage. Ties keep insertion order."""
    infos = [
        PathInfo(path=path, count=count, percentage=percentage(count, total_paths), tier=tier)
        for path, count in bucket.items()
    ]
    infos.sort(key=lambda p: p.percentage, reverse=True)
    return infos[:limit]


def rank_all(stats: TierStats, total_paths: int, limit: int = MAX_REPORT_PATHS) -> list[PathInfo]:
    """DIRECT, T1, T2, T3 rankings in that order, cut to the report size."""
    ranked = (
        rank_bucket(stats.direct, "DIRECT", total_paths)
        + rank_bucket(stats.tier1, "T1", total_paths)
        + rank_bucket(stats.tier2, "T2", total_paths)
        + rank_bucket(stats.tier3, "T3", total_paths)
    )
    return ranked[:limit]


def analyze_routes(routes: Iterable[BGPRoute], asn_map: Mapping[str, ASNInfo],
                   total_paths: int) -> list[PathInfo]:
    stats = TierStats()
    for route in routes:
        stats.add_route(route, asn_map)
    return rank_all(stats, total_paths)
