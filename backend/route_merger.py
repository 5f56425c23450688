"""Merge per-source route lists into one set keyed by the raw AS path."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from fetcher import SourceResult
from models import ASNInfo, BGPRoute, SourceSummary

logger = logging.getLogger(__name__)


@dataclass
class MergedRouteSet:
    routes: list[BGPRoute] = field(default_factory=list)
    asn_map: dict[str, ASNInfo] = field(default_factory=dict)
    sources: list[SourceSummary] = field(default_factory=list)

    @property
    def total_paths(self) -> int:
        return len(self.routes)

    @property
    def any_source_available(self) -> bool:
        return any(s.available for s in self.sources)

    def first_path_route(self) -> Optional[BGPRoute]:
        """First merged route that actually carries an AS path."""
        for route in self.routes:
            if route.asns:
                return route
        return None


def merge_sources(results: Sequence[SourceResult]) -> MergedRouteSet:
    """
    Combine source results in order.

    The first source is taken as-is. Later sources only add routes whose raw
    ASN sequence is not already present; only added routes contribute their
    ASN metadata. Later metadata overwrites earlier metadata for the same ASN.
    """
    merged = MergedRouteSet()
    seen: set[str] = set()

    for idx, result in enumerate(results):
        if not result.ok:
            merged.sources.append(SourceSummary(name=result.name, available=False, error=result.error))
            continue

        merged.sources.append(SourceSummary(name=result.name, count=result.response.count))
        added = 0
        for route in result.response.response:
            key = route.path_key
            if idx > 0 and key in seen:
                continue
            seen.add(key)
            merged.routes.append(route)
            merged.asn_map.update(route.asnmap)
            added += 1

        logger.debug("%s: %d of %d routes kept after merge", result.name, added, len(result.response.response))

    return merged
