"""
One prefix query, end to end.

fetch all sources (concurrently) → merge → classify → rank → AnalysisResult
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from collectors import RouteCollector
from fetcher import DEFAULT_SOURCE_TIMEOUT, SourceResult, fetch_all_sources
from models import AnalysisResult
from path_analyzer import analyze_routes
from report import format_no_data, format_report
from route_merger import merge_sources

logger = logging.getLogger(__name__)


class NoDataAvailable(Exception):
    """Every source failed, or together they returned no routes."""

    def __init__(self, cidr: str, errors: Optional[dict[str, str]] = None):
        super().__init__(f"No data available for {cidr}")
        self.cidr = cidr
        self.errors = errors or {}


def build_analysis(cidr: str, results: Sequence[SourceResult]) -> AnalysisResult:
    """Merge settled source results and rank the paths. Raises NoDataAvailable."""
    merged = merge_sources(results)
    errors = {s.name: s.error or "" for s in merged.sources if not s.available}

    if not merged.any_source_available or merged.total_paths == 0:
        raise NoDataAvailable(cidr, errors)

    total_paths = merged.total_paths
    paths = analyze_routes(merged.routes, merged.asn_map, total_paths)

    target_asn = ""
    first = merged.first_path_route()
    if first is not None:
        target_asn = str(first.asns[-1])

    return AnalysisResult(
        cidr=cidr,
        target_asn=target_asn,
        target_info=merged.asn_map.get(target_asn),
        sources=merged.sources,
        total_paths=total_paths,
        paths=paths,
    )


async def analyze_prefix(cidr: str, collectors: Sequence[RouteCollector],
                         timeout: float = DEFAULT_SOURCE_TIMEOUT) -> AnalysisResult:
    results = await fetch_all_sources(cidr, collectors, timeout)
    return build_analysis(cidr, results)


async def analyze_prefix_report(cidr: str, collectors: Sequence[RouteCollector],
                                timeout: float = DEFAULT_SOURCE_TIMEOUT) -> tuple[Optional[AnalysisResult], str]:
    """Like analyze_prefix, but a missing-data outcome becomes the no-data text."""
    try:
        result = await analyze_prefix(cidr, collectors, timeout)
    except NoDataAvailable as e:
        logger.warning("%s (source errors: %s)", e, e.errors or "none")
        return None, format_no_data(cidr)
    return result, format_report(result)
