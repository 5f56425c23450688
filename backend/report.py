"""Render an AnalysisResult as the plain-text summary users see."""

from __future__ import annotations

from models import AnalysisResult, PathInfo, SourceSummary

UNKNOWN = "Unknown"

USAGE = (
    "BGP route query\n"
    "Usage: /api/bgp/<CIDR>\n"
    "Example: /api/bgp/23.249.16.0/23"
)


def _source_line(source: SourceSummary) -> str:
    if not source.available:
        return f"- {source.name}: unavailable"
    return f"- {source.name}: {source.count} routes"


def _path_line(info: PathInfo) -> str:
    return f"{info.percentage:.1f}% [{info.tier}] {info.path}"


def format_report(result: AnalysisResult) -> str:
    info = result.target_info
    asn_name = (info.org or info.descr) if info else ""
    country = info.country if info else ""

    lines = [
        f"Query CIDR: {result.cidr}",
        f"ASN: {result.target_asn}",
        f"ASN name: {asn_name or UNKNOWN}",
        f"Region: {country or UNKNOWN}",
        "",
        "Sources:",
        *(_source_line(s) for s in result.sources),
        f"- Merged (deduplicated): {result.total_paths} routes",
        "",
        "Route analysis:",
        *(_path_line(p) for p in result.paths),
    ]
    return "\n".join(lines)


def format_no_data(cidr: str) -> str:
    return f"No routes found for {cidr}."
