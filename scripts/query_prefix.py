#!/usr/bin/env python3
"""
Query both looking glasses for a prefix and print the route analysis.

Usage: python3 scripts/query_prefix.py [cidr] [settings.yml]
Default prefix: 23.249.16.0/23
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))
from analyzer import analyze_prefix_report
from config import Settings
from prefix_input import InvalidPrefix, normalize_prefix

DEFAULT_PREFIX = "23.249.16.0/23"


def main():
    text = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PREFIX
    settings = Settings.from_yaml(sys.argv[2]) if len(sys.argv) > 2 else Settings()

    try:
        cidr = normalize_prefix(text, settings.prefix_lookup_url, settings.prefix_lookup_timeout)
    except InvalidPrefix as e:
        print(f"Invalid input: {e}")
        return 2

    print(f"Querying {cidr}...")
    result, report = asyncio.run(
        analyze_prefix_report(cidr, settings.build_collectors(), settings.source_timeout)
    )
    print(f"\n{'='*60}")
    print(report)
    print(f"{'='*60}")
    return 0 if result else 1


if __name__ == "__main__":
    sys.exit(main())
