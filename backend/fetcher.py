"""
Query every collector concurrently and keep partial results.

Each collector runs in its own task with its own deadline. A failure or
timeout is captured into that collector's SourceResult and never cancels
the others; the caller gets one result per collector, in collector order.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from collectors import RouteCollector
from models import BGPResponse

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TIMEOUT = 30.0


@dataclass
class SourceResult:
    name: str
    response: Optional[BGPResponse] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.response is not None


async def fetch_source(collector: RouteCollector, cidr: str,
                       timeout: float = DEFAULT_SOURCE_TIMEOUT) -> SourceResult:
    name = collector.name()
    loop = asyncio.get_running_loop()
    try:
        response = await asyncio.wait_for(loop.run_in_executor(None, collector.fetch, cidr), timeout)
    except asyncio.TimeoutError:
        logger.error("Error fetching from %s: no answer within %.0fs", name, timeout)
        return SourceResult(name=name, error=f"timed out after {timeout:.0f}s")
    except Exception as e:
        logger.error("Error fetching from %s: %s", name, e)
        return SourceResult(name=name, error=str(e))
    return SourceResult(name=name, response=response)


async def fetch_all_sources(cidr: str, collectors: Sequence[RouteCollector],
                            timeout: float = DEFAULT_SOURCE_TIMEOUT) -> list[SourceResult]:
    """Join over all collectors; returns once every one has settled."""
    return list(await asyncio.gather(*(fetch_source(c, cidr, timeout) for c in collectors)))
