"""BGP Route Query API."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from analyzer import analyze_prefix_report
from collectors import RouteCollector
from config import Settings
from models import AnalysisResult
from prefix_input import InvalidPrefix, normalize_prefix
from report import USAGE

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(title="BGP Route Query", description="Which networks carry traffic to a prefix", version=VERSION)

backend_dir = Path(__file__).parent
project_dir = backend_dir.parent
settings_path = Path(os.environ.get("BGP_QUERY_CONFIG", project_dir / "config" / "settings.yml"))

settings = Settings()
try:
    settings = Settings.from_yaml(settings_path)
except Exception as e:
    logger.warning("Could not load settings, using defaults: %s", e)

_collectors: list[RouteCollector] = settings.build_collectors()


class PrefixQuery(BaseModel):
    query: str


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION, "sources": [c.name() for c in _collectors]}


@app.get("/api/usage", response_class=PlainTextResponse)
async def usage():
    return USAGE


@app.post("/api/bgp")
async def query_prefix(query: PrefixQuery):
    return await _run_query(query.query)


@app.get("/api/bgp/{query:path}")
async def query_prefix_path(query: str):
    return await _run_query(query)


async def _run_query(text: str) -> dict:
    # The prefix lookup is a blocking HTTP call
    loop = asyncio.get_running_loop()
    try:
        cidr = await loop.run_in_executor(
            None, normalize_prefix, text, settings.prefix_lookup_url, settings.prefix_lookup_timeout
        )
    except InvalidPrefix as e:
        raise HTTPException(400, str(e))

    try:
        result, report = await analyze_prefix_report(cidr, _collectors, settings.source_timeout)
    except Exception as e:
        logger.error("Error analyzing BGP data for %s: %s", cidr, e)
        raise HTTPException(502, "Error analyzing BGP data. Please try again later.")
    return _serialize_result(cidr, result, report)


def _serialize_result(cidr: str, result: Optional[AnalysisResult], report: str) -> dict:
    if result is None:
        return {"cidr": cidr, "found": False, "report": report, "paths": [], "sources": []}
    return {
        "cidr": cidr,
        "found": True,
        "report": report,
        "target_asn": result.target_asn,
        "total_paths": result.total_paths,
        "sources": [s.model_dump() for s in result.sources],
        "paths": [
            {
                "path": p.path,
                "count": p.count,
                "percentage": round(p.percentage, 1),
                "tier": p.tier,
            }
            for p in result.paths
        ],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.environ.get("HOST", "127.0.0.1"), port=int(os.environ.get("PORT", "8000")))
