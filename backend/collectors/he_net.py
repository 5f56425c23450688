"""
HE.net Collector — query the Hurricane Electric super looking glass.

The JSON API already returns routes in BGPResponse shape, including the
per-route asnmap with org/descr/country for every hop. Routes are validated
one by one; a record that cannot be read is logged and dropped.
"""

import logging

import requests
from pydantic import ValidationError

from collectors import RouteCollector, SourceUnavailable
from models import BGPResponse, BGPRoute

logger = logging.getLogger(__name__)

HE_API_URL = "https://bgp.he.net/super-lg/api/v1/show/bgp/route"
HE_USER_AGENT = "BGP-Query-Bot/1.0"


class SuperLGPayload:
    """Turn the HE.net JSON body into a BGPResponse, skipping unreadable routes."""

    @staticmethod
    def parse(payload) -> BGPResponse:
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")

        raw_routes = payload.get("response") or []
        if not isinstance(raw_routes, list):
            raise ValueError("'response' is not a list")

        routes: list[BGPRoute] = []
        for idx, raw in enumerate(raw_routes):
            try:
                routes.append(BGPRoute.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping unreadable route #%d: %s", idx, e)

        count = payload.get("count")
        if not isinstance(count, int) or isinstance(count, bool):
            count = len(routes)
        return BGPResponse(count=count, response=routes)


class HENetCollector(RouteCollector):
    def __init__(self, base_url: str = HE_API_URL, user_agent: str = HE_USER_AGENT, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    def name(self) -> str:
        return "HE.net"

    def fetch(self, cidr: str) -> BGPResponse:
        url = f"{self.base_url}/{cidr}"
        params = {"match-asn": "", "match-type": "all", "match-neighbor": ""}
        try:
            r = requests.get(url, params=params, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
        except requests.RequestException as e:
            raise SourceUnavailable(self.name(), f"request failed: {e}") from e

        if not r.ok:
            raise SourceUnavailable(self.name(), f"HTTP error! status: {r.status_code}")

        try:
            data = SuperLGPayload.parse(r.json())
        except ValueError as e:
            raise SourceUnavailable(self.name(), f"unexpected response: {e}") from e

        logger.info(f"[{self.name()}] {cidr}: {data.count} routes")
        return data
