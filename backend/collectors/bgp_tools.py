"""
BGP.tools Collector — scrape the bgp.tools super looking glass.

There is no JSON API, so the HTML result page is scraped. Every path in
the page follows a 'unicast' marker and lists its hops as
<abbr title="ORG NAME">ASN</abbr> elements in path order.
"""

import html
import logging
import re
from typing import Optional

import requests

from collectors import RouteCollector, SourceUnavailable
from models import ASNInfo, ASPath, BGPResponse, BGPRoute

logger = logging.getLogger(__name__)

BGP_TOOLS_URL = "https://bgp.tools/super-lg"
BGP_TOOLS_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:132.0) Gecko/20100101 Firefox/132.0"

PATH_DELIMITER = "unicast"
ASN_ABBR = re.compile(r'<abbr[^>]*title="([^"]*)"[^>]*>(\d+)</abbr>')


class SuperLGParser:
    """Parse a bgp.tools super-lg result page into BGPRoute objects."""

    @staticmethod
    def parse(page: str, cidr: str) -> BGPResponse:
        routes: list[BGPRoute] = []

        # Text before the first marker is page chrome
        for block in page.split(PATH_DELIMITER)[1:]:
            route = SuperLGParser._parse_block(block, cidr)
            if route:
                routes.append(route)

        return BGPResponse(count=len(routes), response=routes)

    @staticmethod
    def _parse_block(block: str, cidr: str) -> Optional[BGPRoute]:
        asns: list[int] = []
        asnmap: dict[str, ASNInfo] = {}

        for m in ASN_ABBR.finditer(block):
            org_name, as_num = m.group(1), m.group(2)
            asns.append(int(as_num))
            asnmap[as_num] = ASNInfo(asn=as_num, country="", descr=html.unescape(org_name))

        if not asns:
            return None

        return BGPRoute(
            prefix=cidr,
            aspath=[ASPath(type=1, asns=tuple(asns))],
            neighborip="",
            origin=0,
            asnmap=asnmap,
        )


class BGPToolsCollector(RouteCollector):
    def __init__(self, url: str = BGP_TOOLS_URL, user_agent: str = BGP_TOOLS_USER_AGENT, timeout: float = 30.0):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout

    def name(self) -> str:
        return "BGP.tools"

    def fetch(self, cidr: str) -> BGPResponse:
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            r = requests.post(self.url, data={"q": cidr, "asnmatch": ""}, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise SourceUnavailable(self.name(), f"request failed: {e}") from e

        if not r.ok:
            raise SourceUnavailable(self.name(), f"HTTP error! status: {r.status_code}")

        data = SuperLGParser.parse(r.text, cidr)
        logger.info(f"[{self.name()}] {cidr}: {data.count} routes")
        return data
