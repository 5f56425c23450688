"""
Settings Loader — read provider endpoints and timeouts from YAML.

Every key is optional; missing keys keep the defaults below, which point at
the public HE.net and bgp.tools looking glasses.

Example:
    sources:
      he_net:
        url: https://bgp.he.net/super-lg/api/v1/show/bgp/route
        user_agent: BGP-Query-Bot/1.0
      bgp_tools:
        url: https://bgp.tools/super-lg
    source_timeout: 30
    prefix_lookup:
      url: https://lookup.example/net
      timeout: 15
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from collectors import RouteCollector
from collectors.bgp_tools import BGP_TOOLS_URL, BGP_TOOLS_USER_AGENT, BGPToolsCollector
from collectors.he_net import HE_API_URL, HE_USER_AGENT, HENetCollector
from fetcher import DEFAULT_SOURCE_TIMEOUT


@dataclass
class Settings:
    he_url: str = HE_API_URL
    he_user_agent: str = HE_USER_AGENT
    bgp_tools_url: str = BGP_TOOLS_URL
    bgp_tools_user_agent: str = BGP_TOOLS_USER_AGENT
    source_timeout: float = DEFAULT_SOURCE_TIMEOUT
    prefix_lookup_url: str = ""      # empty disables lookup of non-CIDR input
    prefix_lookup_timeout: float = 15.0

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings not found: {path}")

        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> "Settings":
        settings = cls()
        sources = raw.get("sources") or {}
        he = sources.get("he_net") or {}
        bt = sources.get("bgp_tools") or {}
        lookup = raw.get("prefix_lookup") or {}

        settings.he_url = he.get("url", settings.he_url)
        settings.he_user_agent = he.get("user_agent", settings.he_user_agent)
        settings.bgp_tools_url = bt.get("url", settings.bgp_tools_url)
        settings.bgp_tools_user_agent = bt.get("user_agent", settings.bgp_tools_user_agent)
        settings.source_timeout = float(raw.get("source_timeout", settings.source_timeout))
        settings.prefix_lookup_url = lookup.get("url") or ""
        settings.prefix_lookup_timeout = float(lookup.get("timeout", settings.prefix_lookup_timeout))
        return settings

    def build_collectors(self) -> list[RouteCollector]:
        """Collectors in merge order: HE.net first, then BGP.tools."""
        return [
            HENetCollector(self.he_url, self.he_user_agent, timeout=self.source_timeout),
            BGPToolsCollector(self.bgp_tools_url, self.bgp_tools_user_agent, timeout=self.source_timeout),
        ]
