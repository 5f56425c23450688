"""Tests for the HE.net and BGP.tools collectors (HTTP stubbed)."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
import requests

from collectors import SourceUnavailable
from collectors import bgp_tools, he_net
from collectors.bgp_tools import BGPToolsCollector, SuperLGParser
from collectors.he_net import HENetCollector, SuperLGPayload


SUPER_LG_PAGE = """<html><head><title>Super Looking Glass</title></head><body>
<table>
<tr><td>IPv4 unicast</td><td><abbr title="Cogent Communications">174</abbr>
 <abbr title="Lumen &amp; Partners">3356</abbr> <abbr class="asn" title="CLOUDFLARENET">13335</abbr></td></tr>
<tr><td>IPv4 unicast</td><td><abbr title="Hurricane Electric LLC">6939</abbr>
 <abbr title="CLOUDFLARENET">13335</abbr></td></tr>
<tr><td>IPv4 unicast</td><td>withdrawn</td></tr>
</table></body></html>
"""

HE_PAYLOAD = {
    "count": 1,
    "response": [
        {
            "prefix": "1.1.1.0/24",
            "aspath": [{"type": 1, "asns": [6939, 13335]}],
            "neighborip": "2001:db8::1",
            "origin": 0,
            "asnmap": {
                "13335": {"asn": "13335", "country": "US", "descr": "CLOUDFLARENET", "org": "Cloudflare, Inc."},
            },
            "communities": ["6939:1000"],
        }
    ],
}


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


class TestSuperLGParser:
    def test_paths_in_document_order(self):
        data = SuperLGParser.parse(SUPER_LG_PAGE, "1.1.1.0/24")
        assert data.count == 2
        assert [r.asns for r in data.response] == [(174, 3356, 13335), (6939, 13335)]

    def test_route_shape(self):
        first = SuperLGParser.parse(SUPER_LG_PAGE, "1.1.1.0/24").response[0]
        assert first.prefix == "1.1.1.0/24"
        assert first.aspath[0].type == 1
        assert first.neighborip == ""
        assert first.origin == 0

    def test_descr_from_title(self):
        first = SuperLGParser.parse(SUPER_LG_PAGE, "1.1.1.0/24").response[0]
        assert first.asnmap["3356"].descr == "Lumen & Partners"
        assert first.asnmap["13335"].country == ""
        assert first.asnmap["13335"].org is None

    def test_metadata_per_route(self):
        second = SuperLGParser.parse(SUPER_LG_PAGE, "1.1.1.0/24").response[1]
        assert set(second.asnmap) == {"6939", "13335"}

    def test_no_marker(self):
        data = SuperLGParser.parse("<html>nothing here</html>", "1.1.1.0/24")
        assert data.count == 0
        assert data.response == []


class TestBGPToolsCollector:
    def test_fetch(self, monkeypatch):
        calls = {}

        def fake_post(url, data=None, headers=None, timeout=None):
            calls.update(url=url, data=data, headers=headers, timeout=timeout)
            return DummyResponse(text=SUPER_LG_PAGE)

        monkeypatch.setattr(bgp_tools.requests, "post", fake_post)
        data = BGPToolsCollector(timeout=5).fetch("1.1.1.0/24")
        assert data.count == 2
        assert calls["data"] == {"q": "1.1.1.0/24", "asnmatch": ""}
        assert calls["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
        assert calls["timeout"] == 5

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(bgp_tools.requests, "post", lambda *a, **kw: DummyResponse(status_code=429))
        with pytest.raises(SourceUnavailable, match="429"):
            BGPToolsCollector().fetch("1.1.1.0/24")


class TestHENetCollector:
    def test_fetch(self, monkeypatch):
        calls = {}

        def fake_get(url, params=None, headers=None, timeout=None):
            calls.update(url=url, params=params, headers=headers)
            return DummyResponse(payload=HE_PAYLOAD)

        monkeypatch.setattr(he_net.requests, "get", fake_get)
        data = HENetCollector().fetch("1.1.1.0/24")
        assert data.count == 1
        assert data.response[0].asns == (6939, 13335)
        assert data.response[0].asnmap["13335"].org == "Cloudflare, Inc."
        assert calls["url"].endswith("/show/bgp/route/1.1.1.0/24")
        assert calls["params"]["match-type"] == "all"
        assert calls["headers"]["User-Agent"] == "BGP-Query-Bot/1.0"

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(he_net.requests, "get", lambda *a, **kw: DummyResponse(status_code=500))
        with pytest.raises(SourceUnavailable, match="500"):
            HENetCollector().fetch("1.1.1.0/24")

    def test_connection_error(self, monkeypatch):
        def boom(*a, **kw):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(he_net.requests, "get", boom)
        with pytest.raises(SourceUnavailable) as exc:
            HENetCollector().fetch("1.1.1.0/24")
        assert exc.value.source == "HE.net"

    def test_bad_json(self, monkeypatch):
        monkeypatch.setattr(he_net.requests, "get", lambda *a, **kw: DummyResponse(payload=None))
        with pytest.raises(SourceUnavailable):
            HENetCollector().fetch("1.1.1.0/24")


MIXED_PAYLOAD = {
    "count": 4,
    "response": [
        {"prefix": "1.1.1.0/24", "aspath": None},
        {
            "prefix": "1.1.1.0/24",
            "aspath": [{"type": 1, "asns": [6939, 13335]}],
            "neighborip": None,
            "origin": None,
            "asnmap": {"13335": {"asn": "13335", "country": None, "descr": None, "org": "Cloudflare, Inc."}},
        },
        {"aspath": [{"type": 1, "asns": [174, 13335]}]},
        {"prefix": "1.1.1.0/24", "aspath": [{"type": 1, "asns": ["not-an-asn"]}]},
    ],
}


class TestHENetPayload:
    def test_bad_records_dropped_good_kept(self, monkeypatch):
        monkeypatch.setattr(he_net.requests, "get", lambda *a, **kw: DummyResponse(payload=MIXED_PAYLOAD))
        data = HENetCollector().fetch("1.1.1.0/24")
        # null aspath is kept as a path-less route; missing prefix and bad ASN are dropped
        assert len(data.response) == 2
        assert data.response[0].asns == ()
        assert data.response[1].asns == (6939, 13335)
        assert data.count == 4

    def test_null_text_fields(self):
        data = SuperLGPayload.parse(MIXED_PAYLOAD)
        route = data.response[1]
        assert route.neighborip == ""
        assert route.origin == 0
        info = route.asnmap["13335"]
        assert info.country == ""
        assert info.descr == ""
        assert info.org == "Cloudflare, Inc."

    def test_numeric_asn_in_asnmap(self):
        payload = {"response": [{"prefix": "1.1.1.0/24", "aspath": [{"asns": [13335]}],
                                 "asnmap": {"13335": {"asn": 13335}}}]}
        data = SuperLGPayload.parse(payload)
        assert data.response[0].asnmap["13335"].asn == "13335"
        assert data.count == 1

    def test_missing_response(self):
        assert SuperLGPayload.parse({"count": 0}).response == []

    def test_not_an_object(self, monkeypatch):
        monkeypatch.setattr(he_net.requests, "get", lambda *a, **kw: DummyResponse(payload=["nope"]))
        with pytest.raises(SourceUnavailable, match="unexpected response"):
            HENetCollector().fetch("1.1.1.0/24")
