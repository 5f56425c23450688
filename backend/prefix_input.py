"""
Turn user text into a canonical CIDR string.

Text that already is an IPv4/IPv6 CIDR is used as-is. Anything else (a bare
address, a hostname-looking string) is sent to the configured lookup
service, which answers with a redirect whose final URL ends in the covering
prefix, e.g. https://lookup.example/net/1.1.1.0/24.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import quote, unquote, urlparse

import requests

logger = logging.getLogger(__name__)

IPV4_CIDR = re.compile(r'^\d{1,3}(\.\d{1,3}){3}/(\d{1,2})$')
IPV6_CIDR = re.compile(r'^[0-9a-fA-F:.]*:[0-9a-fA-F:.]*/(\d{1,3})$')


class InvalidPrefix(ValueError):
    """Input is neither a CIDR nor resolvable to one."""


def is_valid_cidr(text: str) -> bool:
    if IPV4_CIDR.match(text):
        max_len = 32
    elif IPV6_CIDR.match(text):
        max_len = 128
    else:
        return False

    addr, _, length = text.partition("/")
    if int(length) > max_len:
        return False
    try:
        ipaddress.ip_address(addr)
    except ValueError:
        return False
    return True


def _prefix_from_url(url: str) -> Optional[str]:
    segments = [s for s in unquote(urlparse(url).path).split("/") if s]
    if len(segments) < 2:
        return None
    candidate = f"{segments[-2]}/{segments[-1]}"
    return candidate if is_valid_cidr(candidate) else None


def resolve_prefix(text: str, lookup_url: str, timeout: float = 15.0) -> Optional[str]:
    """Follow the lookup service's redirect and read the prefix off the final URL."""
    url = f"{lookup_url.rstrip('/')}/{quote(text, safe='')}"
    try:
        r = requests.get(url, allow_redirects=True, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Prefix lookup for %r failed: %s", text, e)
        return None

    if not r.history:
        return None
    return _prefix_from_url(r.url)


def normalize_prefix(text: str, lookup_url: str = "", timeout: float = 15.0) -> str:
    cidr = (text or "").strip()
    if not cidr:
        raise InvalidPrefix("Please provide a CIDR block, e.g. 23.249.16.0/23")

    if is_valid_cidr(cidr):
        return cidr

    if lookup_url:
        resolved = resolve_prefix(cidr, lookup_url, timeout)
        if resolved:
            logger.info("Resolved %r to %s", cidr, resolved)
            return resolved

    raise InvalidPrefix(f"'{cidr}' is not a valid CIDR block")
