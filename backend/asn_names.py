"""
ASN naming — turn an ASN into something a human recognizes.

The curated operator table always wins over provider metadata so the same
carrier is named the same way no matter which provider answered.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from models import ASNInfo


# Major transit / carrier networks. Membership here is also the tier-1 signal.
OPERATOR_MAPPING: Mapping[str, str] = MappingProxyType({
    "5511": "Orange",
    "3257": "GTT",
    "6461": "Zayo",
    "6830": "Liberty",
    "174": "Cogent",
    "701": "Verizon",
    "1299": "Arelion",
    "2914": "NTT",
    "3491": "PCCW",
    "3356": "Lumen",
    "3320": "DTAG",
    "24482": "SG.GS",
    "4134": "China Telecom",
    "4809": "China Telecom",
    "9002": "RETN",
    "1273": "Vodafone",
    "2828": "Verizon",
    "4637": "Telstra",
    "7922": "Comcast",
    "3216": "VEON",
    "9498": "Bharti Airtel",
    "4538": "China Education Network",
    "4837": "China Unicom",
    "7018": "AT&T",
    "2497": "IIJ",
    "4766": "Korea Telecom",
    "577": "Bell Canada",
    "3303": "Swisscom",
    "6453": "TATA Communications",
    "6762": "Sparkle",
    "7473": "Singtel",
    "4826": "VOCUS",
    "6939": "HE",
    "9299": "Philippine Long Distance",
    "4755": "TATA India",
})

# Trailing corporate suffix, only when it is the last whitespace-separated token
CORPORATE_SUFFIX = re.compile(r'\s(AS|Ltd\.?|Inc\.?|Corp\.?|Limited|Corporation)$', re.IGNORECASE)


def is_tier1_asn(asn: str) -> bool:
    return asn in OPERATOR_MAPPING


def name_from_descr(descr: str) -> str:
    """
    Shorten a registry description to an operator name.

    'CLOUDFLARENET - Cloudflare, Inc., US' -> 'CLOUDFLARENET'
    'Example Networks Ltd' -> 'Example Networks'
    """
    name = descr.split(',')[0].split('-')[0]
    name = CORPORATE_SUFFIX.sub('', name)
    return name.strip()


def resolve_asn_name(asn: str, asn_map: Mapping[str, ASNInfo]) -> str:
    """Curated table, then provider org, then shortened descr, then the ASN itself."""
    mapped = OPERATOR_MAPPING.get(asn)
    if mapped:
        return mapped

    info = asn_map.get(asn)
    if info is not None:
        if info.org:
            return info.org
        if info.descr:
            return name_from_descr(info.descr)
    return asn
