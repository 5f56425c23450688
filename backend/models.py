"""
Data models for the BGP Route Query service.

Provider responses (HE.net JSON, scraped BGP.tools HTML) are normalized into
one shape:
- BGPResponse: {count, response: [BGPRoute]}
- BGPRoute: one observed AS path toward the queried prefix
- ASNInfo: per-ASN metadata fragment carried by each route

Provider JSON is loose: optional text fields may come back as null, ASNs as
numbers. Those are coerced here so one sloppy field does not cost a route.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _text(value):
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    return value


# --- Provider Models ---

class ASNInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    asn: str = ""
    country: str = ""
    descr: str = ""
    org: Optional[str] = None

    @field_validator("asn", "country", "descr", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _text(value)


class ASPath(BaseModel):
    """Ordered ASNs from the vantage point to the origin (last element)."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: int = 1            # only type 1 (AS_SEQUENCE) shows up in practice
    asns: tuple[int, ...] = ()

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, value):
        return 1 if value is None else value

    @field_validator("asns", mode="before")
    @classmethod
    def empty_asns(cls, value):
        return () if value is None else value


class BGPRoute(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prefix: str
    aspath: list[ASPath] = Field(default_factory=list)
    neighborip: str = ""
    origin: int = 0
    asnmap: dict[str, ASNInfo] = Field(default_factory=dict)

    @field_validator("neighborip", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _text(value)

    @field_validator("aspath", "asnmap", mode="before")
    @classmethod
    def empty_container(cls, value, info):
        if value is None:
            return [] if info.field_name == "aspath" else {}
        return value

    @field_validator("origin", mode="before")
    @classmethod
    def default_origin(cls, value):
        return 0 if value is None else value

    @property
    def asns(self) -> tuple[int, ...]:
        """The first AS path of the route, or () when the route has none."""
        if not self.aspath:
            return ()
        return self.aspath[0].asns

    @property
    def path_key(self) -> str:
        """Raw route identity: the undeduplicated ASN sequence, comma-joined."""
        return ",".join(str(asn) for asn in self.asns)


class BGPResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    response: list[BGPRoute] = Field(default_factory=list)


# --- Result Models ---

class PathInfo(BaseModel):
    """One ranked line of the route analysis."""
    path: str
    count: int
    percentage: float        # 0-100 of all merged routes
    tier: str                # 'DIRECT', 'T1', 'T2', 'T3'


class SourceSummary(BaseModel):
    name: str
    count: int = 0
    available: bool = True
    error: Optional[str] = None


class AnalysisResult(BaseModel):
    """Everything the report needs for one queried prefix."""
    cidr: str
    target_asn: str = ""
    target_info: Optional[ASNInfo] = None
    sources: list[SourceSummary] = Field(default_factory=list)
    total_paths: int = 0
    paths: list[PathInfo] = Field(default_factory=list)
