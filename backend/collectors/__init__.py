"""Route collectors: normalize provider data to the common BGPResponse format."""

from __future__ import annotations

from abc import ABC, abstractmethod

from models import BGPResponse


class SourceUnavailable(Exception):
    """A provider could not be reached or answered with an error status."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class RouteCollector(ABC):
    """Base class for route-data providers."""

    @abstractmethod
    def name(self) -> str:
        """Provider name, shown in the report."""
        ...

    @abstractmethod
    def fetch(self, cidr: str) -> BGPResponse:
        """
        Fetch every observed path toward a canonical CIDR.

        Blocking; raises SourceUnavailable on transport or status errors.
        """
        ...
