"""Transport interface (port) for delivering hits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    text: str = ""


class TransportFailure(Exception):
    """Network-level failure: connection refused, timeout, TLS error."""


class HitTransport(Protocol):
    """Port: issues one GET request for a built hit URL.

    Any HTTP status is returned as a response; only network-level
    failures raise TransportFailure.
    """

    def get(self, url: str) -> TransportResponse: ...
