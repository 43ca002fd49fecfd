"""Core data models for hits and transmission results.

Plain enums and dataclasses with no framework dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Measurement Protocol version. Only changes on backwards-incompatible
# protocol revisions.
PROTOCOL_VERSION = 1

# Keys injected by Hit.build_url(); caller values for these are overwritten.
RESERVED_KEYS = ("v", "t", "tid", "cid", "dl", "z", "uip")


class HitType(str, Enum):
    PAGEVIEW = "pageview"
    EVENT = "event"
    TIMING = "timing"

    @classmethod
    def parse(cls, value: object) -> HitType | None:
        """Return the matching member, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class TransmissionStatus(str, Enum):
    SENT = "sent"
    VALIDATION_FAILED = "validation_failed"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class ParserMessage:
    message_type: str
    description: str
    parameter: str = ""


@dataclass(frozen=True)
class DebugReport:
    """Parsed body of a /debug/collect response."""

    valid: bool
    messages: tuple[ParserMessage, ...] = ()


@dataclass(frozen=True)
class TransmissionResult:
    status: TransmissionStatus
    url: str
    status_code: int | None = None
    body: str = ""
    error: str = ""
    debug_report: DebugReport | None = None

    @property
    def attempted(self) -> bool:
        return self.status is TransmissionStatus.SENT

    @property
    def upstream_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 400
