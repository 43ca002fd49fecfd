"""In-process implementations of the context ports."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

log = structlog.get_logger()


@dataclass
class StaticRequestContext:
    """RequestContext with explicitly supplied values (jobs, tests)."""

    ip: str | None = None
    agent: str | None = None

    def ip_address(self) -> str | None:
        return self.ip

    def user_agent(self) -> str | None:
        return self.agent


@dataclass
class DictCookieReader:
    """CookieReader backed by a plain mapping."""

    cookies: dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str | None:
        return self.cookies.get(name)


class LogDiagnosticSink:
    """DiagnosticSink that writes debug endpoint responses to the log."""

    def show(self, body: str) -> None:
        log.info("hit_debug_response", body=body)
