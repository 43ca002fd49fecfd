"""Collaborator interfaces (ports) consumed by the hit model."""

from __future__ import annotations

from typing import Protocol


class RequestContext(Protocol):
    """Port: the inbound request a hit is reported on behalf of."""

    def ip_address(self) -> str | None: ...

    def user_agent(self) -> str | None: ...


class CookieReader(Protocol):
    """Port: read access to the visitor's cookies."""

    def get(self, name: str) -> str | None: ...


class DiagnosticSink(Protocol):
    """Port: receives raw debug endpoint responses."""

    def show(self, body: str) -> None: ...
