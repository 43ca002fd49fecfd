"""Request context adapter for FastAPI/Starlette requests."""

from __future__ import annotations

from fastapi import Request


class StarletteRequestContext:
    """RequestContext and CookieReader for the request being served."""

    def __init__(self, request: Request) -> None:
        self._request = request

    def ip_address(self) -> str | None:
        # First X-Forwarded-For entry is the original client behind proxies
        xff = self._request.headers.get("x-forwarded-for")
        if xff:
            return xff.split(",")[0].strip()
        return self._request.client.host if self._request.client else None

    def user_agent(self) -> str | None:
        return self._request.headers.get("user-agent")

    def get(self, name: str) -> str | None:
        return self._request.cookies.get(name)
