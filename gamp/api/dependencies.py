"""FastAPI dependencies for reporting hits from request handlers.

Usage::

    @app.get("/download/{name}")
    def download(name: str, hit: Hit = Depends(new_hit),
                 transport: HitTransport = Depends(get_transport)):
        hit.set_hit_type(HitType.EVENT)
        hit.set_event_parameters("download", name)
        hit.send_hit(transport)
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache

from fastapi import Depends, Request

from gamp.config import AppConfig, load_config
from gamp.context.starlette_request import StarletteRequestContext
from gamp.core.hit import Hit
from gamp.core.identity import GA_COOKIE_NAME
from gamp.transport.httpx_transport import HttpxHitTransport


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load gamp.yaml + environment once per process."""
    return load_config()


def new_hit(request: Request, config: AppConfig = Depends(get_config)) -> Hit:
    """A Hit bound to the current request's IP, user agent and _ga cookie.

    The client ID comes from the _ga cookie when the visitor has one,
    otherwise a fresh ID is generated.
    """
    context = StarletteRequestContext(request)
    hit = Hit(config=config, request_context=context, cookies=context)
    hit.set_client_id(use_cookie=context.get(GA_COOKIE_NAME) is not None, parse_cookie=True)
    hit.set_user_agent()
    return hit


def get_transport(config: AppConfig = Depends(get_config)) -> Iterator[HttpxHitTransport]:
    with HttpxHitTransport.from_config(config) as transport:
        yield transport
