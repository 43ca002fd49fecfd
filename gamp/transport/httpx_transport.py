"""httpx implementation of HitTransport."""

from __future__ import annotations

import ssl

import certifi
import httpx
import structlog

from gamp.config import AppConfig
from gamp.transport.base import TransportFailure, TransportResponse

log = structlog.get_logger()

USER_AGENT = "gamp/0.1.0"


def tls_context(verify_tls: bool) -> ssl.SSLContext:
    """SSL context for the collection endpoints.

    With ``verify_tls`` off, neither the peer certificate nor the host name
    is checked.
    """
    if verify_tls:
        return ssl.create_default_context(cafile=certifi.where())
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class HttpxHitTransport:
    """HitTransport backed by a synchronous httpx.Client.

    ``verify_tls`` only applies to the client created here. A client passed
    in by the caller is used as-is and is not closed by ``close()``.
    """

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        verify_tls: bool = False,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._owns_client = client is None
        self.ssl_context: ssl.SSLContext | None = None
        if client is None:
            self.ssl_context = tls_context(verify_tls)
            client = httpx.Client(
                timeout=timeout_seconds,
                verify=self.ssl_context,
                transport=transport,
                headers={"User-Agent": USER_AGENT},
            )
        self._client = client

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> HttpxHitTransport:
        return cls(
            timeout_seconds=config.transport.timeout_seconds,
            verify_tls=config.endpoint.verify_tls,
            **kwargs,
        )

    def get(self, url: str) -> TransportResponse:
        try:
            resp = self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # InvalidURL (oversized query, malformed host) is not an HTTPError
            raise TransportFailure(str(e) or e.__class__.__name__) from e
        log.debug("hit_transport_response", status=resp.status_code)
        return TransportResponse(status_code=resp.status_code, text=resp.text)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpxHitTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
