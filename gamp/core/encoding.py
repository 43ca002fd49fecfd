"""Query string encoding and endpoint selection."""

from __future__ import annotations

from enum import Enum
from typing import Mapping
from urllib.parse import quote, urlencode

COLLECT_PATH = "/collect"
DEBUG_COLLECT_PATH = "/debug/collect"


def collection_endpoint(collection_host: str, use_testing_endpoint: bool) -> str:
    """Return the endpoint base hits are sent to (without the ``?``)."""
    path = DEBUG_COLLECT_PATH if use_testing_endpoint else COLLECT_PATH
    return f"https://{collection_host}{path}"


def encode_parameters(parameters: Mapping[str, object]) -> str:
    """Form-encode parameters with RFC 3986 percent-encoding.

    Spaces become ``%20`` and ``/`` is escaped. Keys keep the mapping's
    iteration order. None values are dropped.
    """
    pairs = [(k, _format_value(v)) for k, v in parameters.items() if v is not None]
    return urlencode(pairs, quote_via=quote, safe="")


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
