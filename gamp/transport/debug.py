"""Parsing of /debug/collect validation responses."""

from __future__ import annotations

import json

from gamp.core.models import DebugReport, ParserMessage


def parse_debug_response(body: str) -> DebugReport | None:
    """Parse the debug endpoint's ``hitParsingResult`` JSON.

    Returns None when the body is not a debug response.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None

    results = data.get("hitParsingResult")
    if not isinstance(results, list) or not results:
        return None

    # One hit per request, so only the first result is relevant.
    first = results[0] if isinstance(results[0], dict) else {}
    raw_messages = first.get("parserMessage") or []
    if not isinstance(raw_messages, list):
        raw_messages = []
    messages = tuple(
        ParserMessage(
            message_type=m.get("messageType") or "",
            description=m.get("description") or "",
            parameter=m.get("parameter") or "",
        )
        for m in raw_messages
        if isinstance(m, dict)
    )
    return DebugReport(valid=first.get("valid") is True, messages=messages)
