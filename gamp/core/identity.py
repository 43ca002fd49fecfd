"""Tracking and client identity resolution.

Everything here is a function of its arguments: configuration and the
cookie store are passed in, never read from process state.
"""

from __future__ import annotations

import random
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gamp.context.base import CookieReader

GA_COOKIE_NAME = "_ga"

RANDOM_MIN = 1000
RANDOM_MAX = 9999999999

_STAGING_ENVIRONMENTS = ("dev", "test")


def resolve_tracking_id(
    environment_type: str,
    use_production_property: bool,
    production_id: str,
    staging_id: str,
) -> str:
    """Pick the production or staging property for the given environment.

    Only a ``live`` environment with the production flag set reports to the
    production property; every other combination, unknown environment types
    included, goes to staging.
    """
    if environment_type in _STAGING_ENVIRONMENTS:
        return staging_id
    if environment_type == "live" and use_production_property:
        return production_id
    return staging_id


def random_component() -> int:
    return random.randint(RANDOM_MIN, RANDOM_MAX)


def generate_client_id(now: float | None = None) -> str:
    """Generate a ``<random>.<unix timestamp>`` client ID."""
    if now is None:
        now = time.time()
    return f"{random_component()}.{int(now)}"


def client_id_from_ga_cookie(value: str | None) -> str | None:
    """Extract ``<random>.<timestamp>`` from a ``GA1.2.<random>.<timestamp>`` cookie.

    Values of any other shape are returned unchanged.
    """
    if not value:
        return value
    parts = value.split(".")
    if len(parts) == 4 and parts[0].startswith("GA") and parts[2].isdigit() and parts[3].isdigit():
        return f"{parts[2]}.{parts[3]}"
    return value


def resolve_client_id(
    use_cookie: bool,
    override: str | None,
    cookie_reader: CookieReader | None,
) -> str | None:
    """Resolve the client ID: override, then ``_ga`` cookie, then a fresh one.

    A cookie lookup may yield None or an empty string; detecting that is up
    to the caller (the hit simply fails validation).
    """
    if override:
        return override
    if use_cookie:
        if cookie_reader is None:
            return None
        return cookie_reader.get(GA_COOKIE_NAME)
    return generate_client_id()
