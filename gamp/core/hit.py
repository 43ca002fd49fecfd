"""Measurement Protocol hit: accumulates, validates, serializes and sends.

A Hit is built fresh for each measurement event, sent once, then dropped.
It is not safe to share between threads.

Protocol reference:
https://developers.google.com/analytics/devguides/collection/protocol/v1/parameters
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Union

import structlog

from gamp.config import AppConfig
from gamp.context.static import LogDiagnosticSink
from gamp.core import identity
from gamp.core.encoding import collection_endpoint, encode_parameters
from gamp.core.models import (
    PROTOCOL_VERSION,
    RESERVED_KEYS,
    HitType,
    TransmissionResult,
    TransmissionStatus,
)
from gamp.transport.base import TransportFailure
from gamp.transport.debug import parse_debug_response

if TYPE_CHECKING:
    from gamp.context.base import CookieReader, DiagnosticSink, RequestContext
    from gamp.transport.base import HitTransport

log = structlog.get_logger()

ParamValue = Union[str, int, float]

_PAGEVIEW_LOCATION = ("dl",)
_PAGEVIEW_HOST_PATH = ("dh", "dp")
_EVENT_FIELDS = ("ec", "ea")
_TIMING_FIELDS = ("utc", "utv", "utt")


def _has(parameters: Mapping[str, object], keys: tuple[str, ...]) -> bool:
    return all(parameters.get(k) is not None for k in keys)


def pageview_has_minimum_fields(parameters: Mapping[str, object]) -> bool:
    """Either &dl, or both &dh and &dp."""
    return _has(parameters, _PAGEVIEW_LOCATION) or _has(parameters, _PAGEVIEW_HOST_PATH)


def event_has_minimum_fields(parameters: Mapping[str, object]) -> bool:
    return _has(parameters, _EVENT_FIELDS)


def timing_has_minimum_fields(parameters: Mapping[str, object]) -> bool:
    return _has(parameters, _TIMING_FIELDS)


def has_minimum_fields(hit_type: HitType | None, parameters: Mapping[str, object]) -> bool:
    if hit_type is HitType.PAGEVIEW:
        return pageview_has_minimum_fields(parameters)
    if hit_type is HitType.EVENT:
        return event_has_minimum_fields(parameters)
    if hit_type is HitType.TIMING:
        return timing_has_minimum_fields(parameters)
    return False


class Hit:
    """One pageview, event or timing hit."""

    def __init__(
        self,
        config: AppConfig | None = None,
        request_context: RequestContext | None = None,
        cookies: CookieReader | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._request_context = request_context
        self._cookies = cookies

        self.tracking_id: str | None = None
        self.client_id: str | None = None
        self.hit_type: HitType | None = None
        self.document_location_url: str | None = None
        self.parameters: dict[str, ParamValue] = {}

    @property
    def protocol_version(self) -> int:
        return PROTOCOL_VERSION

    def set_tracking_id(self) -> None:
        """Set the property hits are sent to from the tracking config."""
        tracking = self._config.tracking
        self.tracking_id = identity.resolve_tracking_id(
            tracking.environment_type,
            tracking.use_production_property,
            tracking.production_tracking_id,
            tracking.staging_tracking_id,
        )

    def set_client_id(
        self,
        use_cookie: bool = False,
        override: str | None = None,
        parse_cookie: bool = False,
    ) -> None:
        """Set the client ID from an override, the _ga cookie, or a fresh one.

        With ``parse_cookie`` a ``GA1.2.<random>.<timestamp>`` cookie value is
        reduced to its ``<random>.<timestamp>`` client ID.
        """
        client_id = identity.resolve_client_id(use_cookie, override, self._cookies)
        if parse_cookie and use_cookie and not override:
            client_id = identity.client_id_from_ga_cookie(client_id)
        self.client_id = client_id

    def set_user_agent(self, user_agent: str | None = None) -> None:
        """Set &ua. Hits without a user agent are often classed as bot traffic."""
        if not user_agent and self._request_context is not None:
            user_agent = self._request_context.user_agent()
        if user_agent:
            self.parameters["ua"] = user_agent

    def set_hit_type(self, hit_type: HitType | str) -> None:
        """Set the hit type. Unrecognised values are ignored."""
        parsed = HitType.parse(hit_type)
        if parsed is not None:
            self.hit_type = parsed

    def set_document_location_url(self, url: str, title: str | None = None) -> None:
        self.document_location_url = url
        if title:
            self.parameters["dt"] = title

    def set_pageview_parameters(
        self,
        host_name: str | None = None,
        path: str | None = None,
        title: str | None = None,
    ) -> None:
        if host_name:
            self.parameters["dh"] = host_name
        if path:
            self.parameters["dp"] = path
        if title:
            self.parameters["dt"] = title

    def set_event_parameters(
        self,
        category: str,
        action: str,
        label: str | None = None,
        value: int | float | None = None,
    ) -> None:
        self.parameters["ec"] = category
        self.parameters["ea"] = action
        if label:
            self.parameters["el"] = label
        if value is not None and value >= 0:
            # &ev carries the label, not the value; kept as deployed.
            self.parameters["ev"] = label

    def set_timing_parameters(
        self,
        category: str,
        variable: str,
        timing_value: int,
        extra: Mapping[str, ParamValue] | None = None,
    ) -> None:
        self.parameters["utc"] = category
        self.parameters["utv"] = variable
        self.parameters["utt"] = timing_value
        if extra:
            self.parameters.update(extra)

    def set_non_interaction_hit(self) -> None:
        self.parameters["ni"] = 1

    def add_parameters(self, parameters: Mapping[str, ParamValue]) -> None:
        """Merge extra parameters, e.g. custom dimensions (cd1) or metrics (cm1)."""
        self.parameters.update(parameters)

    def _location_view(self) -> dict[str, object]:
        params: dict[str, object] = dict(self.parameters)
        if self.document_location_url:
            params["dl"] = self.document_location_url
        return params

    def is_valid(self) -> bool:
        """Check identity, hit type and the hit type's minimum parameters."""
        if not self.tracking_id or not self.client_id:
            return False
        if not isinstance(self.hit_type, HitType):
            return False
        return has_minimum_fields(self.hit_type, self._location_view())

    def missing_fields(self) -> list[str]:
        """Describe what keeps this hit from validating. Empty when valid."""
        missing = []
        if not self.tracking_id:
            missing.append("tid")
        if not self.client_id:
            missing.append("cid")
        if not isinstance(self.hit_type, HitType):
            missing.append("t")
            return missing

        params = self._location_view()
        if self.hit_type is HitType.PAGEVIEW:
            if not pageview_has_minimum_fields(params):
                missing.append("dl|dh+dp")
        elif self.hit_type is HitType.EVENT:
            missing.extend(k for k in _EVENT_FIELDS if params.get(k) is None)
        elif self.hit_type is HitType.TIMING:
            missing.extend(k for k in _TIMING_FIELDS if params.get(k) is None)
        return missing

    def endpoint(self) -> str:
        endpoint = self._config.endpoint
        return collection_endpoint(endpoint.collection_host, endpoint.use_testing_endpoint)

    def ip_address(self) -> str | None:
        if self._request_context is None:
            return None
        return self._request_context.ip_address()

    def build_url(self) -> str:
        """Inject the protocol fields and return the full collection URL."""
        reserved = {
            "v": self.protocol_version,
            "t": self.hit_type,
            "tid": self.tracking_id,
            "cid": self.client_id,
            "dl": self.document_location_url,
            "z": identity.random_component(),
            "uip": self.ip_address(),
        }
        for key in RESERVED_KEYS:
            # A caller-supplied &dl stands unless a document location is set
            if key == "dl" and not reserved[key]:
                continue
            self.parameters[key] = reserved[key]

        return f"{self.endpoint()}?{encode_parameters(self.parameters)}"

    def send_hit(
        self,
        transport: HitTransport,
        sink: DiagnosticSink | None = None,
    ) -> TransmissionResult:
        """Validate and send this hit. Never raises for delivery problems."""
        self.set_tracking_id()
        url = self.build_url()

        if not self.is_valid():
            missing = self.missing_fields()
            log.warning("hit_validation_failed", hit_type=self._hit_type_name(), missing=missing)
            return TransmissionResult(
                status=TransmissionStatus.VALIDATION_FAILED,
                url=url,
                error=f"missing required fields: {', '.join(missing)}",
            )

        try:
            resp = transport.get(url)
        except TransportFailure as e:
            log.error("hit_transport_failed", hit_type=self._hit_type_name(), error=str(e))
            return TransmissionResult(
                status=TransmissionStatus.TRANSPORT_ERROR,
                url=url,
                error=str(e),
            )

        if resp.status_code >= 400:
            log.warning("hit_upstream_error", status=resp.status_code, body=resp.text[:200])
        else:
            log.info("hit_sent", hit_type=self._hit_type_name(), status=resp.status_code)

        debug_report = None
        if self._config.endpoint.use_testing_endpoint:
            (sink or LogDiagnosticSink()).show(resp.text)
            debug_report = parse_debug_response(resp.text)

        return TransmissionResult(
            status=TransmissionStatus.SENT,
            url=url,
            status_code=resp.status_code,
            body=resp.text,
            debug_report=debug_report,
        )

    def _hit_type_name(self) -> str | None:
        return self.hit_type.value if self.hit_type is not None else None
