"""Hit sender configuration.

Loads from gamp.yaml if present, with environment variable overrides.
Environment variables use the pattern: GAMP_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class TrackingConfig:
    environment_type: str = "dev"  # "dev", "test" or "live"
    use_production_property: bool = False
    production_tracking_id: str = ""
    staging_tracking_id: str = ""


@dataclass
class EndpointConfig:
    collection_host: str = "www.google-analytics.com"
    use_testing_endpoint: bool = False
    # The collection endpoints are called without peer verification.
    verify_tls: bool = False


@dataclass
class TransportConfig:
    timeout_seconds: float = 5.0


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"
    file: str = ""  # append log lines here instead of stdout


@dataclass
class AppConfig:
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_bool(value: str | bool) -> bool:
    """Parse a boolean from a YAML or environment value."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        # Shorthand for GAMP_TRACKING_ENVIRONMENT_TYPE
        "GAMP_ENVIRONMENT_TYPE": lambda v: setattr(config.tracking, "environment_type", v),
        "GAMP_TRACKING_ENVIRONMENT_TYPE": lambda v: setattr(config.tracking, "environment_type", v),
        "GAMP_TRACKING_USE_PRODUCTION_PROPERTY": lambda v: setattr(
            config.tracking, "use_production_property", parse_bool(v)),
        "GAMP_TRACKING_PRODUCTION_TRACKING_ID": lambda v: setattr(config.tracking, "production_tracking_id", v),
        "GAMP_TRACKING_STAGING_TRACKING_ID": lambda v: setattr(config.tracking, "staging_tracking_id", v),
        "GAMP_ENDPOINT_COLLECTION_HOST": lambda v: setattr(config.endpoint, "collection_host", v),
        "GAMP_ENDPOINT_USE_TESTING_ENDPOINT": lambda v: setattr(
            config.endpoint, "use_testing_endpoint", parse_bool(v)),
        "GAMP_ENDPOINT_VERIFY_TLS": lambda v: setattr(config.endpoint, "verify_tls", parse_bool(v)),
        "GAMP_TRANSPORT_TIMEOUT_SECONDS": lambda v: setattr(config.transport, "timeout_seconds", float(v)),
        "GAMP_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "GAMP_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
        "GAMP_LOG_FILE": lambda v: setattr(config.logging, "file", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def _apply_section(section: object, values: dict) -> None:
    for k, v in values.items():
        if not hasattr(section, k):
            continue
        if isinstance(getattr(section, k), bool):
            v = parse_bool(v)
        setattr(section, k, v)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    if config_path is None:
        config_path = Path("gamp.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"invalid YAML in {config_path}: {e}") from e

        for name in ("tracking", "endpoint", "transport", "logging"):
            if name in raw:
                _apply_section(getattr(config, name), raw[name] or {})

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
