"""ics_normalizer.config_loader

Lightweight config loader for ics_normalizer.

- Reads YAML (PyYAML) or JSON, chosen by file suffix.
- Environment variables override file values.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import IcsConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "ICS_NORMALIZER_"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


@dataclass
class Config:
    """Typed configuration for ics_normalizer.

    Fields:
        source_marker: first segment of generated event ids
        fallback_timezone: zone used when a document has no VTIMEZONE
            (None renders in the local system zone)
        map_windows_timezones: translate Windows zone names to IANA ids
        log_level: logging level name
    """

    source_marker: str = "ics"
    fallback_timezone: str | None = None
    map_windows_timezones: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Invalid values are replaced by their defaults with a warning rather than
        rejected.
        """
        if data is None:
            data = {}

        source_marker = str(data.get("source_marker") or "ics").strip()
        if not source_marker or "::" in source_marker:
            logger.warning("Config source_marker=%r is not usable; using 'ics'", source_marker)
            source_marker = "ics"

        fallback_timezone = data.get("fallback_timezone")
        if fallback_timezone is not None:
            fallback_timezone = str(fallback_timezone).strip() or None

        map_windows = data.get("map_windows_timezones", True)
        if isinstance(map_windows, str):
            if map_windows.strip().lower() in _TRUTHY:
                map_windows = True
            elif map_windows.strip().lower() in _FALSY:
                map_windows = False
            else:
                logger.warning(
                    "Config map_windows_timezones=%r is not a boolean; using True", map_windows
                )
                map_windows = True
        else:
            map_windows = bool(map_windows)

        log_level = str(data.get("log_level") or "INFO").upper()
        if log_level not in _LOG_LEVELS:
            logger.warning("Config log_level=%r is not a level name; using INFO", log_level)
            log_level = "INFO"

        return cls(
            source_marker=source_marker,
            fallback_timezone=fallback_timezone,
            map_windows_timezones=map_windows,
            log_level=log_level,
        )


def _load_yaml_or_json(path: Path) -> Any:
    """Load a mapping from a YAML or JSON file.

    Files ending in ``.json`` are read with the json module, anything else with
    PyYAML's safe loader.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise IcsConfigError(f"Invalid JSON config {path}: {exc}") from exc

    import yaml  # noqa: PLC0415

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise IcsConfigError(f"Invalid YAML config {path}: {exc}") from exc
    # safe_load returns None for empty files; normalize to empty dict
    return {} if loaded is None else loaded


def _env_overrides() -> dict[str, str]:
    """Collect ICS_NORMALIZER_* environment overrides for Config fields."""
    overrides = {}
    for name in ("source_marker", "fallback_timezone", "map_windows_timezones", "log_level"):
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            overrides[name] = value
    return overrides


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. If not provided the default is
              ./ics_normalizer.yaml (relative to current working dir).

    Returns:
        Config dataclass instance with values from file, environment, or defaults.

    Behavior:
    - If file is missing: defaults plus environment overrides.
    - If file exists but top-level is not a mapping: raises IcsConfigError.
    """
    p = Path(path) if path else Path.cwd() / "ics_normalizer.yaml"
    logger.debug("Attempting to load config from %s", p)

    raw: Any = {}
    if p.exists():
        raw = _load_yaml_or_json(p)
        if not isinstance(raw, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
            raise IcsConfigError("Config file must contain a mapping at top level")
        logger.info("Loaded configuration from %s", p)
    else:
        logger.info("Config file %s not found; using defaults", p)

    merged = {**raw, **_env_overrides()}
    cfg = Config.from_dict(merged)
    logger.debug("Configuration values: %s", cfg)
    return cfg
