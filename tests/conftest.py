"""Shared fixtures for ics_normalizer tests."""

import logging
from typing import Any, Optional

import pytest

from ics_normalizer.config_loader import Config
from ics_normalizer.ics_logging import NOISY_LOGGERS, PACKAGE_LOGGERS
from ics_normalizer.ics_parser import IcsDocumentConverter
from ics_normalizer.timezone_utils import TimezoneContext


class FakeComponent:
    """In-memory CalendarComponent for tests that do not need the ICS grammar."""

    def __init__(
        self,
        name: str = "VEVENT",
        properties: Optional[dict[str, Any]] = None,
        children: Optional[list["FakeComponent"]] = None,
    ) -> None:
        self.name = name.upper()
        self._properties: dict[str, list[Any]] = {}
        for key, value in (properties or {}).items():
            self._properties[key.upper()] = value if isinstance(value, list) else [value]
        self._children = children or []

    def get_first_property(self, name: str) -> Optional[Any]:
        values = self._properties.get(name.upper(), [])
        return values[0] if values else None

    def get_all_properties(self, name: str) -> list[Any]:
        return list(self._properties.get(name.upper(), []))

    def get_all_subcomponents(self, name: str) -> list["FakeComponent"]:
        return [child for child in self._children if child.name == name.upper()]


def pytest_configure(config: Any) -> None:
    """Register test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: End-to-end document conversion tests")


@pytest.fixture
def make_component():
    """Factory for FakeComponent instances."""
    return FakeComponent


@pytest.fixture
def utc_context() -> TimezoneContext:
    """Document context bound to UTC."""
    return TimezoneContext.from_tzid("UTC")


@pytest.fixture
def new_york_context() -> TimezoneContext:
    """Document context bound to America/New_York."""
    return TimezoneContext.from_tzid("America/New_York")


@pytest.fixture
def local_context() -> TimezoneContext:
    """Document context rendering in the local system zone."""
    return TimezoneContext.local()


@pytest.fixture
def converter() -> IcsDocumentConverter:
    """Converter with default configuration."""
    return IcsDocumentConverter(Config())


@pytest.fixture
def restore_logging():
    """Restore root handlers and logger levels changed by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    names = ["", *PACKAGE_LOGGERS, *NOISY_LOGGERS]
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
