"""Unit tests for ics_normalizer.config_loader module."""

import pytest

from ics_normalizer.config_loader import Config, load_config
from ics_normalizer.exceptions import IcsConfigError

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Keep ICS_NORMALIZER_* variables from the host out of these tests."""
    for name in ("SOURCE_MARKER", "FALLBACK_TIMEZONE", "MAP_WINDOWS_TIMEZONES", "LOG_LEVEL"):
        monkeypatch.delenv(f"ICS_NORMALIZER_{name}", raising=False)


class TestConfigFromDict:
    """Tests for Config.from_dict coercion."""

    def test_defaults(self):
        config = Config.from_dict(None)

        assert config == Config()
        assert config.source_marker == "ics"
        assert config.fallback_timezone is None
        assert config.map_windows_timezones is True
        assert config.log_level == "INFO"

    def test_values_applied(self):
        config = Config.from_dict(
            {
                "source_marker": "work",
                "fallback_timezone": "Europe/Berlin",
                "map_windows_timezones": False,
                "log_level": "debug",
            }
        )

        assert config.source_marker == "work"
        assert config.fallback_timezone == "Europe/Berlin"
        assert config.map_windows_timezones is False
        assert config.log_level == "DEBUG"

    def test_marker_with_separator_replaced(self, caplog):
        config = Config.from_dict({"source_marker": "a::b"})

        assert config.source_marker == "ics"
        assert "source_marker" in caplog.text

    def test_blank_fallback_timezone_is_none(self):
        assert Config.from_dict({"fallback_timezone": "  "}).fallback_timezone is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("yes", True), ("off", False), ("FALSE", False), ("maybe", True), (0, False)],
    )
    def test_map_windows_coercion(self, value, expected):
        assert Config.from_dict({"map_windows_timezones": value}).map_windows_timezones is expected

    def test_unknown_log_level_replaced(self):
        assert Config.from_dict({"log_level": "chatty"}).log_level == "INFO"


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == Config()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "ics_normalizer.yaml"
        path.write_text("source_marker: team\nfallback_timezone: America/Chicago\n")

        config = load_config(path)

        assert config.source_marker == "team"
        assert config.fallback_timezone == "America/Chicago"

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"log_level": "WARNING", "map_windows_timezones": false}')

        config = load_config(path)

        assert config.log_level == "WARNING"
        assert config.map_windows_timezones is False

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(IcsConfigError, match="mapping"):
            load_config(path)

    def test_invalid_yaml_rejected(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("source_marker: [unclosed\n")

        with pytest.raises(IcsConfigError, match="Invalid YAML"):
            load_config(path)

    def test_invalid_json_rejected(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(IcsConfigError, match="Invalid JSON"):
            load_config(path)

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "ics_normalizer.yaml"
        path.write_text("source_marker: team\nlog_level: INFO\n")
        monkeypatch.setenv("ICS_NORMALIZER_SOURCE_MARKER", "override")
        monkeypatch.setenv("ICS_NORMALIZER_MAP_WINDOWS_TIMEZONES", "no")

        config = load_config(path)

        assert config.source_marker == "override"
        assert config.map_windows_timezones is False
        assert config.log_level == "INFO"

    def test_default_path_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "ics_normalizer.yaml").write_text("fallback_timezone: Asia/Tokyo\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().fallback_timezone == "Asia/Tokyo"
