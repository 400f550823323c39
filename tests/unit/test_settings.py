"""Tests for settings and environment helpers."""

import os

import pytest
from pydantic import ValidationError

from webcsv.lib.env import expand_config, expand_env_vars, load_env_file
from webcsv.lib.settings import WebCSVSettings, get_settings


class TestWebCSVSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = WebCSVSettings()
        assert settings.host == "127.0.0.1"
        assert settings.port == 8000
        assert settings.strict_types is False
        assert settings.schema_header == "Content-Schema"
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"
        assert settings.log_file is None

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("WEBCSV_PORT", "9000")
        monkeypatch.setenv("WEBCSV_STRICT_TYPES", "true")
        monkeypatch.setenv("WEBCSV_SCHEMA_HEADER", "X-Schema")
        settings = get_settings()
        assert settings.port == 9000
        assert settings.strict_types is True
        assert settings.schema_header == "X-Schema"

    def test_reads_dotenv_in_working_directory(self, tmp_path):
        (tmp_path / ".env").write_text("WEBCSV_HOST=0.0.0.0\nWEBCSV_LOG_LEVEL=debug\n")
        settings = WebCSVSettings()
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "DEBUG"

    def test_log_format_is_normalized(self):
        assert WebCSVSettings(log_format="JSON").log_format == "json"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError, match="log_level"):
            WebCSVSettings(log_level="chatty")

    def test_rejects_unknown_log_format(self):
        with pytest.raises(ValidationError, match="log_format"):
            WebCSVSettings(log_format="xml")

    def test_rejects_out_of_range_port(self):
        with pytest.raises(ValidationError):
            WebCSVSettings(port=70000)


class TestExpandEnvVars:
    """Tests for ${VAR} and $VAR expansion."""

    def test_braced(self, monkeypatch):
        monkeypatch.setenv("PEOPLE_VERSION", "1.0")
        assert expand_env_vars("ver:${PEOPLE_VERSION},hdr:false") == "ver:1.0,hdr:false"

    def test_bare(self, monkeypatch):
        monkeypatch.setenv("DELIM", "|")
        assert expand_env_vars("del:$DELIM") == "del:|"

    def test_fallback(self, monkeypatch):
        monkeypatch.delenv("PEOPLE_HEADER", raising=False)
        assert expand_env_vars("hdr:${PEOPLE_HEADER:-false}") == "hdr:false"
        monkeypatch.setenv("PEOPLE_HEADER", "true")
        assert expand_env_vars("hdr:${PEOPLE_HEADER:-false}") == "hdr:true"

    def test_expand_config_walks_nested_values(self, monkeypatch):
        monkeypatch.setenv("COL_NAME", "sensor")
        config = {"columns": [{"name": "$COL_NAME", "length": 20}], "header": True}
        assert expand_config(config) == {
            "columns": [{"name": "sensor", "length": 20}],
            "header": True,
        }

    def test_missing_variable_is_left_alone(self, monkeypatch):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert expand_env_vars("ver:${MISSING_VAR}") == "ver:${MISSING_VAR}"

    def test_missing_variable_strict(self, monkeypatch):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        with pytest.raises(KeyError, match="MISSING_VAR"):
            expand_env_vars("${MISSING_VAR}", strict=True)


class TestLoadEnvFile:
    """Tests for .env loading."""

    @pytest.fixture
    def unset_value(self, monkeypatch):
        """WEBCSV_TEST_VALUE starts unset and is removed again afterwards."""
        monkeypatch.setenv("WEBCSV_TEST_VALUE", "")
        monkeypatch.delenv("WEBCSV_TEST_VALUE")
        return "WEBCSV_TEST_VALUE"

    def test_loads_file(self, tmp_path, unset_value):
        env_file = tmp_path / "custom.env"
        env_file.write_text(f"{unset_value}=loaded\n")

        assert load_env_file(env_file) is True
        assert os.environ[unset_value] == "loaded"

    def test_does_not_override_by_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WEBCSV_TEST_VALUE", "original")
        env_file = tmp_path / "custom.env"
        env_file.write_text("WEBCSV_TEST_VALUE=loaded\n")

        load_env_file(env_file)

        assert os.environ["WEBCSV_TEST_VALUE"] == "original"

    def test_searches_working_directory(self, tmp_path, unset_value):
        (tmp_path / ".env").write_text(f"{unset_value}=from-cwd\n")

        assert load_env_file() is True
        assert os.environ[unset_value] == "from-cwd"
