"""Tests for environment-driven settings."""
from __future__ import annotations

import pytest

from accucalc.config import Settings, load_settings


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.error_display_seconds == 2.0
        assert settings.grouping_separator == ","
        assert settings.log_level == "INFO"

    def test_overrides(self):
        settings = load_settings({
            "ACCUCALC_ERROR_DISPLAY_SECONDS": "0.5",
            "ACCUCALC_GROUPING_SEPARATOR": " ",
            "ACCUCALC_LOG_LEVEL": "debug",
            "ACCUCALC_PORT": "9000",
        })
        assert settings.error_display_seconds == 0.5
        assert settings.grouping_separator == " "
        assert settings.log_level == "DEBUG"
        assert settings.port == 9000

    def test_unprefixed_ignored(self):
        assert load_settings({"LOG_LEVEL": "DEBUG"}).log_level == "INFO"

    @pytest.mark.parametrize("env", [
        {"ACCUCALC_ERROR_DISPLAY_SECONDS": "soon"},
        {"ACCUCALC_ERROR_DISPLAY_SECONDS": "-1"},
        {"ACCUCALC_ERROR_DISPLAY_SECONDS": "inf"},
        {"ACCUCALC_GROUPING_SEPARATOR": "."},
        {"ACCUCALC_GROUPING_SEPARATOR": "5"},
        {"ACCUCALC_GROUPING_SEPARATOR": ",,"},
        {"ACCUCALC_LOG_LEVEL": "LOUD"},
        {"ACCUCALC_PORT": "0"},
    ])
    def test_invalid_values_rejected(self, env):
        with pytest.raises(ValueError):
            load_settings(env)


class TestSettings:

    def test_frozen(self):
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.port = 1
