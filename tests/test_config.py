# tests/test_config.py

"""
Settings Tests - defaults and validation of environment overrides
"""

import pytest
from pydantic import ValidationError

from pole_tender.config import Settings
from pole_tender.logging_config import configure_logging


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.API_V1_PREFIX == "/api/v1"
        assert settings.MAX_TEST_SHEETS_PER_GROUP == 6
        assert settings.SCORE_DISPLAY_PLACES == 2

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MAX_TEST_SHEETS_PER_GROUP", "8")
        monkeypatch.setenv("log_format", "console")
        settings = Settings(_env_file=None)
        assert settings.MAX_TEST_SHEETS_PER_GROUP == 8
        assert settings.LOG_FORMAT == "console"

    def test_debug_forbidden_in_production(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, APP_ENV="production", DEBUG=True)

    @pytest.mark.parametrize("sheets", [0, 21])
    def test_sheet_limit_range(self, sheets):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, MAX_TEST_SHEETS_PER_GROUP=sheets)

    def test_configure_logging_accepts_both_formats(self):
        configure_logging(Settings(_env_file=None, LOG_FORMAT="console", LOG_LEVEL="DEBUG"))
        configure_logging(Settings(_env_file=None))
