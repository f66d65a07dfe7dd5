"""
Tests for env var helpers.

Run with: python -m pytest tests/test_env_config.py -v
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from env_config import Config, get_env, get_env_bool, get_env_int, get_env_list


class TestGetEnv:

    def test_fallback_names(self, monkeypatch):
        monkeypatch.delenv("PRIMARY_NAME", raising=False)
        monkeypatch.setenv("SECONDARY_NAME", " value ")

        assert get_env("PRIMARY_NAME", "SECONDARY_NAME") == "value"

    def test_blank_is_missing(self, monkeypatch):
        monkeypatch.setenv("PRIMARY_NAME", "   ")
        assert get_env("PRIMARY_NAME", default="fallback") == "fallback"

    def test_bool(self, monkeypatch):
        monkeypatch.setenv("FLAG", "Yes")
        assert get_env_bool("FLAG") is True

        monkeypatch.setenv("FLAG", "off")
        assert get_env_bool("FLAG", default=True) is False

        monkeypatch.setenv("FLAG", "maybe")
        assert get_env_bool("FLAG", default=True) is True

    def test_int(self, monkeypatch):
        monkeypatch.setenv("PORT_NUMBER", "9000")
        assert get_env_int("PORT_NUMBER", 8000) == 9000

        monkeypatch.setenv("PORT_NUMBER", "ninety")
        assert get_env_int("PORT_NUMBER", 8000) == 8000

    def test_list(self, monkeypatch):
        monkeypatch.setenv("ORIGINS", "https://a.example, ,https://b.example")
        assert get_env_list("ORIGINS") == ["https://a.example", "https://b.example"]


class TestConfig:

    def test_log_status(self):
        status = Config.log_status()

        assert status["timezone"] == Config.TIMEZONE
        assert status["engine_version"] == Config.ENGINE_VERSION
        assert status["debug_endpoints"] is Config.DEBUG_ENDPOINTS
