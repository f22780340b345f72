"""Tests for environment configuration"""

from logscan.config import get_encoding, get_int_env, get_log_level, get_max_workers


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOGSCAN_MAX_WORKERS", raising=False)
        monkeypatch.delenv("LOGSCAN_ENCODING", raising=False)
        monkeypatch.delenv("LOGSCAN_LOG_LEVEL", raising=False)
        assert get_max_workers() == 20
        assert get_encoding() == "utf-8"
        assert get_log_level() == "WARNING"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LOGSCAN_MAX_WORKERS", "4")
        monkeypatch.setenv("LOGSCAN_ENCODING", "latin-1")
        monkeypatch.setenv("LOGSCAN_LOG_LEVEL", "debug")
        assert get_max_workers() == 4
        assert get_encoding() == "latin-1"
        assert get_log_level() == "DEBUG"

    def test_invalid_int_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOGSCAN_TEST_INT", "many")
        assert get_int_env("LOGSCAN_TEST_INT", 7) == 7

    def test_below_minimum_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOGSCAN_TEST_INT", "0")
        assert get_int_env("LOGSCAN_TEST_INT", 7) == 7
