"""Unit tests for configuration."""

import pytest

from feedwatch.config import DEFAULT_PROXY_URL, FeedwatchConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FEEDWATCH_PROXY_URL", "FEEDWATCH_POLL_INTERVAL", "FEEDWATCH_FETCH_TIMEOUT", "FEEDWATCH_FETCH_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)


class TestFeedwatchConfig:
    """Tests for FeedwatchConfig."""

    def test_defaults(self):
        config = FeedwatchConfig.from_env()
        assert config.proxy_url == DEFAULT_PROXY_URL
        assert config.poll_interval == 5.0
        assert config.fetch_timeout == 30.0
        assert config.fetch_attempts == 1

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FEEDWATCH_PROXY_URL", "https://proxy.test/get")
        monkeypatch.setenv("FEEDWATCH_POLL_INTERVAL", "2.5")
        monkeypatch.setenv("FEEDWATCH_FETCH_ATTEMPTS", "3")
        config = FeedwatchConfig.from_env()
        assert config.proxy_url == "https://proxy.test/get"
        assert config.poll_interval == 2.5
        assert config.fetch_attempts == 3

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_bad_number(self, monkeypatch, value):
        monkeypatch.setenv("FEEDWATCH_POLL_INTERVAL", value)
        with pytest.raises(ValueError, match="FEEDWATCH_POLL_INTERVAL"):
            FeedwatchConfig.from_env()

    def test_override(self):
        base = FeedwatchConfig()
        config = base.override(proxy="https://p.test/get", interval=1, attempts=2)
        assert config.proxy_url == "https://p.test/get"
        assert config.poll_interval == 1.0
        assert config.fetch_attempts == 2
        assert config.fetch_timeout == base.fetch_timeout
        assert base.override() == base
