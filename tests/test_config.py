"""Tests for client configuration."""

import logging

import httpx
import pytest

from datomic_flare.config import (
    DEFAULT_ADDRESS,
    DEFAULT_TIMEOUT,
    FlareConfig,
    RequestOptions,
    normalize_address,
)
from datomic_flare.overrides import OverridePolicy


class TestNormalizeAddress:
    @pytest.mark.parametrize(
        "address,expected",
        [
            ("http://localhost:3042", "http://localhost:3042"),
            ("http://localhost:3042/", "http://localhost:3042"),
            ("  http://flare:3042 ", "http://flare:3042"),
            ("://", ":/"),
            ("", DEFAULT_ADDRESS),
            (None, DEFAULT_ADDRESS),
        ],
    )
    def test_normalize(self, address, expected):
        assert normalize_address(address) == expected


class TestRequestOptions:
    def test_defaults(self):
        options = RequestOptions()
        assert options.timeout == DEFAULT_TIMEOUT
        timeout = options.to_httpx()
        assert isinstance(timeout, httpx.Timeout)
        assert timeout.connect == timeout.read == timeout.write == DEFAULT_TIMEOUT

    def test_phase_timeouts(self):
        timeout = RequestOptions(timeout=10, open_timeout=2, read_timeout=5).to_httpx()
        assert timeout.connect == 2
        assert timeout.read == 5
        assert timeout.write == 10
        assert timeout.pool == 10

    def test_from_mapping_ignores_unknown_keys(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="datomic_flare.config"):
            options = RequestOptions.from_mapping({"timeout": 3, "retries": 5})
        assert options == RequestOptions(timeout=3)
        assert "retries" in caplog.text

    def test_from_mapping_none(self):
        assert RequestOptions.from_mapping(None) == RequestOptions()


class TestFlareConfig:
    def test_defaults(self):
        config = FlareConfig()
        assert config.address == DEFAULT_ADDRESS
        assert config.request == RequestOptions()
        assert not config.dangerously_override

    def test_is_immutable(self):
        config = FlareConfig()
        with pytest.raises(AttributeError):
            config.address = "http://elsewhere"

    def test_override_mapping_is_converted(self):
        config = FlareConfig(dangerously_override={"database": {"name": "purple"}})
        assert isinstance(config.dangerously_override, OverridePolicy)
        assert config.dangerously_override.connection_fields == {"name": "purple"}

    def test_from_mapping(self):
        config = FlareConfig.from_mapping(
            {
                "credentials": {"address": "http://flare:3042/"},
                "options": {"connection": {"request": {"timeout": 10, "open_timeout": 1}}},
                "dangerously_override": {"database": {"name": "purple"}},
            }
        )

        assert config.address == "http://flare:3042"
        assert config.request == RequestOptions(timeout=10, open_timeout=1)
        assert config.dangerously_override.connection_fields == {"name": "purple"}

    def test_from_empty_mapping(self):
        assert FlareConfig.from_mapping(None) == FlareConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FLARE_ADDRESS", "http://flare:3042")
        monkeypatch.setenv("FLARE_TIMEOUT", "12.5")

        config = FlareConfig.from_env()

        assert config.address == "http://flare:3042"
        assert config.request.timeout == 12.5

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("FLARE_ADDRESS", raising=False)
        monkeypatch.delenv("FLARE_TIMEOUT", raising=False)

        assert FlareConfig.from_env() == FlareConfig()
