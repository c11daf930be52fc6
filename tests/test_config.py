"""Tests for configuration validation and loading."""

from __future__ import annotations

import logging

import pytest

from apollo_mcp.config import DEFAULT_BASE_URL, DEFAULT_PORT, ApolloMcpConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in ("APOLLO_API_KEY", "APOLLO_BASE_URL", "APOLLO_TIMEOUT", "MCP_HOST", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    # keep load_dotenv() from picking up a developer's .env
    monkeypatch.chdir(tmp_path)


def test_api_key_is_required():
    with pytest.raises(ValueError, match="APOLLO_API_KEY is required"):
        ApolloMcpConfig(api_key="")


def test_blank_api_key_is_rejected():
    with pytest.raises(ValueError, match="APOLLO_API_KEY is required"):
        ApolloMcpConfig(api_key="   ")


def test_defaults():
    cfg = ApolloMcpConfig(api_key="k")
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.port == DEFAULT_PORT == 8000
    assert cfg.timeout == 30.0
    assert cfg.numeric_log_level == logging.INFO


def test_base_url_trailing_slash_is_stripped():
    cfg = ApolloMcpConfig(api_key="k", base_url="https://example.com/v1/")
    assert cfg.base_url == "https://example.com/v1"


def test_invalid_base_url_raises():
    with pytest.raises(ValueError, match="Invalid APOLLO_BASE_URL"):
        ApolloMcpConfig(api_key="k", base_url="ftp://example.com")


def test_invalid_port_raises():
    with pytest.raises(ValueError, match="PORT must be between"):
        ApolloMcpConfig(api_key="k", port=70000)


def test_invalid_log_level_raises():
    with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
        ApolloMcpConfig(api_key="k", log_level="chatty")


def test_repr_masks_api_key():
    cfg = ApolloMcpConfig(api_key="super-secret")
    assert "super-secret" not in repr(cfg)
    assert "api_key='***'" in repr(cfg)


def test_from_env_reads_values(monkeypatch):
    monkeypatch.setenv("APOLLO_API_KEY", "from-env")
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = ApolloMcpConfig.from_env()
    assert cfg.api_key == "from-env"
    assert cfg.port == 9100
    assert cfg.log_level == "DEBUG"


def test_from_env_bad_port_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("APOLLO_API_KEY", "from-env")
    monkeypatch.setenv("PORT", "not-a-number")
    assert ApolloMcpConfig.from_env().port == DEFAULT_PORT


def test_from_env_missing_key_raises():
    with pytest.raises(ValueError, match="APOLLO_API_KEY"):
        ApolloMcpConfig.from_env()


def test_from_env_reads_dotenv_file(tmp_path, monkeypatch):
    # register the variable so the value load_dotenv sets is undone afterwards
    monkeypatch.setenv("APOLLO_API_KEY", "placeholder")
    monkeypatch.delenv("APOLLO_API_KEY")
    env_file = tmp_path / "custom.env"
    env_file.write_text("APOLLO_API_KEY=dotenv-key\n")
    cfg = ApolloMcpConfig.from_env(env_file)
    assert cfg.api_key == "dotenv-key"
