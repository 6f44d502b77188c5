"""Tests for configuration loading."""

from browseflow.config import load_config
from browseflow.host import InMemoryHost, get_host
from browseflow.host.local import LocalHost


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
log_level: INFO
budget:
  context_window: 8192
generation:
  default_model: small-model
  aliases:
    small-model: "test"
host:
  backend: inmemory
  page_url: https://example.com/docs
"""
    )
    monkeypatch.setenv("BROWSEFLOW_CONFIG", str(config_path))

    config = load_config()
    assert config.log_level == "INFO"
    assert config.budget.context_window == 8192
    assert config.budget.min_prompt_chars == 1000
    assert config.generation.aliases == {"small-model": "test"}
    assert config.host.page_url == "https://example.com/docs"


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BROWSEFLOW_CONFIG", raising=False)
    monkeypatch.setenv("BROWSEFLOW_MODEL", "env-model")
    monkeypatch.setenv("BROWSEFLOW_LIBRARY_URL", "sqlite://wf.db")
    monkeypatch.setenv("BROWSEFLOW_LOG_LEVEL", "DEBUG")

    config = load_config()
    assert config.generation.default_model == "env-model"
    assert config.library_url == "sqlite://wf.db"
    assert config.log_level == "DEBUG"


def test_get_host_uses_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
host:
  backend: inmemory
  page_url: https://example.com/page
"""
    )
    monkeypatch.setenv("BROWSEFLOW_CONFIG", str(config_path))
    monkeypatch.delenv("BROWSEFLOW_HOST", raising=False)

    host = get_host()
    assert isinstance(host, InMemoryHost)
    assert host.page.url == "https://example.com/page"

    monkeypatch.setenv("BROWSEFLOW_HOST", "local")
    assert isinstance(get_host(), LocalHost)
