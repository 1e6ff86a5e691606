from pathlib import Path

import pytest

from santra.services import config as config_module


@pytest.fixture(autouse=True)
def restore_config_cache():
    """
    Ensure configuration cache is cleared between tests.
    """
    config_module.reload_config()
    yield
    config_module.reload_config()


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path) -> Path:
    for key in ("LLM_API_KEY", "OPENAI_API_KEY", "LLM_API_BASE", "LLM_MODEL", "PORT", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("IDEAS_PATH", str(tmp_path))
    return tmp_path


def test_defaults(clean_env: Path) -> None:
    cfg = config_module.reload_config()

    assert cfg.ideas_path == clean_env.resolve()
    assert cfg.llm_api_key is None
    assert cfg.llm_api_base == "https://api.openai.com/v1"
    assert cfg.port == 3000
    assert cfg.log_level == "INFO"


def test_missing_key_is_allowed_at_startup(clean_env: Path) -> None:
    cfg = config_module.reload_config()

    assert cfg.llm_api_key is None


def test_openai_key_is_used_as_fallback(monkeypatch, clean_env: Path) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-fallback")

    assert config_module.reload_config().llm_api_key == "sk-fallback"

    monkeypatch.setenv("LLM_API_KEY", "sk-primary")
    assert config_module.reload_config().llm_api_key == "sk-primary"


def test_blank_key_counts_as_missing(monkeypatch, clean_env: Path) -> None:
    monkeypatch.setenv("LLM_API_KEY", "   ")

    assert config_module.reload_config().llm_api_key is None


def test_overrides(monkeypatch, clean_env: Path) -> None:
    monkeypatch.setenv("LLM_API_BASE", "http://localhost:11434/v1/")
    monkeypatch.setenv("LLM_MODEL", "llama3")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = config_module.reload_config()

    assert cfg.llm_api_base == "http://localhost:11434/v1"
    assert cfg.llm_model == "llama3"
    assert cfg.port == 8080
    assert cfg.cors_origins == ["http://a.test", "http://b.test"]
    assert cfg.log_level == "DEBUG"


def test_invalid_port_is_rejected(monkeypatch, clean_env: Path) -> None:
    monkeypatch.setenv("PORT", "70000")

    with pytest.raises(ValueError):
        config_module.reload_config()


def test_config_is_cached(clean_env: Path) -> None:
    assert config_module.get_config() is config_module.get_config()
