"""Tests for environment-driven configuration."""

import pytest

from orien.config import Config


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no Orien variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("OPENROUTER_API_KEY", "DB_PATH", "PORT", "IDLE_SECONDS", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_requires_api_key(clean_env):
    with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
        Config.load()


def test_load_rejects_placeholder_key(clean_env):
    clean_env.setenv("OPENROUTER_API_KEY", "your-api-key-here")
    with pytest.raises(ValueError):
        Config.load()


def test_load_reads_environment(clean_env):
    clean_env.setenv("OPENROUTER_API_KEY", "sk-test")
    clean_env.setenv("PORT", "4000")
    clean_env.setenv("IDLE_SECONDS", "5")

    config = Config.load()

    assert config.openrouter_api_key == "sk-test"
    assert config.port == 4000
    assert config.idle_seconds == 5.0
    assert config.log_file is None
    assert config.openrouter_api_url == "https://openrouter.ai/api/v1/chat/completions"


def test_load_reads_dotenv_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text("OPENROUTER_API_KEY=sk-from-file\nDB_PATH=/tmp/x.db\n")

    config = Config.load()

    assert config.openrouter_api_key == "sk-from-file"
    assert config.db_path == "/tmp/x.db"
