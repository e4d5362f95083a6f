import importlib

import pytest


@pytest.mark.unit
def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "4000")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/music")
    monkeypatch.setenv("DB_POOL_SIZE", "5")
    monkeypatch.setenv("AI_API_URL", "http://ai:9000/")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("DEBUG", "yes")

    import config as _config
    importlib.reload(_config)
    try:
        cfg = _config.Config
        assert cfg.PORT == 4000
        assert cfg.DATABASE_URL == "postgresql://u:p@db/music"
        assert cfg.DB_POOL_SIZE == 5
        assert cfg.AI_API_URL == "http://ai:9000"
        assert cfg.ALLOWED_ORIGINS == ["http://a.test", "http://b.test"]
        assert cfg.DEBUG is True
    finally:
        monkeypatch.undo()
        importlib.reload(_config)


@pytest.mark.unit
def test_config_defaults(monkeypatch):
    for name in ("PORT", "DATABASE_URL", "DB_POOL_SIZE", "AI_API_URL", "AI_API_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PORT", "not-a-number")

    import config as _config
    importlib.reload(_config)
    try:
        cfg = _config.Config
        assert cfg.PORT == 3001
        assert cfg.DATABASE_URL.startswith("sqlite:///")
        assert cfg.DATABASE_URL.endswith("musiclib.db")
        assert cfg.DB_POOL_SIZE == 10
        assert cfg.AI_API_URL == "http://localhost:8000"
        assert cfg.AI_API_TIMEOUT_SECONDS == 30
    finally:
        monkeypatch.undo()
        importlib.reload(_config)


@pytest.mark.unit
def test_create_app_accepts_overrides(app):
    assert app.config["TESTING"] is True
    assert app.config["AI_API_URL"] == "http://ai.test"
    assert app.extensions["ai_service"].base_url == "http://ai.test"
