from resumate.settings import Settings, get_settings


def test_prefixed_env_overrides(monkeypatch) -> None:
    """Test RESUMATE_* variables feed settings."""
    monkeypatch.setenv("RESUMATE_RESUME_MARGIN", "15mm")
    monkeypatch.setenv("RESUMATE_MAX_PAGE_SIZE", "50")
    settings = Settings()
    assert settings.resume_margin == "15mm"
    assert settings.max_page_size == 50


def test_plain_env_names_are_honoured(monkeypatch) -> None:
    """Test OPENAI_API_KEY and PORT work without the prefix."""
    monkeypatch.delenv("RESUMATE_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("PORT", "9000")
    settings = Settings()
    assert settings.openai_api_key == "sk-test"
    assert settings.port == 9000


def test_prefixed_env_wins(monkeypatch) -> None:
    """Test the prefixed variable takes precedence."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/other")
    monkeypatch.setenv("RESUMATE_SQL_DB_URL", "sqlite://")
    assert Settings().sql_db_url == "sqlite://"


def test_get_settings_is_cached() -> None:
    """Test settings are built once per process."""
    assert get_settings() is get_settings()
