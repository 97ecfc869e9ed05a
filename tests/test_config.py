from serialdb import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("SERIALDB_TIMEOUT", "SERIALDB_THREAD_NAME", "SERIALDB_ECHO"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()
    assert settings.timeout == 5.0
    assert settings.thread_name == "serialdb-worker"
    assert settings.echo is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SERIALDB_TIMEOUT", "0.5")
    monkeypatch.setenv("SERIALDB_THREAD_NAME", "reports-db")
    monkeypatch.setenv("SERIALDB_ECHO", "true")

    settings = Settings()
    assert settings.timeout == 0.5
    assert settings.thread_name == "reports-db"
    assert settings.echo is True


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
