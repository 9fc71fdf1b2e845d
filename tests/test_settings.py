from app import create_app, resolve_database_uri


def test_database_url_wins(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db.example.com/invoices")
    assert (
        resolve_database_uri(str(tmp_path))
        == "postgresql://u:p@db.example.com/invoices"
    )


def test_postgres_url_fallback(monkeypatch, tmp_path):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_URL", "postgresql://u:p@host/db")
    assert resolve_database_uri(str(tmp_path)) == "postgresql://u:p@host/db"


def test_sqlite_path_from_directory(monkeypatch, tmp_path):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path))
    assert resolve_database_uri("/unused") == f"sqlite:///{tmp_path / 'invoices.db'}"


def test_sqlite_default_location(monkeypatch, tmp_path):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    assert resolve_database_uri(str(tmp_path)) == f"sqlite:///{tmp_path / 'invoices.db'}"


def test_cache_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path))
    monkeypatch.setenv("CACHE_DEFAULT_TIMEOUT", "42")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    app = create_app(["--demo"])
    assert app.config["CACHE_DEFAULT_TIMEOUT"] == 42
    assert app.config["CACHE_TYPE"] == "SimpleCache"
    assert app.config["SESSION_COOKIE_SECURE"] is False
    assert app.logger.level == 10
