import pytest

from bookstore.utils.config import load_settings
from bookstore.utils.exceptions import ConfigError

ENV_VARS = [
    "BOOKSTORE_CONFIG",
    "BOOKSTORE_DATA_DIR",
    "BOOKSTORE_BACKUP_DIR",
    "BOOKSTORE_JWT_SECRET",
    "ENVIRONMENT",
    "HOST",
    "PORT",
    "ALLOWED_ORIGINS",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # config/settings.yaml is resolved against the working directory
    monkeypatch.chdir(tmp_path)


def test_defaults_without_config_file():
    settings = load_settings()
    assert settings.server.port == 3000
    assert settings.security.bcrypt_rounds == 12
    assert settings.security.token_lifetime_hours == 24
    assert settings.security.secret_key is None
    assert settings.storage.backup_path().as_posix() == "data/backups"


def test_yaml_file_with_env_substitution(tmp_path, monkeypatch):
    monkeypatch.setenv("MY_SECRET", "from-env")
    config = tmp_path / "settings.yaml"
    config.write_text(
        "server:\n"
        "  port: 8080\n"
        "security:\n"
        "  secret_key: ${MY_SECRET}\n"
        "storage:\n"
        "  data_dir: ${MISSING_DIR:/srv/books}\n",
        encoding="utf-8",
    )

    settings = load_settings(str(config))

    assert settings.server.port == 8080
    assert settings.security.secret_key == "from-env"
    assert settings.storage.data_dir == "/srv/books"


def test_missing_required_variable(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("security:\n  secret_key: ${NOT_SET_ANYWHERE}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="NOT_SET_ANYWHERE"):
        load_settings(str(config))


def test_environment_overrides_file(tmp_path, monkeypatch):
    config = tmp_path / "settings.yaml"
    config.write_text("server:\n  port: 8080\n", encoding="utf-8")
    monkeypatch.setenv("BOOKSTORE_CONFIG", str(config))
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("BOOKSTORE_JWT_SECRET", "env-secret")

    settings = load_settings()

    assert settings.server.port == 9000
    assert settings.server.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.security.secret_key == "env-secret"


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_settings(str(tmp_path / "absent.yaml"))


def test_invalid_values_raise_config_error(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ConfigError, match="Invalid settings"):
        load_settings()


def test_blank_secret_counts_as_unset(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("security:\n  secret_key: '  '\n", encoding="utf-8")
    assert load_settings(str(config)).security.secret_key is None
