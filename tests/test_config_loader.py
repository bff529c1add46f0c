import pytest
from pydantic import ValidationError

from mpgs_bridge.utils.config_loader import DEFAULT_ALLOWED_ORIGINS, ServerConfig, load_server_config

_ENV_NAMES = (
    "PORT",
    "FRONTEND_URL",
    "ALLOWED_ORIGINS",
    "UPSTREAM_TIMEOUT_SECONDS",
    "DEFAULT_API_VERSION",
    "INTEGRATIONS_MODE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.setattr("mpgs_bridge.utils.config_loader.load_dotenv", lambda *a, **k: False)


def test_defaults_when_no_file(tmp_path):
    config = load_server_config(tmp_path / "missing.yml")

    assert config.port == 3005
    assert config.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert config.upstream_timeout_ms == 30_000
    assert config.integrations_mode == "real"


def test_yaml_values_then_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "server_config.yml"
    path.write_text("port: 4000\nupstream_timeout_seconds: 12\nallowed_origins:\n  - https://a.example\n", encoding="utf-8")
    monkeypatch.setenv("PORT", "5000")
    monkeypatch.setenv("FRONTEND_URL", "https://shop.example.com")
    monkeypatch.setenv("INTEGRATIONS_MODE", "MOCK")

    config = load_server_config(path)

    assert config.port == 5000
    assert config.upstream_timeout_ms == 12_000
    assert config.integrations_mode == "mock"
    assert config.cors_origins == ["https://a.example", "https://shop.example.com"]


def test_allowed_origins_env_is_comma_separated(tmp_path, monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")

    config = load_server_config(tmp_path / "missing.yml")

    assert config.allowed_origins == ["https://a.example", "https://b.example"]


def test_frontend_url_is_not_duplicated():
    config = ServerConfig(allowed_origins=["https://a.example"], frontend_url="https://a.example")

    assert config.cors_origins == ["https://a.example"]


def test_invalid_values_raise(tmp_path, monkeypatch):
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        load_server_config(tmp_path / "missing.yml")


def test_unknown_integrations_mode_rejected():
    with pytest.raises(ValidationError):
        ServerConfig(integrations_mode="sandbox")
