import config as config_module
from config import Config


def test_defaults():
    cfg = Config()
    assert cfg.max_tokens == 700
    assert cfg.request_timeout_seconds == 30.0
    assert cfg.capture_max_dimension == 800
    assert cfg.capture_quality == 0.7
    assert cfg.relay_url == f"http://{cfg.server_host}:{cfg.server_port}"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("VISION_SERVER_PORT", "9001")
    monkeypatch.setenv("VISION_REQUEST_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("VISION_ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("VISION_AUTO_SPEAK", "yes")

    cfg = Config()

    assert cfg.server_port == 9001
    assert cfg.request_timeout_seconds == 12.5
    assert cfg.allowed_origins == ["https://a.example", "https://b.example"]
    assert cfg.auto_speak is True
    assert cfg.relay_url.endswith(":9001")


def test_api_key_is_read_live(monkeypatch):
    cfg = Config()
    cfg.api_key_env = "SOME_KEY_VAR"
    monkeypatch.delenv("SOME_KEY_VAR", raising=False)
    assert cfg.read_api_key() is None

    monkeypatch.setenv("SOME_KEY_VAR", "  ")
    assert cfg.read_api_key() is None

    monkeypatch.setenv("SOME_KEY_VAR", "secret")
    assert cfg.read_api_key() == "secret"


def test_get_config_is_singleton(monkeypatch):
    monkeypatch.setattr(config_module, "_config_instance", None)
    assert config_module.get_config() is config_module.get_config()
