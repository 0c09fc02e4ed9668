from scribe.config import AppConfig


def make_config(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return AppConfig(_env_file=None)


def test_defaults(monkeypatch):
    monkeypatch.delenv("BUFFER_COMMIT_DELAY_MS", raising=False)
    monkeypatch.delenv("REMOTE_SAVE_DELAY_MS", raising=False)
    monkeypatch.delenv("AI_CONTEXT_CHARS", raising=False)
    config = make_config(monkeypatch)
    assert config.BUFFER_COMMIT_DELAY_MS == 1000
    assert config.REMOTE_SAVE_DELAY_MS == 2000
    assert config.buffer_commit_delay == 1.0
    assert config.remote_save_delay == 2.0
    assert config.AI_CONTEXT_CHARS == 500


def test_dev_mode_from_string(monkeypatch):
    assert make_config(monkeypatch, DEV_MODE="false").DEV_MODE is False
    assert make_config(monkeypatch, DEV_MODE="YES").DEV_MODE is True


def test_allowed_origins(monkeypatch):
    config = make_config(monkeypatch, ALLOWED_ORIGINS="https://a.test, https://b.test,")
    assert config.allowed_origins_list == ["https://a.test", "https://b.test"]
    assert make_config(monkeypatch, ALLOWED_ORIGINS="*").allowed_origins_list == ["*"]


def test_configured_flags(monkeypatch):
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    config = make_config(
        monkeypatch,
        SUPABASE_URL="https://project.supabase.co",
        SUPABASE_SERVICE_KEY="service",
        AI_GATEWAY_API_KEY="key",
    )
    assert config.supabase_configured is False
    assert config.ai_configured is True
