"""Tests for environment-driven settings."""


class TestSettings:
    """Tests for Settings and get_settings."""

    def test_defaults(self, monkeypatch, tmp_path):
        from social_arb.settings import Settings
        monkeypatch.chdir(tmp_path)
        settings = Settings()
        assert settings.x_bearer_token == ""
        assert settings.lookback_hours == 24
        assert settings.fetch_delay_seconds == 0.5
        assert settings.min_confidence == 80.0
        assert settings.min_hours_between_signals == 8.0
        assert settings.cooldown_hours == 48.0
        assert settings.watchlist_since == "24h"
        assert settings.watchlist_delay_seconds == 3.0

    def test_env_prefix(self, monkeypatch, tmp_path):
        from social_arb.settings import Settings
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SOCIAL_ARB_X_BEARER_TOKEN", "token-123")
        monkeypatch.setenv("SOCIAL_ARB_MIN_CONFIDENCE", "75")
        settings = Settings()
        assert settings.x_bearer_token == "token-123"
        assert settings.min_confidence == 75.0

    def test_dotenv_file(self, monkeypatch, tmp_path):
        from social_arb.settings import Settings
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("SOCIAL_ARB_DISCORD_WEBHOOK_URL=https://example.test/hook\n")
        assert Settings().discord_webhook_url == "https://example.test/hook"

    def test_unrelated_env_ignored(self, monkeypatch, tmp_path):
        from social_arb.settings import Settings
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SOCIAL_ARB_LOG_LEVEL", "DEBUG")
        Settings()

    def test_cached(self):
        from social_arb.settings import get_settings
        assert get_settings() is get_settings()
