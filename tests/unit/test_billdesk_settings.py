"""Unit tests for settings and logging setup."""

from billdesk.config import configure_logging, get_logger, get_settings, reset_settings


class TestSettings:
    def test_defaults(self):
        settings = get_settings()

        assert settings.app_name == "billdesk"
        assert settings.pricing.money_places == 2
        assert settings.pricing.max_discount_percent == 100.0
        assert settings.backend.stocks_path == "/stocks"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BACKEND_BASE_URL", "http://erp.local:9000/api/")
        monkeypatch.setenv("PRICING_MAX_DISCOUNT_PERCENT", "40")
        reset_settings()

        settings = get_settings()

        assert settings.backend.base_url == "http://erp.local:9000/api"
        assert settings.pricing.max_discount_percent == 40

    def test_cached_until_reset(self):
        first = get_settings()
        assert get_settings() is first

        reset_settings()

        assert get_settings() is not first


class TestLogging:
    def test_configure_and_log(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        reset_settings()

        configure_logging()
        get_logger(__name__).info("settings_test_event", value=1)

    def test_request_context_round_trip(self):
        import structlog

        from billdesk.config import bind_request_context, clear_request_context

        bind_request_context(request_id="abc123")
        assert structlog.contextvars.get_contextvars()["request_id"] == "abc123"

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
