"""Tests for configuration settings and logging setup."""

import logging

import structlog


def test_settings_loads_from_env():
    """Test that settings loads from environment variables."""
    # Import after env vars are set in conftest
    from qayd.config.settings import get_settings

    # Clear the cache to force reload
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.email == "test@example.com"
    assert settings.password is not None
    assert settings.password.get_secret_value() == "Testpass1!"


def test_settings_has_defaults():
    """Test that settings has sensible defaults."""
    from qayd.config.settings import get_settings

    get_settings.cache_clear()
    settings = get_settings()

    assert settings.api_url == "http://localhost:3000/api"
    assert settings.timeout == 30.0
    assert settings.max_retries == 3
    assert settings.locale == "en"
    assert settings.currency == "QAR"
    assert settings.log_level == "INFO"
    assert settings.log_format == "console"


def test_settings_are_cached():
    """Test that get_settings returns cached instance."""
    from qayd.config.settings import get_settings

    get_settings.cache_clear()

    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_settings_override_from_env(monkeypatch):
    """Test that QAYD_* variables override the defaults."""
    from qayd.config.settings import get_settings

    monkeypatch.setenv("QAYD_API_URL", "https://api.qayd.example/api")
    monkeypatch.setenv("QAYD_LOCALE", "ar")
    monkeypatch.setenv("QAYD_TIMEOUT", "5")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.api_url == "https://api.qayd.example/api"
        assert settings.locale == "ar"
        assert settings.timeout == 5.0
    finally:
        get_settings.cache_clear()


def test_password_is_not_exposed_in_repr():
    """Test that the password is held as a secret."""
    from qayd.config.settings import get_settings

    get_settings.cache_clear()
    assert "Testpass1!" not in repr(get_settings())


def test_configure_logging_configures_structlog():
    """Test that configure_logging installs the structlog pipeline."""
    from qayd.config.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", format="json")
    try:
        assert structlog.is_configured()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        get_logger("qayd.test").info("logging_configured")
        assert logging.getLogger("httpx").level == logging.DEBUG
    finally:
        structlog.reset_defaults()
        logging.getLogger().setLevel(logging.WARNING)


def test_configure_logging_quiets_transport_loggers():
    """Test httpx request logs are hidden outside DEBUG."""
    from qayd.config.logging import configure_logging

    configure_logging(level="INFO", format="console")
    try:
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
    finally:
        structlog.reset_defaults()
