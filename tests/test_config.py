import logging

from matchday import config as config_module
from matchday.logging_config import LOG_FORMAT, configure_logging


def test_default_page_size_clamping():
    settings = config_module.DevelopmentConfig()
    assert settings.clamp_page_size(None) == settings.DEFAULT_PAGE_SIZE
    assert settings.clamp_page_size(0) == settings.DEFAULT_PAGE_SIZE
    assert settings.clamp_page_size(10) == 10
    assert settings.clamp_page_size(10_000) == settings.MAX_PAGE_SIZE


def test_database_flavour_detection():
    settings = config_module.TestingConfig()
    assert settings.is_sqlite
    assert not settings.is_postgresql

    settings.DATABASE_URL = "postgresql://user:secret@db/matchday"
    assert settings.is_postgresql


def test_get_config_follows_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert isinstance(config_module.get_config(), config_module.ProductionConfig)

    monkeypatch.setenv("ENVIRONMENT", "testing")
    assert isinstance(config_module.get_config(), config_module.TestingConfig)

    monkeypatch.setenv("ENVIRONMENT", "staging")
    assert isinstance(config_module.get_config(), config_module.DevelopmentConfig)


def test_configure_logging_replaces_own_handlers(tmp_path):
    settings = config_module.TestingConfig()
    settings.LOG_LEVEL = "debug"
    settings.LOG_FILE = str(tmp_path / "matchday.log")

    logger = configure_logging(settings)
    configure_logging(settings)

    own = [h for h in logger.handlers if getattr(h, "_matchday_handler", False)]
    assert len(own) == 2
    assert logger.level == logging.DEBUG
    assert own[0].formatter._fmt == LOG_FORMAT

    logging.getLogger("matchday.usecases").debug("hello")
    for handler in own:
        handler.flush()
    assert "hello" in (tmp_path / "matchday.log").read_text()

    settings.LOG_FILE = ""
    configure_logging(settings)
    assert len([h for h in logger.handlers if getattr(h, "_matchday_handler", False)]) == 1
