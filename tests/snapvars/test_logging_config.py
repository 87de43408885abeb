import logging

import pytest
from pythonjsonlogger import jsonlogger

from snapvars.config import EngineConfig
from snapvars.logging_config import configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_is_the_default(root_logger, monkeypatch):
    monkeypatch.delenv("SNAPVARS_LOG_FORMAT", raising=False)

    logger = configure_logging()

    assert logger is root_logger
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root_logger.level == logging.INFO


def test_env_var_selects_plain(root_logger, monkeypatch):
    monkeypatch.setenv("SNAPVARS_LOG_FORMAT", "PLAIN")

    configure_logging(level=logging.DEBUG)

    formatter = root_logger.handlers[0].formatter
    assert not isinstance(formatter, jsonlogger.JsonFormatter)
    assert root_logger.level == logging.DEBUG


def test_argument_overrides_env_var(root_logger, monkeypatch):
    monkeypatch.setenv("SNAPVARS_LOG_FORMAT", "plain")

    configure_logging(force_format="json")
    configure_logging(force_format="json")

    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, jsonlogger.JsonFormatter)


def test_engine_config_format_used_without_env_var(root_logger, monkeypatch):
    monkeypatch.delenv("SNAPVARS_LOG_FORMAT", raising=False)

    configure_logging(config=EngineConfig(log_format="plain"))

    assert not isinstance(root_logger.handlers[0].formatter, jsonlogger.JsonFormatter)


def test_named_logger_leaves_root_alone(root_logger):
    before = list(root_logger.handlers)
    named = logging.getLogger("snapvars")
    named_handlers = list(named.handlers)
    named_level = named.level
    try:
        configure_logging(force_format="plain", logger_name="snapvars")
        assert len(named.handlers) == 1
        assert root_logger.handlers == before
    finally:
        named.handlers[:] = named_handlers
        named.setLevel(named_level)


def test_unknown_format(root_logger):
    with pytest.raises(ValueError, match="Unknown log format"):
        configure_logging(force_format="xml")
