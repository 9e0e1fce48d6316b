import logging

import pytest

from randomness_wtf.utils.logger import setup_logging


@pytest.fixture
def restore_loggers():
    names = ["", "httpx", "web3", "randomness_wtf.services.apify"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_http_client_loggers_default_to_warning(monkeypatch, restore_loggers):
    monkeypatch.delenv("LOG_LEVEL_HTTPX", raising=False)
    monkeypatch.delenv("LOG_LEVEL_WEB3", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    setup_logging()

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("web3").level == logging.WARNING


def test_module_override_and_off(monkeypatch, restore_loggers):
    monkeypatch.setenv("LOG_LEVEL_HTTPX", "debug")
    monkeypatch.setenv("LOG_LEVEL_APIFY", "off")

    setup_logging()

    assert logging.getLogger("httpx").level == logging.DEBUG
    assert logging.getLogger("randomness_wtf.services.apify").level > logging.CRITICAL


def test_invalid_level_is_ignored(monkeypatch, restore_loggers):
    logging.getLogger("web3").setLevel(logging.ERROR)
    monkeypatch.setenv("LOG_LEVEL_WEB3", "chatty")

    setup_logging()

    assert logging.getLogger("web3").level == logging.ERROR
