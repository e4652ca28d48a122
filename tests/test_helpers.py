import logging
from logging.handlers import RotatingFileHandler

import pytest

from userdesk.utils.config import Config
from userdesk.utils.helpers import setup_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_adds_file_handler_once(tmp_path, clean_root_logger):
    log_file = tmp_path / "logs" / "userdesk.log"

    setup_logging(level="debug", log_file=str(log_file))
    setup_logging(level="debug", log_file=str(log_file))

    file_handlers = [
        h for h in clean_root_logger.handlers
        if isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_file)
    ]
    assert len(file_handlers) == 1
    assert clean_root_logger.level == logging.DEBUG
    assert log_file.parent.is_dir()
    assert logging.getLogger('urllib3').level == logging.WARNING


def test_config_get_falls_back_to_default():
    assert Config.get("PAGE_SIZE") == Config.PAGE_SIZE
    assert Config.get("NOT_A_SETTING", "fallback") == "fallback"


def test_config_validate_rejects_non_http_url(monkeypatch):
    monkeypatch.setattr(Config, "DIRECTORY_API_URL", "ftp://directory")
    assert Config.validate() is False
    monkeypatch.setattr(Config, "DIRECTORY_API_URL", "https://directory.example.com")
    assert Config.validate() is True


def test_config_to_dict_lists_settings():
    settings = Config.to_dict()
    assert settings["PAGE_SIZE"] == Config.PAGE_SIZE
    assert "WAIT_FOR_SAVE" in settings
