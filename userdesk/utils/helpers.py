import os
import logging
from logging.handlers import RotatingFileHandler

from userdesk.utils.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=None, log_file=None):
    """
    Set up logging for the dashboard.

    Configures the root logger with a console handler and a rotating file
    handler. Calling it again is harmless: the file handler is only added once.

    Args:
        level: Log level name, defaults to Config.LOG_LEVEL
        log_file: Path of the log file, defaults to Config.LOG_FILE
    """
    level = (level or Config.LOG_LEVEL).upper()
    log_file = log_file or Config.LOG_FILE

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    root = logging.getLogger()
    root.setLevel(level)

    log_path = os.path.abspath(log_file)
    already_attached = any(
        isinstance(handler, RotatingFileHandler) and getattr(handler, 'baseFilename', None) == log_path
        for handler in root.handlers
    )
    if not already_attached:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=10*1024*1024, backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    # Set log levels for some verbose libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('streamlit').setLevel(logging.WARNING)

    logging.info("Logging configured")
