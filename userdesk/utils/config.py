# userdesk/utils/config.py
import os
from dotenv import load_dotenv
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Determine the absolute path to the root directory
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../'))

# Path to the .env file
env_path = os.path.join(ROOT_DIR, '.env')

# Load environment variables from the .env file
load_dotenv(dotenv_path=env_path)
logger.info(f"Loaded environment from {env_path}")


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_timeout(name: str) -> Optional[float]:
    """Read an optional timeout in seconds; unset, empty or non-positive means no timeout."""
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name} value: {raw!r}")
        return None
    return value if value > 0 else None


class Config:
    # Remote directory service
    DIRECTORY_API_URL = os.getenv("DIRECTORY_API_URL", "http://localhost:5000").rstrip("/")
    DIRECTORY_TIMEOUT = _env_timeout("DIRECTORY_TIMEOUT")

    # User table
    PAGE_SIZE = int(os.getenv("PAGE_SIZE", "20"))
    NOTIFICATION_SECONDS = float(os.getenv("NOTIFICATION_SECONDS", "3"))

    # Close the add/edit dialog only after the save round trip succeeds
    WAIT_FOR_SAVE = _env_flag("WAIT_FOR_SAVE")
    # Pull the current page back into range after a mutation shrinks the list
    CLAMP_PAGE = _env_flag("CLAMP_PAGE")

    # Page configuration
    PAGE_TITLE = os.getenv("PAGE_TITLE", "User Directory")
    FAVICON_URL = os.getenv("FAVICON_URL", "👥")

    # Logging configuration
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', os.path.join('logs', 'userdesk.log'))

    @classmethod
    def get(cls, name: str, default: Any = None) -> Any:
        """Return a configuration value by name, or ``default`` when it is not defined."""
        return getattr(cls, name, default)

    @classmethod
    def to_dict(cls):
        return {
            "DIRECTORY_API_URL": cls.DIRECTORY_API_URL,
            "DIRECTORY_TIMEOUT": cls.DIRECTORY_TIMEOUT,
            "PAGE_SIZE": cls.PAGE_SIZE,
            "NOTIFICATION_SECONDS": cls.NOTIFICATION_SECONDS,
            "WAIT_FOR_SAVE": cls.WAIT_FOR_SAVE,
            "CLAMP_PAGE": cls.CLAMP_PAGE,
            "PAGE_TITLE": cls.PAGE_TITLE,
            "LOG_LEVEL": cls.LOG_LEVEL,
            "LOG_FILE": cls.LOG_FILE,
        }

    @classmethod
    def validate(cls):
        """Validate the directory configuration and log what is wrong with it."""
        valid = True

        if not cls.DIRECTORY_API_URL:
            logger.error("❌ DIRECTORY_API_URL is missing")
            valid = False
        elif not cls.DIRECTORY_API_URL.startswith(("http://", "https://")):
            logger.warning(f"❌ DIRECTORY_API_URL is not an http(s) URL: {cls.DIRECTORY_API_URL}")
            valid = False
        else:
            logger.info(f"✅ DIRECTORY_API_URL is configured: {cls.DIRECTORY_API_URL}")

        if cls.PAGE_SIZE < 1:
            logger.error(f"❌ PAGE_SIZE must be positive, got {cls.PAGE_SIZE}")
            valid = False

        logger.info(f"Directory configuration is {'valid' if valid else 'INVALID'}")
        return valid
