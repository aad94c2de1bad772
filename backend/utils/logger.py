import logging
import os

from backend.utils.config import LOG_DIR, LOG_LEVEL

ROOT_LOGGER_NAME = "finance_tracker"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_root():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    root.setLevel(LOG_LEVEL)
    formatter = logging.Formatter(LOG_FORMAT)

    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = logging.FileHandler(os.path.join(LOG_DIR, "finance_tracker.log"))
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    # Logging in the terminal
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a child of the app logger, e.g. get_logger("transactions") -> finance_tracker.transactions."""
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
