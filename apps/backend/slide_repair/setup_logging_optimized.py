import logging
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Attach one console handler to the root logger and set its level.

    Unknown level names fall back to INFO.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        root.addHandler(handler)
    level_value = logging.getLevelName(str(level).upper())
    root.setLevel(level_value if isinstance(level_value, int) else logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Module logger for the engine and the service; initializes logging on first use."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
