import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def normalize_log_level(raw_level: Optional[str]) -> int:
    level = getattr(logging, str(raw_level or "INFO").strip().upper(), None)
    if isinstance(level, int):
        return level
    return logging.INFO


def setup_logging(raw_level: Optional[str]) -> None:
    level = normalize_log_level(raw_level)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
            if handler.formatter is None:
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
