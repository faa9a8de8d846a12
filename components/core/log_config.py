"""Logging setup shared by the API and the scripts."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Configure the root logger once; repeated calls only adjust the level."""
    global _handler

    root = logging.getLogger()
    root.setLevel(level.upper())

    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        # SQL echo is controlled by the engine, keep the driver loggers quiet
        logging.getLogger("aiomysql").setLevel(logging.WARNING)
    if _handler not in root.handlers:
        root.addHandler(_handler)
    return _handler
