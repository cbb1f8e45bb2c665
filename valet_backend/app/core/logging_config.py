"""
Logging setup.

All modules log through standard library loggers under the "valet_backend"
namespace; this installs a single stream handler on that namespace.
"""

import logging
from valet_backend.app.core.config import settings

LOGGER_NAME = "valet_backend"

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the application logger."""
    if name.startswith(LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(level: str = None) -> logging.Logger:
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel((level or settings.log_level).upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    return root
