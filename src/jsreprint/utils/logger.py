"""Logger factory for jsreprint modules.

Every logger lives under the ``jsreprint`` namespace so applications can
tune the whole library with one call::

    logging.getLogger("jsreprint").setLevel(logging.DEBUG)

The library only emits debug records (parse summaries, differ escalations,
dropped nested replacements, fallbacks to generic printing) and never
installs a handler that writes anywhere; the package logger carries a
``NullHandler`` so nothing is printed unless the application configures
logging.

Example:
    >>> from jsreprint.utils.logger import get_logger
    >>> get_logger("jsreprint.patcher").name
    'jsreprint.patcher'
    >>> get_logger("scratch").name
    'jsreprint.scratch'
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "jsreprint"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, moved under the package namespace if needed.

    Args:
        name: Usually the calling module's ``__name__``
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
