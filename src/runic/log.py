"""Logging helpers.

runic never configures logging itself; it only emits ``debug`` records under
the ``runic`` namespace.

Example:
    >>> from runic.log import get_logger
    >>> get_logger("lexer").name
    'runic.lexer'
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under ``runic.``.

    Args:
        name: Logger name (typically __name__)
    """
    if not (name == "runic" or name.startswith("runic.")):
        name = f"runic.{name}"
    return logging.getLogger(name)
