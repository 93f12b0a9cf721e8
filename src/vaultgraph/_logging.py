"""Logging configuration for vaultgraph.

Modules log through the standard library::

    import logging
    log = logging.getLogger(__name__)

Everything is written to stderr so that stdout carries nothing but the JSON
result. The level comes from the ``VAULTGRAPH_LOG_LEVEL`` environment
variable (``DEBUG``, ``INFO``, ``WARNING`` (default), ``ERROR``).
"""

import logging
import os
import sys

LOG_LEVEL_ENV = "VAULTGRAPH_LOG_LEVEL"


def configure_logging(level_name: str | None = None) -> None:
    """Attach a stderr handler to the ``vaultgraph`` logger.

    Call once at start-up; later calls are no-ops.
    """
    root_logger = logging.getLogger("vaultgraph")
    if root_logger.handlers:
        return

    level_name = (level_name or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False
