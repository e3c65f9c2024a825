"""
Logging configuration
Logs go to stdout for container compatibility.
"""

import logging
import sys

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Install a stdout handler on the root logger once."""
    global _configured

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
    ))
    root_logger.addHandler(handler)

    # Reduce noise from the server
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
