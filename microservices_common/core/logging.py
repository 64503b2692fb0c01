"""Root logger setup shared by every microservice built on this package.

The error translator logs through ``logging.getLogger``; this module only
decides where those records go and how they look.
"""

import logging
import sys

ERROR_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route all records to stdout at ``level``, replacing earlier handlers."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=ERROR_LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # One line per request is noise next to the error log.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
