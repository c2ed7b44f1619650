"""Console logging setup for scripts and notebooks using binwise.

The library itself only attaches a ``NullHandler``; call
:func:`setup_logging` to see its messages.
"""

import logging
import sys
from typing import IO, Optional, Union

FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    stream: Optional[IO] = None,
) -> logging.Logger:
    """Attach a console handler to the ``binwise`` logger and return it."""
    logger = logging.getLogger("binwise")
    logger.setLevel(level)

    # Drop handlers from an earlier call (avoids duplicates on re-run)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    console = logging.StreamHandler(stream or sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(FORMAT, datefmt=DATEFMT))
    logger.addHandler(console)
    return logger
