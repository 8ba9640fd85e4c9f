"""Console logging configuration for the CLI and web entry points."""

import logging
import sys


class _ThirdPartyFilter(logging.Filter):
    """Keep upkeep logs; let other libraries through only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "upkeep" or record.name.startswith("upkeep."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(level: int = logging.WARNING) -> None:
    """
    Configure a single stderr handler on the root logger.

    Call once, early, from an entry point. Safe to call again: existing
    handlers are replaced rather than duplicated.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(_ThirdPartyFilter())
    root.addHandler(handler)
