"""Diagnostic logging configuration."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def debug_enabled() -> bool:
    """Return True only when SYLVA_DEBUG is explicitly set to '1'."""
    return os.getenv("SYLVA_DEBUG") == "1"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose or debug_enabled() else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("sylva").setLevel(level)
