"""
Logging configuration for daynotes.

Quiet by default; --verbose turns on debug output to stderr. Stores also
keep a rotating operations log so color migrations can be audited later.
"""

import logging
import os
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path


def configure_quiet_mode(quiet: bool = True):
    """
    Configure logging to suppress verbose output.

    Args:
        quiet: If True, only warnings and errors reach stderr.
    """
    if quiet:
        warnings.filterwarnings("ignore", category=DeprecationWarning)
        logging.getLogger("daynotes").setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    # Re-enable warnings
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    logging.getLogger("daynotes").setLevel(logging.DEBUG)


def configure_ops_log(store_path):
    """Configure a persistent operations log for a daynotes store.

    Writes to {store_path}/daynotes-ops.log using a rotating file handler
    (1MB max, 3 backups). Always active regardless of --verbose.
    Returns the handler so it can be removed on exit.
    """
    log_path = Path(store_path) / "daynotes-ops.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    daynotes_logger = logging.getLogger("daynotes")
    for existing in daynotes_logger.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == os.path.abspath(log_path):
            return existing

    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    daynotes_logger.addHandler(handler)
    # Ensure daynotes logger allows INFO through even in quiet mode
    if daynotes_logger.level == logging.NOTSET or daynotes_logger.level > logging.INFO:
        daynotes_logger.setLevel(logging.INFO)

    return handler
