"""
Error types for daynotes, and the CLI's error log.

The CLI prints one line per failure; the full traceback goes to
``daynotes-errors.log`` in the store directory it was using.
"""

import os
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import get_store_dir

ERROR_LOG_FILENAME = "daynotes-errors.log"


class PersistenceError(Exception):
    """A durable write of the annotation map failed.

    Raised to the caller of the mutating operation. The in-memory state
    already reflects the attempted change; reload to discard it.
    The underlying I/O error is chained as ``__cause__``.
    """


def _version() -> str:
    from importlib.metadata import PackageNotFoundError, version
    try:
        return version("daynotes")
    except PackageNotFoundError:
        return "unknown"


def _format_entry(exc: BaseException, store_dir: Path, context: str) -> str:
    header = f"[{datetime.now().astimezone().isoformat(timespec='seconds')}]"
    header += f" daynotes {_version()} store={store_dir}"
    if context:
        header += f" ({context})"
    lines = [header]
    if isinstance(exc, PersistenceError) and exc.__cause__ is not None:
        # The failing write is what matters when the data file cannot be saved
        lines.append(f"write failed: {exc.__cause__!r}")
    lines.append("".join(traceback.format_exception(exc)).rstrip())
    return "\n".join(lines) + "\n"


def log_exception(
    exc: BaseException,
    context: str = "",
    store_path: Optional[Path] = None,
) -> Path:
    """
    Append an exception report to the store's error log.

    Args:
        exc: The exception that occurred
        context: Command or operation that failed
        store_path: Store directory (default: DAYNOTES_STORE_PATH or ~/.daynotes)

    Returns:
        Path to the error log file, whether or not the write succeeded
    """
    store_dir = get_store_dir(store_path)
    log_path = store_dir / ERROR_LOG_FILENAME
    try:
        store_dir.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a", encoding="utf-8") as f:
            f.write("\n" + "-" * 72 + "\n")
            f.write(_format_entry(exc, store_dir, context))
    except OSError:
        pass  # The report is best effort; the user already sees the error line
    return log_path
