"""
Durable key-value blob storage for daynotes state.

The annotation map is persisted as a single JSON object:

    { "noteColors": { "<path>": "<color-token>", ... } }

Sibling keys written by other collaborators are carried along untouched.
A blob store only loads and saves whole objects; merging onto defaults is
the caller's job.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DATA_FILENAME = "data.json"


@runtime_checkable
class BlobStore(Protocol):
    """
    Opaque durable storage for one JSON-compatible object.

    Implementations must not return from ``save`` before the data is
    committed, and must raise (typically ``OSError``) when it is not.
    """

    def load(self) -> Optional[dict[str, Any]]:
        """Return the stored object, or None if nothing has been saved."""
        ...

    def save(self, data: dict[str, Any]) -> None:
        """Durably replace the stored object."""
        ...


class JsonFileBlobStore:
    """
    Blob store backed by a JSON file.

    Writes go to a sibling temp file which is fsynced and then renamed over
    the target, so readers never see a half-written file.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Path to the JSON file (parent created on first save)
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[dict[str, Any]]:
        if not self._path.exists():
            return None
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            # JSONDecodeError, or UnicodeDecodeError for non-UTF-8 bytes
            logger.warning("Ignoring malformed data file %s: %s", self._path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring data file %s: top level is not an object", self._path)
            return None
        return data

    def save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise


class MemoryBlobStore:
    """
    In-process blob store.

    For hosts that own durability themselves, and for tests. Stores a deep
    copy so later mutation of the caller's object is not visible.
    """

    def __init__(self, data: Optional[dict[str, Any]] = None):
        self._data = copy.deepcopy(data) if data is not None else None
        self.saves = 0

    def load(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def save(self, data: dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)
        self.saves += 1
