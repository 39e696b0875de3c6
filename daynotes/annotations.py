"""
Persistent color annotations keyed by document path.

The store is the single source of truth for path -> color associations.
Paths are mutable, so the store exposes explicit reconciliation operations
for rename and delete notifications; an annotation follows its document
across renames and disappears when the document is deleted.

Every mutation is written through to the blob store before the call
returns. A failed write raises PersistenceError but the in-memory map
keeps the attempted change; callers that need strict consistency reload.
"""

import logging
import threading
from typing import Any, Optional

from .blob_store import BlobStore
from .errors import PersistenceError

logger = logging.getLogger(__name__)

NOTE_COLORS_KEY = "noteColors"


def _default_data() -> dict[str, Any]:
    return {NOTE_COLORS_KEY: {}}


class AnnotationStore:
    """
    Path -> color map persisted through a BlobStore.

    Colors are opaque tokens: stored and returned exactly as given.
    Mutators hold one lock across the in-memory change and the durable
    write, so concurrent callers are linearized.
    """

    def __init__(self, blob_store: BlobStore):
        """
        Args:
            blob_store: Durable storage for the serialized map
        """
        self._blob_store = blob_store
        self._data: dict[str, Any] = _default_data()
        self._lock = threading.Lock()

    @classmethod
    def load(cls, blob_store: BlobStore) -> "AnnotationStore":
        """Create a store and populate it from durable storage."""
        store = cls(blob_store)
        store.reload()
        return store

    @property
    def _colors(self) -> dict[str, str]:
        return self._data[NOTE_COLORS_KEY]

    def reload(self) -> None:
        """
        Replace in-memory state with what durable storage holds.

        Loaded data is merged onto defaults: unknown top-level keys are
        kept, and a missing or malformed ``noteColors`` becomes empty.
        """
        loaded = self._blob_store.load()
        data = _default_data()
        if isinstance(loaded, dict):
            data.update(loaded)
        if not isinstance(data[NOTE_COLORS_KEY], dict):
            logger.warning(
                "Replacing malformed %s (%s) with an empty mapping",
                NOTE_COLORS_KEY, type(data[NOTE_COLORS_KEY]).__name__,
            )
            data[NOTE_COLORS_KEY] = {}
        else:
            data[NOTE_COLORS_KEY] = dict(data[NOTE_COLORS_KEY])
        with self._lock:
            self._data = data
        logger.debug("Loaded %d note colors", len(data[NOTE_COLORS_KEY]))

    def _save(self) -> None:
        """Write the whole blob. Caller holds the lock."""
        try:
            self._blob_store.save(self._data)
        except OSError as e:
            raise PersistenceError(f"Failed to save note colors: {e}") from e

    # -- Queries --

    def get(self, path: str) -> Optional[str]:
        """Color for path, or None if it has none."""
        return self._colors.get(path)

    def colors(self) -> dict[str, str]:
        """Snapshot of every association."""
        with self._lock:
            return dict(self._colors)

    def __contains__(self, path: object) -> bool:
        return path in self._colors

    def __len__(self) -> int:
        return len(self._colors)

    # -- Mutations --

    def set(self, path: str, color: str) -> None:
        """Associate color with path, replacing any previous color."""
        with self._lock:
            self._colors[path] = color
            self._save()

    def remove(self, path: str) -> None:
        """Drop the association for path. Writes only if one existed."""
        with self._lock:
            if path not in self._colors:
                return
            del self._colors[path]
            self._save()

    def reconcile_rename(self, old_path: str, new_path: str) -> None:
        """
        Move the annotation of a renamed document to its new path.

        Unannotated documents are left alone and nothing is written.
        An annotation already at new_path is overwritten.
        """
        with self._lock:
            if old_path not in self._colors or old_path == new_path:
                return
            colors = dict(self._colors)
            color = colors.pop(old_path)
            replaced = colors.get(new_path)
            colors[new_path] = color
            self._data[NOTE_COLORS_KEY] = colors
            if replaced is not None:
                logger.info("Rename of %s replaced color %s at %s", old_path, replaced, new_path)
            self._save()
        logger.info("Migrated color from %s to %s", old_path, new_path)

    def reconcile_delete(self, path: str) -> None:
        """Purge the annotation of a deleted document, if any."""
        with self._lock:
            if path not in self._colors:
                return
            del self._colors[path]
            self._save()
        logger.info("Cleaned up color for deleted file %s", path)
