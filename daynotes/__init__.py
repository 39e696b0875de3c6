"""
Daily Notes

Which notes were created or updated on a given day, and a color label per
note that follows the note across renames and disappears when it is deleted.

Quick Start:
    from daynotes import AnnotationStore, DailyActivity, FileSystemVault, JsonFileBlobStore

    vault = FileSystemVault(Path("~/notes"))
    colors = AnnotationStore.load(JsonFileBlobStore(Path("~/.daynotes/data.json").expanduser()))
    activity = DailyActivity(colors, vault.list_documents)
    result = activity.set_day(date(2026, 1, 15))
    for event in vault.poll():
        activity.handle(event)

CLI Usage:
    daynotes day 2026-01-15 --vault ~/notes
    daynotes color-set Projects/plan.md --palette 2
    daynotes watch

Environment Variables:
    DAYNOTES_STORE_PATH  - Override default store location (~/.daynotes)
    DAYNOTES_VAULT       - Notes directory
    DAYNOTES_VERBOSE     - Set to 1 for debug logging
"""

from .activity import DailyActivity
from .annotations import AnnotationStore
from .blob_store import BlobStore, JsonFileBlobStore, MemoryBlobStore
from .date_index import is_same_day, query_by_day
from .errors import PersistenceError
from .events import (
    DocumentCreated,
    DocumentDeleted,
    DocumentModified,
    DocumentRenamed,
    VaultEvent,
)
from .types import DayActivity, Document
from .vault import FileSystemVault

__version__ = "0.1.0"
__all__ = [
    "AnnotationStore",
    "BlobStore",
    "DailyActivity",
    "DayActivity",
    "Document",
    "DocumentCreated",
    "DocumentDeleted",
    "DocumentModified",
    "DocumentRenamed",
    "FileSystemVault",
    "JsonFileBlobStore",
    "MemoryBlobStore",
    "PersistenceError",
    "VaultEvent",
    "is_same_day",
    "query_by_day",
]
