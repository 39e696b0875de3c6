"""
Filesystem vault: a directory tree of notes.

Provides the two things the core consumes from an external store:
a synchronous document listing, and change events. Events are derived by
polling and diffing snapshots, with renames recognized by file identity
(device + inode) surviving under a new path.

Creation time comes from the file's birth time where the platform
reports one. Elsewhere (most Linux builds) the vault remembers when it
first saw each note, optionally in a ``first_seen`` blob store so the
record survives restarts. ``st_ctime`` alone is not a creation time: it
moves on every content write.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, NamedTuple, Optional

from .blob_store import BlobStore
from .events import (
    DocumentCreated,
    DocumentDeleted,
    DocumentModified,
    DocumentRenamed,
    VaultEvent,
)
from .types import Document

logger = logging.getLogger(__name__)

DEFAULT_SUFFIXES = (".md",)
FIRST_SEEN_FILENAME = "first-seen.json"
FIRST_SEEN_KEY = "firstSeen"


class _FileState(NamedTuple):
    identity: tuple[int, int]
    mtime_ns: int


def _birthtime(stat: os.stat_result) -> Optional[float]:
    """File birth time, if the platform reports it (macOS, BSD, Windows)."""
    return getattr(stat, "st_birthtime", None)


def _order_renames(renames: dict[str, str]) -> list[DocumentRenamed]:
    """
    Order renames so each can be applied one at a time.

    In a chain (a -> b, b -> c) the move off b must come first. A cycle
    (a <-> b) has no such order and is emitted sorted by old path.
    """
    pending = dict(renames)
    ordered: list[DocumentRenamed] = []
    while pending:
        ready = sorted(old for old, new in pending.items() if new not in pending)
        if not ready:
            logger.warning("Rename cycle among %s", sorted(pending))
            ready = sorted(pending)
        for old in ready:
            ordered.append(DocumentRenamed(old, pending.pop(old)))
    return ordered


class FileSystemVault:
    """
    Notes stored as files under a root directory.

    Paths are root-relative, with forward slashes. Hidden entries (names
    starting with '.') and symlinks are skipped, as are files whose suffix
    is not in ``suffixes``.
    """

    def __init__(
        self,
        root: Path,
        suffixes: tuple[str, ...] = DEFAULT_SUFFIXES,
        first_seen: Optional[BlobStore] = None,
    ):
        """
        Args:
            root: Vault directory
            suffixes: File suffixes counted as documents (case-insensitive)
            first_seen: Where first-seen times are kept between runs
                (in memory only if omitted)
        """
        self.root = Path(root).expanduser()
        self.suffixes = tuple(s.lower() for s in suffixes)
        self._snapshot: Optional[dict[str, _FileState]] = None
        self._first_seen_store = first_seen
        self._extra: dict[str, Any] = {}
        self._first_seen: dict[str, float] = {}
        if first_seen is not None:
            data = first_seen.load() or {}
            recorded = data.get(FIRST_SEEN_KEY, {})
            if isinstance(recorded, dict):
                self._first_seen = {
                    p: float(t) for p, t in recorded.items()
                    if isinstance(t, (int, float))
                }
            self._extra = {k: v for k, v in data.items() if k != FIRST_SEEN_KEY}

    def _iter_files(self):
        """Yield (relative path, stat) for every eligible file."""
        if not self.root.is_dir():
            raise IOError(f"Vault directory not found: {self.root}")
        for dirpath, dirnames, filenames in os.walk(self.root):
            # Prune hidden directories in place so os.walk skips them
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                if self.suffixes and Path(name).suffix.lower() not in self.suffixes:
                    continue
                full = Path(dirpath) / name
                if full.is_symlink():
                    continue
                try:
                    stat = full.stat()
                except FileNotFoundError:
                    continue  # Removed between listing and stat
                rel = full.relative_to(self.root).as_posix()
                yield rel, stat

    def _created_timestamp(self, rel: str, stat: os.stat_result) -> float:
        birth = _birthtime(stat)
        if birth is not None:
            return birth
        seen = self._first_seen.get(rel)
        if seen is None:
            seen = min(stat.st_mtime, stat.st_ctime)
            self._first_seen[rel] = seen
        # A note restored with an older mtime was created no later than that
        return min(seen, stat.st_mtime)

    def _save_first_seen(self) -> None:
        if self._first_seen_store is None:
            return
        data = dict(self._extra)
        data[FIRST_SEEN_KEY] = dict(sorted(self._first_seen.items()))
        try:
            self._first_seen_store.save(data)
        except OSError as e:
            logger.warning("Could not save first-seen times: %s", e)

    def list_documents(self) -> list[Document]:
        """Snapshot of every document in the vault."""
        before = dict(self._first_seen)
        docs = []
        for rel, stat in self._iter_files():
            docs.append(Document(
                path=rel,
                created_at=datetime.fromtimestamp(self._created_timestamp(rel, stat)).astimezone(),
                modified_at=datetime.fromtimestamp(stat.st_mtime).astimezone(),
            ))
        listed = {d.path for d in docs}
        self._first_seen = {p: t for p, t in self._first_seen.items() if p in listed}
        if self._first_seen != before:
            self._save_first_seen()
        return docs

    def _scan(self) -> dict[str, _FileState]:
        return {
            rel: _FileState((stat.st_dev, stat.st_ino), stat.st_mtime_ns)
            for rel, stat in self._iter_files()
        }

    def poll(self) -> list[VaultEvent]:
        """
        Report changes since the previous poll.

        The first call records a baseline and returns no events.
        Events are ordered: renames, deletes, creates, modifies. A file
        that keeps its identity under a new path is a rename even if a new
        file has since taken its old path; that new file is a create.
        """
        current = self._scan()
        previous = self._snapshot
        self._snapshot = current
        if previous is None:
            return []

        current_by_identity = {s.identity: p for p, s in sorted(current.items())}
        renames: dict[str, str] = {}
        taken: set[str] = set()
        for old_path in sorted(previous):
            identity = previous[old_path].identity
            new_path = current_by_identity.get(identity)
            if new_path is None or new_path == old_path or new_path in taken:
                continue
            if old_path in current and current[old_path].identity == identity:
                continue  # Still here: a hard link, not a move
            if new_path in previous and previous[new_path].identity == identity:
                continue
            renames[old_path] = new_path
            taken.add(new_path)

        deletes: list[VaultEvent] = [
            DocumentDeleted(p) for p in sorted(previous)
            if p not in current and p not in renames
        ]
        creates: list[VaultEvent] = [
            DocumentCreated(p) for p in sorted(current)
            if p not in taken and (p not in previous or p in renames)
        ]
        modifies: list[VaultEvent] = [
            DocumentModified(p) for p in sorted(current)
            if p in previous and p not in renames and p not in taken
            and current[p] != previous[p]
        ]
        ordered_renames = _order_renames(renames)

        if renames or deletes:
            self._track_moves(ordered_renames, deletes)

        events = [*ordered_renames, *deletes, *creates, *modifies]
        if events:
            logger.debug("Vault poll: %d events", len(events))
        return events

    def _track_moves(self, renames: list[DocumentRenamed], deletes: list[VaultEvent]) -> None:
        """Carry first-seen times along with moved notes."""
        moved = {
            e.old_path: self._first_seen.pop(e.old_path)
            for e in renames if e.old_path in self._first_seen
        }
        for e in renames:
            if e.old_path in moved:
                self._first_seen[e.new_path] = moved[e.old_path]
            else:
                self._first_seen.pop(e.new_path, None)
        for e in deletes:
            self._first_seen.pop(e.path, None)
        self._save_first_seen()
