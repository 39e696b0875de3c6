"""
Daily activity coordinator.

Ties together a document source, the annotation store, and the day query:

- rename/delete events are reconciled into the annotation store
- every event, and every day change, re-runs the day query from a fresh
  document listing and hands the result to subscribers

Nothing is indexed incrementally. Each refresh rescans the full listing.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Optional

from .annotations import AnnotationStore
from .date_index import query_by_day
from .errors import PersistenceError
from .events import (
    DocumentCreated,
    DocumentDeleted,
    DocumentModified,
    DocumentRenamed,
    VaultEvent,
)
from .types import DayActivity, Document, local_day, today

logger = logging.getLogger(__name__)

Listener = Callable[[DayActivity], None]


class DailyActivity:
    """
    Event-driven view of one selected day, plus the color API.

    Events are expected one at a time, in the order the vault emits them.
    """

    def __init__(
        self,
        annotations: AnnotationStore,
        list_documents: Callable[[], Sequence[Document]],
        day: Optional[date] = None,
    ):
        """
        Args:
            annotations: Store holding the note colors
            list_documents: Returns the current document snapshot
            day: Initially selected day (default: today)
        """
        self.annotations = annotations
        self._list_documents = list_documents
        self._day = local_day(day) if day is not None else today()
        self._listeners: list[Listener] = []

    @property
    def day(self) -> date:
        """Currently selected day."""
        return self._day

    # -- Subscriptions --

    def subscribe(self, listener: Listener) -> None:
        """Call listener with every refreshed result."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- Events --

    def handle(self, event: VaultEvent) -> DayActivity:
        """
        Apply one vault event and refresh.

        Raises:
            PersistenceError: If reconciling a rename/delete could not be saved
        """
        try:
            if isinstance(event, DocumentRenamed):
                self.annotations.reconcile_rename(event.old_path, event.new_path)
            elif isinstance(event, DocumentDeleted):
                self.annotations.reconcile_delete(event.path)
            elif not isinstance(event, (DocumentCreated, DocumentModified)):
                raise TypeError(f"Unknown vault event: {event!r}")
        except PersistenceError as e:
            logger.error("Reconciling %r failed: %s", event, e)
            raise
        return self.refresh()

    def handle_all(self, events: Sequence[VaultEvent]) -> Optional[DayActivity]:
        """Apply events in order. Returns the last refresh, or None if there were none."""
        result = None
        for event in events:
            result = self.handle(event)
        return result

    # -- Day selection --

    def refresh(self) -> DayActivity:
        """Recompute the selected day from a fresh listing and notify subscribers."""
        result = self.query_by_day(self._day)
        for listener in list(self._listeners):
            listener(result)
        return result

    def set_day(self, day: date | datetime) -> DayActivity:
        """Select another day and refresh."""
        self._day = local_day(day)
        logger.debug("Day changed to %s", self._day)
        return self.refresh()

    def go_to_today(self) -> DayActivity:
        """Select today and refresh."""
        return self.set_day(today())

    # -- Interface for UI collaborators --

    def query_by_day(self, day: date | datetime) -> DayActivity:
        """Documents created and updated on day, newest first."""
        return query_by_day(self._list_documents(), day)

    def get_color(self, path: str) -> Optional[str]:
        return self.annotations.get(path)

    def set_color(self, path: str, color: str) -> None:
        self.annotations.set(path, color)

    def remove_color(self, path: str) -> None:
        self.annotations.remove(path)
