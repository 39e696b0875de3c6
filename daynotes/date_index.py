"""
Day-bucketed view of a document set.

A pure function over the current documents; nothing is cached between
calls. Callers re-run it after every vault change and every day change.
"""

from collections.abc import Iterable
from datetime import date, datetime

from .types import DayActivity, Document, local_day, local_naive


def is_same_day(ts: datetime, day: date | datetime) -> bool:
    """True if ts falls on the local calendar day of day."""
    return local_day(ts) == local_day(day)


def query_by_day(documents: Iterable[Document], day: date | datetime) -> DayActivity:
    """
    Partition documents into those created and those updated on day.

    A document created on day is listed as created even if it was also
    modified that day; it is never in both lists. Created documents are
    ordered newest ``created_at`` first, updated ones newest
    ``modified_at`` first. Equal timestamps keep their input order.

    Args:
        documents: Current document snapshot (not modified)
        day: Target day; a datetime selects its local day

    Returns:
        DayActivity with materialized lists
    """
    target = local_day(day)
    created: list[Document] = []
    updated: list[Document] = []

    for doc in documents:
        if local_day(doc.created_at) == target:
            created.append(doc)
        elif local_day(doc.modified_at) == target:
            updated.append(doc)

    # sorted() with reverse=True is still stable for equal keys
    created.sort(key=lambda d: local_naive(d.created_at), reverse=True)
    updated.sort(key=lambda d: local_naive(d.modified_at), reverse=True)
    return DayActivity(day=target, created=created, updated=updated)
