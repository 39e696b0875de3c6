"""
Data types for day-bucketed note activity.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import NamedTuple


@dataclass(frozen=True)
class Document:
    """
    A note as seen by the core.

    Owned by the external store; the core only reads it.

    Attributes:
        path: Vault-relative path, the document's current (mutable) identifier
        created_at: Creation instant, fixed once the document exists
        modified_at: Last modification instant
    """
    path: str
    created_at: datetime
    modified_at: datetime


class DayActivity(NamedTuple):
    """Documents created and updated on one local calendar day, newest first."""
    day: date
    created: list[Document]
    updated: list[Document]


def local_day(ts: datetime | date) -> date:
    """Local calendar day of a timestamp.

    Aware datetimes are converted to the local timezone first. Naive
    datetimes are taken to be local already. Plain dates pass through.
    """
    if not isinstance(ts, datetime):
        return ts
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def local_naive(ts: datetime) -> datetime:
    """Wall-clock local time of ts, without tzinfo.

    Same rule as local_day, so naive and aware timestamps compare on one clock.
    """
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


def today() -> date:
    """Current local calendar day."""
    return datetime.now().astimezone().date()


def parse_day(value: str) -> date:
    """
    Parse a day argument.

    Accepts:
    - ``today`` / ``yesterday`` (local)
    - ISO date: 2026-01-15
    - Date with slashes: 2026/01/15

    Raises:
        ValueError: If the value is not a recognizable day
    """
    text = value.strip().lower()
    if text == "today":
        return today()
    if text == "yesterday":
        return today() - timedelta(days=1)
    try:
        return date.fromisoformat(text.replace("/", "-"))
    except ValueError:
        raise ValueError(
            f"Invalid day: {value!r}. Use YYYY-MM-DD, 'today' or 'yesterday'"
        ) from None
