"""
Shared pytest fixtures for daynotes tests.

Provides in-memory and failing blob stores so annotation tests never touch
the real store directory.
"""

import time
from datetime import datetime

import pytest

from daynotes.annotations import AnnotationStore
from daynotes.blob_store import MemoryBlobStore
from daynotes.types import Document


class FailingBlobStore(MemoryBlobStore):
    """Blob store whose saves raise while ``fail_saves`` is set."""

    def __init__(self, data=None):
        super().__init__(data)
        self.fail_saves = False
        self.save_attempts = 0

    def save(self, data):
        self.save_attempts += 1
        if self.fail_saves:
            raise OSError("disk full (simulated)")
        super().save(data)


def make_doc(path: str, created: str, modified: str | None = None) -> Document:
    """Document with naive (local) timestamps given as ISO strings."""
    created_at = datetime.fromisoformat(created)
    modified_at = datetime.fromisoformat(modified) if modified else created_at
    return Document(path=path, created_at=created_at, modified_at=modified_at)


@pytest.fixture
def blob():
    """Empty in-memory blob store."""
    return MemoryBlobStore()


@pytest.fixture
def failing_blob():
    """Blob store that can be switched to fail on save."""
    return FailingBlobStore()


@pytest.fixture
def store(blob):
    """AnnotationStore over an empty in-memory blob."""
    return AnnotationStore.load(blob)


@pytest.fixture
def vault_dir(tmp_path):
    """Empty vault directory."""
    d = tmp_path / "vault"
    d.mkdir()
    return d


@pytest.fixture
def store_dir(tmp_path, monkeypatch):
    """Store directory, also exported as DAYNOTES_STORE_PATH."""
    d = tmp_path / "store"
    monkeypatch.setenv("DAYNOTES_STORE_PATH", str(d))
    return d


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    """The make_doc helper, for tests that build document sets."""
    return make_doc


@pytest.fixture
def pacific_tz(monkeypatch):
    """Run with local time pinned to US Pacific (UTC-8 in January).

    A POSIX TZ rule, so no tz database is needed.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available on this platform")
    monkeypatch.setenv("TZ", "PST8PDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
