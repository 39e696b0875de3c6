"""Tests for durable blob storage (JSON file and in-memory)."""

import json

import pytest

from daynotes.annotations import AnnotationStore
from daynotes.blob_store import BlobStore, JsonFileBlobStore, MemoryBlobStore
from daynotes.errors import PersistenceError


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "store" / "data.json"


class TestJsonFileBlobStore:

    def test_satisfies_protocol(self, data_path):
        assert isinstance(JsonFileBlobStore(data_path), BlobStore)
        assert isinstance(MemoryBlobStore(), BlobStore)

    def test_missing_file_loads_none(self, data_path):
        assert JsonFileBlobStore(data_path).load() is None

    def test_save_creates_parent_and_file(self, data_path):
        JsonFileBlobStore(data_path).save({"noteColors": {"a.md": "#1"}})
        assert json.loads(data_path.read_text()) == {"noteColors": {"a.md": "#1"}}

    def test_save_leaves_no_temp_file(self, data_path):
        JsonFileBlobStore(data_path).save({"noteColors": {}})
        assert [p.name for p in data_path.parent.iterdir()] == ["data.json"]

    def test_malformed_json_loads_none(self, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text("{not json")
        assert JsonFileBlobStore(data_path).load() is None

    def test_non_utf8_bytes_load_none(self, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_bytes(b'{"noteColors": {"\xff": "#1"}}')
        assert JsonFileBlobStore(data_path).load() is None

    def test_non_object_loads_none(self, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text("[1, 2, 3]")
        assert JsonFileBlobStore(data_path).load() is None

    def test_non_ascii_paths_round_trip(self, data_path):
        blob = JsonFileBlobStore(data_path)
        blob.save({"noteColors": {"Заметки/день.md": "#ff0000"}})
        assert blob.load() == {"noteColors": {"Заметки/день.md": "#ff0000"}}

    def test_save_failure_raises_oserror(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        with pytest.raises(OSError):
            JsonFileBlobStore(blocker / "data.json").save({"noteColors": {}})


class TestMemoryBlobStore:

    def test_save_copies(self):
        blob = MemoryBlobStore()
        data = {"noteColors": {"a.md": "#1"}}
        blob.save(data)
        data["noteColors"]["b.md"] = "#2"
        assert blob.load() == {"noteColors": {"a.md": "#1"}}

    def test_counts_saves(self):
        blob = MemoryBlobStore()
        blob.save({})
        blob.save({})
        assert blob.saves == 2


class TestAnnotationStoreOnDisk:

    def test_survives_restart(self, data_path):
        first = AnnotationStore.load(JsonFileBlobStore(data_path))
        first.set("a.md", "#1")
        first.reconcile_rename("a.md", "b.md")

        second = AnnotationStore.load(JsonFileBlobStore(data_path))
        assert second.colors() == {"b.md": "#1"}

    def test_corrupt_file_starts_empty(self, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text("garbage")
        store = AnnotationStore.load(JsonFileBlobStore(data_path))
        assert store.colors() == {}

    def test_sibling_keys_preserved_on_disk(self, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text(json.dumps({"noteColors": {}, "settings": {"language": "ru"}}))
        store = AnnotationStore.load(JsonFileBlobStore(data_path))
        store.set("a.md", "#1")
        on_disk = json.loads(data_path.read_text())
        assert on_disk["settings"] == {"language": "ru"}

    def test_unwritable_location_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = AnnotationStore.load(JsonFileBlobStore(blocker / "data.json"))
        with pytest.raises(PersistenceError):
            store.set("a.md", "#1")
        assert store.get("a.md") == "#1"

    def test_non_utf8_file_starts_empty_and_is_replaced(self, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_bytes(b"\xfe\xff\x00garbage")
        store = AnnotationStore.load(JsonFileBlobStore(data_path))
        assert store.colors() == {}
        store.set("a.md", "#1")
        assert json.loads(data_path.read_text(encoding="utf-8")) == {"noteColors": {"a.md": "#1"}}
