import json

import pytest

from grain.config import Settings
from grain.storage.snapshots import (
    FileSnapshotStore,
    FirestoreSnapshotStore,
    SnapshotStore,
    get_snapshot_store,
)


class FakeSnap:
    def __init__(self, data):
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return self._data


class FakeDoc:
    def __init__(self, docs, key):
        self._docs = docs
        self._key = key

    def get(self):
        return FakeSnap(self._docs.get(self._key))

    def set(self, data):
        self._docs[self._key] = data


class FakeCollection:
    def __init__(self, docs):
        self._docs = docs

    def document(self, key):
        return FakeDoc(self._docs, key)


class FakeDB:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))


def test_file_store_missing_file(tmp_path):
    store = FileSnapshotStore(str(tmp_path / "none.json"))
    assert store.load("grain.seed.v1") is None


def test_file_store_save_and_load(tmp_path):
    path = tmp_path / "nested" / "snapshots.json"
    store = FileSnapshotStore(str(path))
    store.save("grain.seed.v1", {"income": 5000})
    store.save("other", {"income": 1})
    assert store.load("grain.seed.v1") == {"income": 5000}
    assert json.loads(path.read_text(encoding="utf-8"))["other"] == {"income": 1}


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "snapshots.json"
    path.write_text("{not json", encoding="utf-8")
    store = FileSnapshotStore(str(path))
    assert store.load("grain.seed.v1") is None
    store.save("grain.seed.v1", {"rent": 1500})
    assert store.load("grain.seed.v1") == {"rent": 1500}


def test_file_store_non_dict_entry(tmp_path):
    path = tmp_path / "snapshots.json"
    path.write_text(json.dumps({"grain.seed.v1": [1, 2]}), encoding="utf-8")
    assert FileSnapshotStore(str(path)).load("grain.seed.v1") is None


def test_firestore_store_uses_one_document_per_key():
    db = FakeDB()
    store = FirestoreSnapshotStore("grainSnapshots", db=db)
    assert store.load("grain.seed.v1") is None
    store.save("grain.seed.v1", {"income": 4200})
    assert store.load("grain.seed.v1") == {"income": 4200}
    assert db.collections["grainSnapshots"] == {"grain.seed.v1": {"income": 4200}}


def test_firestore_store_missing_credentials(tmp_path):
    store = FirestoreSnapshotStore("grainSnapshots", cred_path=str(tmp_path / "missing.json"))
    with pytest.raises(RuntimeError, match="credentials not found"):
        store.load("grain.seed.v1")


def test_store_factory(tmp_path):
    file_store = get_snapshot_store(Settings(snapshot_path=str(tmp_path / "s.json")))
    assert isinstance(file_store, FileSnapshotStore)
    fs_store = get_snapshot_store(Settings(snapshot_backend="firestore", snapshot_collection="c"))
    assert isinstance(fs_store, FirestoreSnapshotStore)
    assert fs_store.collection == "c"
    fallback = get_snapshot_store(Settings(snapshot_backend="redis", snapshot_path=str(tmp_path / "s.json")))
    assert isinstance(fallback, FileSnapshotStore)


def test_snapshot_store_is_abstract():
    with pytest.raises(TypeError):
        SnapshotStore()

    class LoadOnly(SnapshotStore):
        def load(self, key):
            return None

    with pytest.raises(TypeError):
        LoadOnly()
