# grain/storage/snapshots.py
from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from grain.config import Settings, load_settings

logger = logging.getLogger(__name__)


class SnapshotStore(ABC):
    """Key-value home for the flat onboarding record."""

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def save(self, key: str, record: Dict[str, Any]) -> None:
        ...


class FileSnapshotStore(SnapshotStore):
    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError:
                logger.warning("Snapshot file %s is not valid JSON; ignoring it", self.path)
                return {}
        return data if isinstance(data, dict) else {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._read_all().get(key)
        return record if isinstance(record, dict) else None

    def save(self, key: str, record: Dict[str, Any]) -> None:
        data = self._read_all()
        data[key] = record

        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".snapshots-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


def _ensure_firebase_db(cred_path: str):
    # Safe to call multiple times
    if not firebase_admin._apps:
        if not os.path.exists(cred_path):
            raise RuntimeError(
                f"Firebase admin credentials not found at '{cred_path}'. "
                f"Set FIREBASE_ADMIN_CREDENTIALS or place firebase-admin.json in backend root."
            )
        firebase_admin.initialize_app(credentials.Certificate(cred_path))
    return firestore.client()


class FirestoreSnapshotStore(SnapshotStore):
    """One document per snapshot key inside a single collection."""

    def __init__(self, collection: str, db: Any = None, cred_path: str = "firebase-admin.json"):
        self.collection = collection
        self._db = db
        self._cred_path = cred_path

    @property
    def db(self):
        if self._db is None:
            self._db = _ensure_firebase_db(self._cred_path)
        return self._db

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        snap = self.db.collection(self.collection).document(key).get()
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    def save(self, key: str, record: Dict[str, Any]) -> None:
        self.db.collection(self.collection).document(key).set(record)


def get_snapshot_store(settings: Optional[Settings] = None) -> SnapshotStore:
    settings = settings or load_settings()
    if settings.snapshot_backend == "firestore":
        return FirestoreSnapshotStore(
            settings.snapshot_collection,
            cred_path=settings.firebase_credentials,
        )
    if settings.snapshot_backend != "file":
        logger.warning("Unknown snapshot backend %r; using file store", settings.snapshot_backend)
    return FileSnapshotStore(settings.snapshot_path)
