"""
JSON-file backed stand-in for the Firestore client.

Used when USE_MOCK_DB is set (local development, tests). Implements only the
part of the client API the app uses:

    db.collection(name).document(doc_id).create(data)
    db.collection(name).document(doc_id).set(data)
    db.collection(name).document(doc_id).get()
    db.collection(name).stream()
    db.collections()

Duplicate create() raises google.api_core AlreadyExists, same as Firestore.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from google.api_core.exceptions import AlreadyExists

logger = logging.getLogger(__name__)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class MockDocumentSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict]:
        return copy.deepcopy(self._data)


class MockDocumentReference:
    def __init__(self, db: "MockFirestore", collection: str, doc_id: str):
        self._db = db
        self._collection = collection
        self.id = doc_id

    def create(self, document_data: Dict) -> None:
        with self._db.lock:
            docs = self._db.data.setdefault(self._collection, {})
            if self.id in docs:
                raise AlreadyExists(f"Document already exists: {self._collection}/{self.id}")
            docs[self.id] = self._db.normalize(document_data)
            self._db.flush()

    def set(self, document_data: Dict) -> None:
        with self._db.lock:
            self._db.data.setdefault(self._collection, {})[self.id] = self._db.normalize(document_data)
            self._db.flush()

    def get(self) -> MockDocumentSnapshot:
        with self._db.lock:
            return MockDocumentSnapshot(self.id, self._db.data.get(self._collection, {}).get(self.id))


class MockCollectionReference:
    def __init__(self, db: "MockFirestore", name: str):
        self._db = db
        self.id = name

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._db, self.id, document_id or uuid.uuid4().hex[:20])

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._db.lock:
            docs = list(self._db.data.get(self.id, {}).items())
        for doc_id, data in docs:
            yield MockDocumentSnapshot(doc_id, data)


class MockFirestore:
    """In-process document store persisted to a single JSON file."""

    def __init__(self, path: str):
        self.path = path
        self.lock = threading.RLock()
        self.data: Dict[str, Dict[str, Dict]] = {}
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self.data = json.load(f)
            logger.info(f"[MOCK DB] Loaded {path}")

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self.lock:
            return [MockCollectionReference(self, name) for name in self.data]

    def normalize(self, document_data: Dict) -> Dict:
        # Round-trip through JSON so stored values look like what a reload returns
        return json.loads(json.dumps(document_data, default=_encode))

    def flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)
        os.replace(tmp_path, self.path)

    def close(self) -> None:
        with self.lock:
            self.flush()


def get_mock_db(path: str) -> MockFirestore:
    return MockFirestore(path)
