import copy
import uuid
from collections import defaultdict
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from settings import Settings


def _now():
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class InMemoryDocumentStore:
    """Same interface as MongoDocumentStore, backed by dicts."""

    def __init__(self):
        self.collections = defaultdict(dict)
        self.fail = False
        self.closed = False

    def _check(self):
        if self.fail:
            raise RuntimeError("connection refused: mongo://secret-host")

    def create_document(self, collection_name, data):
        self._check()
        doc_id = uuid.uuid4().hex
        now = _now()
        doc = copy.deepcopy(data)
        doc["createdAt"] = now
        doc["updatedAt"] = now
        self.collections[collection_name][doc_id] = doc
        return {"id": doc_id, **copy.deepcopy(doc)}

    def get_document(self, collection_name, doc_id):
        self._check()
        doc = self.collections[collection_name].get(doc_id)
        if doc is None:
            return None
        return {"id": doc_id, **copy.deepcopy(doc)}

    def update_document(self, collection_name, doc_id, fields):
        self._check()
        doc = self.collections[collection_name].get(doc_id)
        if doc is None:
            return None
        for path, value in fields.items():
            *parents, leaf = path.split(".")
            target = doc
            for part in parents:
                target = target.setdefault(part, {})
            target[leaf] = value
        doc["updatedAt"] = _now()
        return {"id": doc_id, **copy.deepcopy(doc)}

    def close(self):
        self.closed = True


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(store):
    app = create_app(store=store, settings=Settings(APP_ENV="test"))
    return TestClient(app)


@pytest.fixture
def quote_payload():
    return {
        "hostName": "Alex",
        "email": "a@b.com",
        "property": {"address": "1 Main St", "bedrooms": 2, "bathrooms": 1},
    }


@pytest.fixture
def job_payload():
    return {
        "schedule": {"start": "2025-03-01T10:00:00+11:00", "end": "2025-03-01T13:00:00+11:00"},
        "property": {"address": "1 Main St", "bedrooms": 2, "bathrooms": 1},
    }


@pytest.fixture
def linen_payload():
    return {
        "property": {"address": "1 Main St"},
        "items": {"queenSets": 2, "towelSets": 4},
        "pickupAt": "2025-03-01T09:00:00+11:00",
        "returnAt": "2025-03-02T09:00:00+11:00",
    }
