"""
MongoDB document store.

The store is created once by the process entry point and handed to the app;
handlers reach it through the ``get_store`` dependency.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import MongoClient, ReturnDocument

COLLECTIONS = {
    "quotes": "quotes",
    "jobs": "jobs",
    "linen_orders": "linen_orders",
}


def to_public(doc):
    if not doc:
        return doc
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    return d


def _object_id(doc_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


def _now() -> datetime:
    # BSON dates keep milliseconds only
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class MongoDocumentStore:
    def __init__(self, client: MongoClient, database_name: str):
        self.client = client
        self.db = client[database_name]

    def create_document(self, collection_name: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert ``data`` and return it as stored, with ``id`` and timestamps."""
        now = _now()
        doc = dict(data)
        doc["createdAt"] = now
        doc["updatedAt"] = now
        result = self.db[collection_name].insert_one(doc)
        doc["_id"] = result.inserted_id
        return to_public(doc)

    def get_document(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        oid = _object_id(doc_id)
        if oid is None:
            return None
        return to_public(self.db[collection_name].find_one({"_id": oid}))

    def update_document(self, collection_name: str, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """``$set`` dotted-path fields plus a fresh updatedAt; returns the new document."""
        oid = _object_id(doc_id)
        if oid is None:
            return None
        updates = dict(fields)
        updates["updatedAt"] = _now()
        doc = self.db[collection_name].find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return to_public(doc)

    def close(self) -> None:
        self.client.close()


def create_store(settings) -> MongoDocumentStore:
    # MongoClient connects lazily, so this does not block boot
    client = MongoClient(settings.DATABASE_URL, tz_aware=True)
    return MongoDocumentStore(client, settings.DATABASE_NAME)


def get_store(request: Request):
    return request.app.state.store
