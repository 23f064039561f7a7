# Role: MongoDB backend. One document per session in a single collection, keyed by the client-side `id`
# (unique index). Mongo's own _id is never exposed.

from __future__ import annotations

import logging
from datetime import timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from backend.core.errors import StoreError
from backend.models.session import ChatSession, SessionSummary

logger = logging.getLogger(__name__)

_SUMMARY_PROJECTION = {"_id": 0, "id": 1, "title": 1, "date": 1}


def _as_utc(doc: Dict[str, Any]) -> Dict[str, Any]:
    # Key line: naive datetimes coming back from the driver are UTC.
    date = doc.get("date")
    if date is not None and getattr(date, "tzinfo", None) is None:
        doc["date"] = date.replace(tzinfo=timezone.utc)
    return doc


class MongoSessionStore:
    def __init__(self, collection: Collection, client: Optional[MongoClient] = None) -> None:
        self.collection = collection
        self._client = client
        try:
            self.collection.create_index([("id", ASCENDING)], unique=True)
        except PyMongoError as e:
            # The store stays usable; the index is only a uniqueness guard.
            logger.warning("Could not ensure unique index on %s.id: %s", collection.name, e)

    @classmethod
    def from_uri(cls, uri: str, db_name: str = "chat_history", collection_name: str = "sessions") -> "MongoSessionStore":
        client: MongoClient = MongoClient(uri, tz_aware=True, serverSelectionTimeoutMS=5000)
        logger.info("Using MongoDB session store (db=%s, collection=%s)", db_name, collection_name)
        return cls(client[db_name][collection_name], client=client)

    def list_sessions(self) -> List[SessionSummary]:
        try:
            docs = list(self.collection.find({}, _SUMMARY_PROJECTION).sort("date", DESCENDING))
        except PyMongoError as e:
            raise StoreError(f"Failed to fetch sessions: {e}") from e
        try:
            return [SessionSummary.model_validate(_as_utc(d)) for d in docs]
        except ValidationError as e:
            raise StoreError(f"Malformed session document: {e}") from e

    def get(self, session_id: str) -> Optional[ChatSession]:
        try:
            doc = self.collection.find_one({"id": session_id}, {"_id": 0})
        except PyMongoError as e:
            raise StoreError(f"Failed to fetch session {session_id}: {e}") from e
        if not doc:
            return None
        try:
            return ChatSession.model_validate(_as_utc(doc))
        except ValidationError as e:
            raise StoreError(f"Malformed session document {session_id}: {e}") from e

    def save(self, session: ChatSession) -> None:
        doc = session.model_dump(mode="python")
        try:
            self.collection.replace_one({"id": session.id}, doc, upsert=True)
        except PyMongoError as e:
            raise StoreError(f"Failed to save session {session.id}: {e}") from e

    def delete(self, session_id: str) -> bool:
        try:
            result = self.collection.delete_one({"id": session_id})
        except PyMongoError as e:
            raise StoreError(f"Failed to delete session {session_id}: {e}") from e
        return result.deleted_count > 0

    def ping(self) -> bool:
        if self._client is None:
            return True
        try:
            self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
