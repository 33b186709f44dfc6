"""
MongoDB Service - document operations for the shared collections.

The repositories only need four things from the remote store:
1. insert     - new document, createdAt stamped by the server
2. find       - one-shot ordered query (createdAt descending)
3. patch      - partial field update ($set)
4. subscribe  - standing feed delivering the full ordered result set on every change

Documents use `_id` for the entity id; everything else is stored as-is.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from collabhub.core.errors import RemoteError
from collabhub.db.mongodb import get_collection

logger = logging.getLogger(__name__)

Snapshot = List[Dict[str, Any]]


# ============================================================
# HELPER: _id <-> id
# ============================================================

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to an entity dict (`_id` -> `id`)."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> Snapshot:
    return [serialize_doc(doc) for doc in docs]


def to_mongo_doc(entity: dict) -> dict:
    doc = dict(entity)
    doc["_id"] = doc.pop("id")
    return doc


# ============================================================
# SUBSCRIPTION
# ============================================================

class Subscription:
    """
    Handle for a running change-stream feed.
    `error` holds the exception that ended the feed, if any.
    """

    def __init__(self, name: str):
        self.name = name
        self.error: Optional[BaseException] = None
        self._stop = threading.Event()
        self._stream = None
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        stream = self._stream
        if stream is not None:
            try:
                stream.close()
            except PyMongoError as e:
                logger.debug("Closing change stream for %s raised: %s", self.name, e)
        if self._thread is not None:
            self._thread.join(timeout)


# ============================================================
# DOCUMENT COLLECTION
# ============================================================

class MongoDocumentCollection:
    """
    One remote collection (projects or applications).
    Every pymongo failure is surfaced as RemoteError.
    """

    def __init__(self, name: str, collection: Optional[Collection] = None):
        self.name = name
        self.collection: Collection = collection if collection is not None else get_collection(name)

    def insert(self, doc: dict) -> dict:
        """
        Insert a new document and return it as stored.
        createdAt is stamped by the server ($currentDate), overriding any client value.
        """
        body = to_mongo_doc(doc)
        doc_id = body.pop("_id")
        body.pop("createdAt", None)
        try:
            stored = self.collection.find_one_and_update(
                {"_id": doc_id},
                {"$setOnInsert": body, "$currentDate": {"createdAt": True}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Insert into %s failed: %s", self.name, e)
            raise RemoteError(f"Could not write to '{self.name}'", context={"id": doc_id}) from e
        return serialize_doc(stored)

    def find(self, query: Optional[dict] = None) -> Snapshot:
        """One-shot read, newest first."""
        try:
            cursor = self.collection.find(query or {}).sort("createdAt", DESCENDING)
            return serialize_docs(cursor)
        except PyMongoError as e:
            logger.error("Query on %s failed: %s", self.name, e)
            raise RemoteError(f"Could not read '{self.name}'") from e

    def find_one(self, doc_id: str) -> Optional[dict]:
        try:
            return serialize_doc(self.collection.find_one({"_id": doc_id}))
        except PyMongoError as e:
            logger.error("Lookup in %s failed: %s", self.name, e)
            raise RemoteError(f"Could not read '{self.name}'") from e

    def patch(self, doc_id: str, fields: dict) -> bool:
        """Partial update. Returns False when no document has that id."""
        try:
            result = self.collection.update_one({"_id": doc_id}, {"$set": fields})
        except PyMongoError as e:
            logger.error("Patch on %s/%s failed: %s", self.name, doc_id, e)
            raise RemoteError(f"Could not update '{self.name}'", context={"id": doc_id}) from e
        return result.matched_count > 0

    def subscribe(self, on_snapshot: Callable[[Snapshot], None]) -> Subscription:
        """
        Start a background feed. The current result set is delivered once
        right away, then again after every change on the collection.
        """
        subscription = Subscription(self.name)

        def run():
            try:
                with self.collection.watch() as stream:
                    subscription._stream = stream
                    on_snapshot(self.find())
                    while not subscription._stop.is_set() and stream.alive:
                        change = stream.try_next()
                        if change is None:
                            subscription._stop.wait(0.05)
                            continue
                        logger.debug("%s change: %s", self.name, change.get("operationType"))
                        on_snapshot(self.find())
            except (PyMongoError, RemoteError) as e:
                if not subscription._stop.is_set():
                    subscription.error = e
                    logger.error("Live feed for %s stopped: %s", self.name, e)

        thread = threading.Thread(target=run, name=f"feed-{self.name}", daemon=True)
        subscription._thread = thread
        thread.start()
        return subscription
