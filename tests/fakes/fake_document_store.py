"""In-memory stand-in for the MongoDB-backed document collections."""

import copy
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from collabhub.core.errors import RemoteError


class FakeSubscription:
    def __init__(self, collection: "FakeDocumentCollection", callback: Callable):
        self.collection = collection
        self.callback = callback
        self.stopped = False

    @property
    def active(self) -> bool:
        return not self.stopped

    def stop(self, timeout: float = 5.0) -> None:
        self.stopped = True
        self.collection.subscribers.remove(self)


class FakeDocumentCollection:
    """
    Same surface as MongoDocumentCollection.

    Subscribers are not notified on write; call `deliver()` to push the
    current result set, which simulates feed latency.
    """

    def __init__(self, name: str, store: "FakeDocumentStore"):
        self.name = name
        self.store = store
        self.docs: Dict[str, dict] = {}
        self.subscribers: List[FakeSubscription] = []
        self.fail_writes = False
        self.fail_reads = False
        self.patches: List[tuple] = []

    def insert(self, doc: dict) -> dict:
        if self.fail_writes:
            raise RemoteError(f"Could not write to '{self.name}'")
        stored = copy.deepcopy(doc)
        stored["createdAt"] = self.store.server_time()
        with self.store.lock:
            self.docs[stored["id"]] = stored
        return copy.deepcopy(stored)

    def find(self, query: Optional[dict] = None) -> List[dict]:
        if self.fail_reads:
            raise RemoteError(f"Could not read '{self.name}'")
        with self.store.lock:
            docs = [copy.deepcopy(d) for d in self.docs.values()]
        if query:
            docs = [d for d in docs if all(d.get(k) == v for k, v in query.items())]
        return sorted(docs, key=lambda d: d["createdAt"], reverse=True)

    def find_one(self, doc_id: str) -> Optional[dict]:
        doc = self.docs.get(doc_id)
        return copy.deepcopy(doc) if doc else None

    def patch(self, doc_id: str, fields: dict) -> bool:
        if self.fail_writes:
            raise RemoteError(f"Could not update '{self.name}'")
        self.patches.append((doc_id, dict(fields)))
        with self.store.lock:
            if doc_id not in self.docs:
                return False
            self.docs[doc_id].update(fields)
        return True

    def subscribe(self, on_snapshot: Callable) -> FakeSubscription:
        subscription = FakeSubscription(self, on_snapshot)
        self.subscribers.append(subscription)
        on_snapshot(self.find())
        return subscription

    def deliver(self) -> None:
        snapshot = self.find()
        for subscription in list(self.subscribers):
            subscription.callback(copy.deepcopy(snapshot))


class FakeDocumentStore:
    """Shared 'server': one instance per test, many clients may point at it."""

    def __init__(self):
        self.lock = threading.RLock()
        self.collections: Dict[str, FakeDocumentCollection] = {}
        self._last = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def collection(self, name: str) -> FakeDocumentCollection:
        with self.lock:
            if name not in self.collections:
                self.collections[name] = FakeDocumentCollection(name, self)
            return self.collections[name]

    def server_time(self) -> datetime:
        # strictly increasing so ordering by createdAt is deterministic
        with self.lock:
            now = datetime.now(timezone.utc)
            self._last = max(now, self._last + timedelta(milliseconds=1))
            return self._last

    def deliver_all(self) -> None:
        for collection in list(self.collections.values()):
            collection.deliver()
