"""
Base for repositories whose in-memory snapshot is kept in sync with a
persistence strategy.

Rules:
- local: write the full list first, swap the snapshot only after the write succeeded
- remote: every read is a one-shot query against the shared collection, and
  each write is followed by a re-read, so other clients' writes are visible
- remote_live: write the document; only the subscription feed replaces the snapshot
A failed write raises and leaves the snapshot untouched. A failed read in
remote mode raises RemoteError; it does not serve the previous snapshot.
"""

import logging
import threading
from typing import Generic, List, Optional, TypeVar

from bson import ObjectId

from collabhub.core.config import StorageMode
from collabhub.core.errors import CollabError
from collabhub.services.mongo_service import Snapshot, Subscription
from collabhub.services.persistence import decode_all

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_id() -> str:
    return str(ObjectId())


class SyncedRepository(Generic[T]):
    model = None
    prepend = True  # where a locally created entity goes in storage order

    def __init__(self, persistence):
        self.persistence = persistence
        self._lock = threading.RLock()
        self._items: List[T] = decode_all(self.model, persistence.load())
        self._subscription: Optional[Subscription] = None

    # ---------------------------------------------------------
    # Snapshot access
    # ---------------------------------------------------------

    @property
    def live(self) -> bool:
        return self.persistence.live

    @property
    def reads_through(self) -> bool:
        """True when every read re-queries the remote store (remote, non-live)."""
        return self.persistence.mode == StorageMode.remote

    def snapshot(self) -> List[T]:
        if self.reads_through:
            self.refresh()
        with self._lock:
            return list(self._items)

    def refresh(self) -> None:
        """Re-read the whole collection from storage."""
        docs = self.persistence.load()
        self._replace(docs)

    def _replace(self, docs: Snapshot) -> None:
        items = decode_all(self.model, docs)
        with self._lock:
            self._items = items

    # ---------------------------------------------------------
    # Live feed
    # ---------------------------------------------------------

    def start(self) -> None:
        if self._subscription is None:
            self._subscription = self.persistence.subscribe(self._on_feed)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.stop()
            self._subscription = None

    def _on_feed(self, docs: Snapshot) -> None:
        logger.debug("%s feed delivered %d documents", self.model.__name__, len(docs))
        self._replace(docs)

    # ---------------------------------------------------------
    # Write path
    # ---------------------------------------------------------

    def _commit_insert(self, entity: T) -> T:
        with self._lock:
            doc = entity.to_record()
            current = [item.to_record() for item in self._items]
            after = [doc] + current if self.prepend else current + [doc]
            stored = self.persistence.insert(doc, after)
            created = self.model.from_record(stored)
            if self.persistence.live:
                return created
            if self.persistence.mode == StorageMode.local:
                self._items = ([created] + self._items) if self.prepend else (self._items + [created])
                return created
        self._refresh_after_write()
        return created

    def _commit_patch(self, entity_id: str, fields: dict, updated: T) -> bool:
        with self._lock:
            after = [
                (updated if item.id == entity_id else item).to_record()
                for item in self._items
            ]
            matched = self.persistence.patch(entity_id, fields, after)
            if self.persistence.live:
                return matched
            if self.persistence.mode == StorageMode.local:
                self._items = [updated if item.id == entity_id else item for item in self._items]
                return matched
        self._refresh_after_write()
        return matched

    def _refresh_after_write(self) -> None:
        # The write was acknowledged; a failed re-read only leaves the view stale.
        try:
            self.refresh()
        except CollabError as e:
            logger.warning("%s refresh after write failed, view is stale: %s", self.model.__name__, e)
