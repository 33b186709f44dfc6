"""
Persistence strategies behind the Project and Application repositories.

A repository is built with exactly one strategy, chosen from settings:

- LocalListPersistence      - the whole ordered list lives in one local record;
                              every mutation rewrites it (immediate consistency)
- RemotePersistence         - one remote document per entity; the repository
                              re-reads the collection after each write
- RemotePersistence(live)   - same writes, but the local snapshot is replaced
                              only by the subscription feed (eventual consistency)
"""

import logging
from typing import Callable, List, Optional

from collabhub.core.config import StorageMode
from collabhub.db.local_store import LocalRecordStore
from collabhub.services.mongo_service import MongoDocumentCollection, Snapshot, Subscription

logger = logging.getLogger(__name__)


class LocalListPersistence:
    mode = StorageMode.local
    live = False

    def __init__(self, records: LocalRecordStore, key: str):
        self.records = records
        self.key = key

    def load(self) -> Snapshot:
        return self.records.read(self.key, default=[])

    def insert(self, doc: dict, snapshot_after: Snapshot) -> dict:
        """Persist the full list that already contains `doc`."""
        self.records.write(self.key, snapshot_after)
        return doc

    def patch(self, doc_id: str, fields: dict, snapshot_after: Snapshot) -> bool:
        self.records.write(self.key, snapshot_after)
        return True

    def subscribe(self, on_snapshot: Callable[[Snapshot], None]) -> Optional[Subscription]:
        return None


class RemotePersistence:
    def __init__(self, collection: MongoDocumentCollection, live: bool = False):
        self.collection = collection
        self.live = live
        self.mode = StorageMode.remote_live if live else StorageMode.remote

    def load(self) -> Snapshot:
        return self.collection.find()

    def insert(self, doc: dict, snapshot_after: Snapshot) -> dict:
        return self.collection.insert(doc)

    def patch(self, doc_id: str, fields: dict, snapshot_after: Snapshot) -> bool:
        return self.collection.patch(doc_id, fields)

    def subscribe(self, on_snapshot: Callable[[Snapshot], None]) -> Optional[Subscription]:
        if not self.live:
            return None
        return self.collection.subscribe(on_snapshot)


def build_persistence(mode: StorageMode, name: str, records: LocalRecordStore,
                      collection_factory: Callable[[str], MongoDocumentCollection] = MongoDocumentCollection):
    """Pick the strategy for one named collection ("projects" / "applications")."""
    if mode == StorageMode.local:
        return LocalListPersistence(records, name)
    return RemotePersistence(collection_factory(name), live=(mode == StorageMode.remote_live))


def decode_all(model, docs: List[dict]) -> list:
    """Rehydrate stored dicts, skipping (and logging) records that no longer validate."""
    items = []
    for doc in docs:
        try:
            items.append(model.from_record(doc))
        except ValueError as e:
            logger.warning("Skipping unreadable %s record %s: %s", model.__name__, doc.get("id"), e)
    return items
