"""MongoDocumentCollection against a mocked pymongo collection."""

import time
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from collabhub.core.errors import RemoteError
from collabhub.services.mongo_service import MongoDocumentCollection, serialize_doc, to_mongo_doc

STAMP = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def remote(collection):
    return MongoDocumentCollection("projects", collection=collection)


def test_id_mapping():
    assert serialize_doc({"_id": "p1", "title": "T"}) == {"id": "p1", "title": "T"}
    assert serialize_doc(None) is None
    assert to_mongo_doc({"id": "p1", "title": "T"}) == {"_id": "p1", "title": "T"}


def test_insert_lets_the_server_stamp_created_at(remote, collection):
    collection.find_one_and_update.return_value = {"_id": "p1", "title": "T", "createdAt": STAMP}

    stored = remote.insert({"id": "p1", "title": "T", "createdAt": "2000-01-01T00:00:00Z"})

    query, update = collection.find_one_and_update.call_args.args
    assert query == {"_id": "p1"}
    assert update == {"$setOnInsert": {"title": "T"}, "$currentDate": {"createdAt": True}}
    assert collection.find_one_and_update.call_args.kwargs == {
        "upsert": True, "return_document": ReturnDocument.AFTER,
    }
    assert stored == {"id": "p1", "title": "T", "createdAt": STAMP}


def test_find_orders_newest_first(remote, collection):
    collection.find.return_value.sort.return_value = [{"_id": "b"}, {"_id": "a"}]

    assert remote.find({"authorId": "2"}) == [{"id": "b"}, {"id": "a"}]
    collection.find.assert_called_once_with({"authorId": "2"})
    collection.find.return_value.sort.assert_called_once_with("createdAt", DESCENDING)


def test_patch_reports_whether_a_document_matched(remote, collection):
    collection.update_one.return_value.matched_count = 1
    assert remote.patch("a1", {"status": "accepted"}) is True
    collection.update_one.assert_called_once_with({"_id": "a1"}, {"$set": {"status": "accepted"}})

    collection.update_one.return_value.matched_count = 0
    assert remote.patch("missing", {"status": "accepted"}) is False


@pytest.mark.parametrize("method, args", [
    ("insert", ({"id": "p1"},)),
    ("find", ()),
    ("find_one", ("p1",)),
    ("patch", ("p1", {"status": "rejected"})),
])
def test_driver_failures_become_remote_errors(remote, collection, method, args):
    error = ServerSelectionTimeoutError("no servers")
    collection.find_one_and_update.side_effect = error
    collection.find.side_effect = error
    collection.find_one.side_effect = error
    collection.update_one.side_effect = error

    with pytest.raises(RemoteError) as info:
        getattr(remote, method)(*args)
    assert info.value.code == "REMOTE_ERROR"
    assert isinstance(info.value.__cause__, PyMongoError)


def test_subscribe_delivers_initial_snapshot_then_changes(remote, collection):
    stream = MagicMock()
    stream.alive = True
    changes = iter([{"operationType": "insert"}])
    stream.try_next.side_effect = lambda: next(changes, None)
    collection.watch.return_value.__enter__.return_value = stream
    collection.find.return_value.sort.return_value = [{"_id": "p1"}]

    snapshots = []
    subscription = remote.subscribe(snapshots.append)
    deadline = time.monotonic() + 2
    while len(snapshots) < 2 and time.monotonic() < deadline:
        time.sleep(0.01)
    subscription.stop()

    assert snapshots[:2] == [[{"id": "p1"}], [{"id": "p1"}]]
    assert subscription.error is None
    assert not subscription.active


def test_subscription_records_the_error_that_ended_it(remote, collection):
    collection.watch.side_effect = PyMongoError("change streams need a replica set")

    subscription = remote.subscribe(lambda docs: None)
    subscription._thread.join(2)

    assert isinstance(subscription.error, PyMongoError)
    assert not subscription.active
