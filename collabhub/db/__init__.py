"""
Database module - durable local records and MongoDB connections.
"""
from collabhub.db.local_store import LocalRecordStore, get_record_store, test_local_connection
from collabhub.db.mongodb import get_mongo_db, test_mongo_connection

__all__ = [
    "LocalRecordStore",
    "get_record_store",
    "test_local_connection",
    "get_mongo_db",
    "test_mongo_connection"
]
