"""
Durable Local Records - named JSON records in a SQL table.

Each record is one row in `local_records`:
- projects      - ordered list of Project records
- applications  - ordered list of Application records
- users         - directory roster
- credentials   - user id -> password hash
- currentUser   - serialized active session user (one row per session)

Any SQLAlchemy URL works; SQLite file by default.
"""

import json
import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from collabhub.core.config import get_settings
from collabhub.core.errors import StorageError

logger = logging.getLogger(__name__)

# Record name constants (avoid typos)
RECORDS = {
    "projects": "projects",
    "applications": "applications",
    "users": "users",
    "credentials": "credentials",
    "current_user": "currentUser",
}

_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS local_records (
        record_key VARCHAR(128) PRIMARY KEY,
        payload TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

_UPSERT = """
    INSERT INTO local_records (record_key, payload, updated_at)
    VALUES (:key, :payload, CURRENT_TIMESTAMP)
    ON CONFLICT (record_key) DO UPDATE
    SET payload = EXCLUDED.payload, updated_at = CURRENT_TIMESTAMP
"""


class LocalRecordStore:
    """
    Key -> JSON record store.
    Reads and writes are synchronous; a failed write raises StorageError
    and leaves the previous record in place.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine(url, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.init_schema()

    @contextmanager
    def session(self):
        """
        Context manager for database sessions.
        Usage:
            with store.session() as db:
                db.execute(text("SELECT 1"))
        """
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def init_schema(self) -> None:
        try:
            with self.session() as db:
                db.execute(text(_CREATE_TABLE))
        except SQLAlchemyError as e:
            logger.error("Could not create local_records table at %s: %s", self.url, e)
            raise StorageError("Local store unavailable", context={"url": self.url}) from e

    def read(self, key: str, default: Any = None) -> Any:
        """Return the decoded record, or `default` when it does not exist."""
        try:
            with self.session() as db:
                row = db.execute(
                    text("SELECT payload FROM local_records WHERE record_key = :key"),
                    {"key": key}
                ).fetchone()
        except SQLAlchemyError as e:
            logger.error("Failed to read record %r: %s", key, e)
            raise StorageError(f"Failed to read record '{key}'") from e
        if row is None:
            return default
        return json.loads(row[0])

    def write(self, key: str, value: Any) -> None:
        """Replace the whole record. `value` must be JSON-serializable."""
        payload = json.dumps(value)
        try:
            with self.session() as db:
                db.execute(text(_UPSERT), {"key": key, "payload": payload})
        except SQLAlchemyError as e:
            logger.error("Failed to write record %r: %s", key, e)
            raise StorageError(f"Failed to write record '{key}'") from e

    def remove(self, key: str) -> None:
        try:
            with self.session() as db:
                db.execute(text("DELETE FROM local_records WHERE record_key = :key"), {"key": key})
        except SQLAlchemyError as e:
            logger.error("Failed to remove record %r: %s", key, e)
            raise StorageError(f"Failed to remove record '{key}'") from e

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.session() as db:
                return db.execute(text("SELECT 1")).fetchone()[0] == 1
        except SQLAlchemyError as e:
            logger.warning("Local store connection failed: %s", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()


@lru_cache()
def get_record_store() -> LocalRecordStore:
    """Get or create the configured record store (singleton pattern)"""
    settings = get_settings()
    return LocalRecordStore(settings.local_store_url, echo=settings.debug)


def test_local_connection() -> bool:
    return get_record_store().ping()


def current_user_key(session_id: Optional[str]) -> str:
    """Record key for a session's active user; the default session uses the bare name."""
    if not session_id or session_id == "default":
        return RECORDS["current_user"]
    return f"{RECORDS['current_user']}:{session_id}"
