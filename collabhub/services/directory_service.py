"""
Directory Service - the roster of known user profiles.

Used for author/applicant lookups, login by email, and the discover page
search. The roster is kept in the `users` local record so signups survive
a restart; on first run it is seeded with the demo profiles.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from collabhub.db.local_store import LocalRecordStore, RECORDS
from collabhub.schemas.schemas import Preference, User, UserLinks, UserPreferences, UserRole
from collabhub.services.persistence import decode_all

logger = logging.getLogger(__name__)


def demo_users() -> List[User]:
    now = datetime.now(timezone.utc)
    return [
        User(
            id="1",
            email="alice@stanford.edu",
            name="Alice Chen",
            role=UserRole.student,
            bio="PhD student in AI/ML at Stanford, passionate about computer vision and robotics.",
            interests=["AI", "Machine Learning", "Computer Vision", "Robotics"],
            links=UserLinks(linkedin="https://linkedin.com/in/alicechen", github="https://github.com/alicechen"),
            preferences=UserPreferences(want_to_hire=False, want_to_join=True, want_to_collaborate=True,
                                        remote=True, on_site=True),
            created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
            last_active=now,
        ),
        User(
            id="2",
            email="bob@biotech.com",
            name="Bob Rodriguez",
            role=UserRole.founder,
            bio="Serial entrepreneur in biotech. Looking for technical co-founders and research partners.",
            interests=["Biotech", "Drug Discovery", "Genomics", "Healthcare"],
            links=UserLinks(linkedin="https://linkedin.com/in/bobrodriguez", website="https://biotechventures.com"),
            preferences=UserPreferences(want_to_hire=True, want_to_join=False, want_to_collaborate=True,
                                        remote=True, on_site=False),
            created_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
            last_active=now,
        ),
        User(
            id="3",
            email="carol@mit.edu",
            name="Dr. Carol Zhang",
            role=UserRole.professor,
            bio="Professor of Quantum Computing at MIT. Leading research in quantum algorithms and error correction.",
            interests=["Quantum Computing", "Quantum Algorithms", "Physics", "Mathematics"],
            links=UserLinks(website="https://mit.edu/~czhang", linkedin="https://linkedin.com/in/carolzhang"),
            preferences=UserPreferences(want_to_hire=True, want_to_join=False, want_to_collaborate=True,
                                        remote=False, on_site=True),
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            last_active=now,
        ),
    ]


class DirectoryService:
    """
    Holds every known User. Writes go to the `users` record first;
    the in-memory roster changes only after the write succeeded.
    """

    def __init__(self, records: LocalRecordStore, seed: bool = True):
        self.records = records
        self._lock = threading.RLock()
        stored = records.read(RECORDS["users"])
        if stored is None:
            self._users: List[User] = demo_users() if seed else []
            if self._users:
                self._persist(self._users)
                logger.info("Seeded directory with %d demo profiles", len(self._users))
        else:
            self._users = decode_all(User, stored)

    def _persist(self, users: List[User]) -> None:
        self.records.write(RECORDS["users"], [u.to_record() for u in users])

    # ---------------------------------------------------------
    # Lookups
    # ---------------------------------------------------------

    def all(self) -> List[User]:
        with self._lock:
            return list(self._users)

    def get(self, user_id: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users if u.id == user_id), None)

    def find_by_email(self, email: str) -> Optional[User]:
        """Exact match, as typed."""
        with self._lock:
            return next((u for u in self._users if u.email == email), None)

    # ---------------------------------------------------------
    # Mutations
    # ---------------------------------------------------------

    def add(self, user: User) -> User:
        with self._lock:
            users = self._users + [user]
            self._persist(users)
            self._users = users
        return user

    def discard(self, user_id: str) -> None:
        """Undo an add whose follow-up writes failed."""
        with self._lock:
            users = [u for u in self._users if u.id != user_id]
            if len(users) != len(self._users):
                self._persist(users)
                self._users = users

    def replace(self, user: User) -> User:
        """Swap the stored record with the same id (no-op if the id is unknown)."""
        with self._lock:
            users = [user if u.id == user.id else u for u in self._users]
            self._persist(users)
            self._users = users
        return user

    # ---------------------------------------------------------
    # Discover
    # ---------------------------------------------------------

    def search(
        self,
        term: str = "",
        role: Optional[UserRole] = None,
        interests: Iterable[str] = (),
        preference: Optional[Preference] = None,
        exclude_user_id: Optional[str] = None,
    ) -> List[User]:
        """
        Filter the roster the way the discover page does:
        - term matches name, bio or any interest (case-insensitive substring)
        - role must match exactly
        - any one of the selected interests is enough
        - the selected preference flag must be set
        """
        needle = (term or "").strip().lower()
        wanted = set(interests or [])
        results = []
        for user in self.all():
            if exclude_user_id and user.id == exclude_user_id:
                continue
            if needle and not (
                needle in user.name.lower()
                or needle in user.bio.lower()
                or any(needle in i.lower() for i in user.interests)
            ):
                continue
            if role and user.role != role:
                continue
            if wanted and not wanted.intersection(user.interests):
                continue
            if preference and not user.preferences.is_set(preference):
                continue
            results.append(user)
        return results

    def all_interests(self) -> List[str]:
        return sorted({i for u in self.all() for i in u.interests})
