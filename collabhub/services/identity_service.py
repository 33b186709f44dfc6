"""
Identity Service - login, signup, logout and profile updates.

The active user is held by an explicit Session object that callers pass
into every operation. Each session's user is persisted under its own
`currentUser` record so it survives a restart.

Credentials are a placeholder scheme: a passlib hash per account, with the
configured placeholder password for accounts that never set one.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from collabhub.core.security import hash_password, verify_password
from collabhub.core.errors import AuthenticationError, CollabError, ValidationError, require_text
from collabhub.db.local_store import LocalRecordStore, RECORDS, current_user_key
from collabhub.schemas.schemas import (
    ProfileUpdate, SignupInput, User, UserLinks, UserPreferences
)
from collabhub.services.directory_service import DirectoryService
from collabhub.services.repository import new_id

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"

# value an optional profile field takes when an update sets it to None
_CLEARED = {
    "bio": str,
    "interests": list,
    "links": UserLinks,
    "preferences": UserPreferences,
    "avatar": lambda: None,
}


class Session:
    """Per-client context: who is acting. No ambient global user."""

    def __init__(self, session_id: str = DEFAULT_SESSION, user: Optional[User] = None):
        self.session_id = session_id
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def require_user(self) -> User:
        if self.user is None:
            raise AuthenticationError("Not logged in")
        return self.user

    def __repr__(self) -> str:
        return f"Session({self.session_id!r}, user={self.user_id!r})"


class IdentityService:

    def __init__(self, records: LocalRecordStore, directory: DirectoryService,
                 placeholder_password: str = "password"):
        self.records = records
        self.directory = directory
        self.placeholder_password = placeholder_password
        self._ensure_credentials()

    # ---------------------------------------------------------
    # Credentials
    # ---------------------------------------------------------

    def _credentials(self) -> dict:
        return self.records.read(RECORDS["credentials"], default={})

    def _ensure_credentials(self) -> None:
        """Give every roster user without a credential the placeholder one."""
        creds = self._credentials()
        missing = [u.id for u in self.directory.all() if u.id not in creds]
        if missing:
            placeholder = hash_password(self.placeholder_password)
            for user_id in missing:
                creds[user_id] = placeholder
            self.records.write(RECORDS["credentials"], creds)

    def _check_password(self, user: User, password: str) -> bool:
        stored = self._credentials().get(user.id)
        if stored is None:
            return password == self.placeholder_password
        return verify_password(password, stored)

    # ---------------------------------------------------------
    # Sessions
    # ---------------------------------------------------------

    def new_session(self) -> Session:
        return Session(uuid.uuid4().hex)

    def restore(self, session_id: str = DEFAULT_SESSION) -> Session:
        """Rebuild a session from its durable record (user is None if logged out)."""
        data = self.records.read(current_user_key(session_id))
        user = User.from_record(data) if data else None
        return Session(session_id, user)

    def _activate(self, session: Session, user: User) -> User:
        self.records.write(current_user_key(session.session_id), user.to_record())
        session.user = user
        return user

    # ---------------------------------------------------------
    # Operations
    # ---------------------------------------------------------

    def login(self, session: Session, email: str, password: str) -> User:
        user = self.directory.find_by_email(email)
        if user is None or not self._check_password(user, password):
            logger.info("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")
        return self._activate(session, user)

    def signup(self, session: Session, data: SignupInput) -> User:
        """
        Create an account and log it in.

        Missing bio/interests/links/preferences get the defaults:
        preferences = join, collaborate, remote and on-site on; hire off.
        """
        email = require_text(str(data.email) if data.email else "", "email")
        name = require_text(data.name, "name")
        if data.role is None:
            raise ValidationError("role is required", context={"field": "role"})
        if self.directory.find_by_email(email) is not None:
            raise ValidationError("Email already registered", context={"field": "email"})

        now = datetime.now(timezone.utc)
        user = User(
            id=new_id(),
            email=email,
            name=name,
            role=data.role,
            bio=data.bio or "",
            interests=data.interests or [],
            links=data.links or UserLinks(),
            preferences=data.preferences or UserPreferences(),
            avatar=data.avatar,
            created_at=now,
            last_active=now,
        )

        creds = self._credentials()
        creds[user.id] = hash_password(data.password or self.placeholder_password)
        self.directory.add(user)
        try:
            self.records.write(RECORDS["credentials"], creds)
            self._activate(session, user)
        except CollabError:
            logger.warning("Signup for %s failed, removing partial account %s", email, user.id)
            self._forget(user.id)
            raise
        logger.info("New %s account %s", user.role.value, user.id)
        return user

    def _forget(self, user_id: str) -> None:
        creds = self._credentials()
        if creds.pop(user_id, None) is not None:
            self.records.write(RECORDS["credentials"], creds)
        self.directory.discard(user_id)

    def logout(self, session: Session) -> None:
        self.records.remove(current_user_key(session.session_id))
        session.user = None

    def update_profile(self, session: Session, updates: ProfileUpdate) -> User:
        """
        Shallow merge: only the fields present in `updates` change, and a
        nested object (links, preferences) replaces the old one wholesale.
        An explicit None clears an optional field; name and role cannot be cleared.

        The directory is written first and the session last; if the session
        write fails the directory entry is put back.
        """
        current = session.require_user()
        fields = {}
        for name in updates.model_fields_set:
            value = getattr(updates, name)
            if value is None:
                if name not in _CLEARED:
                    raise ValidationError(f"{name} is required", context={"field": name})
                value = _CLEARED[name]()
            elif name == "name":
                value = require_text(value, "name")
            fields[name] = value

        merged = User.model_validate({**current.model_dump(), **fields})
        previous = self.directory.get(current.id) or current
        self.directory.replace(merged)
        try:
            self._activate(session, merged)
        except CollabError:
            self.directory.replace(previous)
            raise
        return merged
