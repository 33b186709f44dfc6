"""
Pydantic Schemas - Entities, operation inputs and API responses.

All models in one file for simplicity. Python attributes are snake_case;
the stored and wire form is camelCase (authorId, createdAt, wantToHire, ...).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> Dict[str, Any]:
        """JSON-safe dict for the local records table (datetimes as ISO-8601)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, data: Dict[str, Any]):
        return cls.model_validate(data)


def _unique_strings(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    researcher = "researcher"
    founder = "founder"
    professor = "professor"


class ProjectStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    completed = "completed"


class ApplicationStatus(str, Enum):
    pending = "pending"
    interview = "interview"
    accepted = "accepted"
    rejected = "rejected"


class Preference(str, Enum):
    want_to_hire = "wantToHire"
    want_to_join = "wantToJoin"
    want_to_collaborate = "wantToCollaborate"
    remote = "remote"
    on_site = "onSite"


# ============================================================
# USER
# ============================================================

class UserLinks(CamelModel):
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    resume: Optional[str] = None


class UserPreferences(CamelModel):
    want_to_hire: bool = False
    want_to_join: bool = True
    want_to_collaborate: bool = True
    remote: bool = True
    on_site: bool = True

    def is_set(self, preference: Preference) -> bool:
        return bool(self.model_dump(by_alias=True).get(preference.value))


class User(CamelModel):
    id: str
    email: str
    name: str
    role: UserRole
    bio: str = ""
    interests: List[str] = []
    links: UserLinks = Field(default_factory=UserLinks)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    avatar: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    last_active: datetime = Field(default_factory=utc_now)

    @field_validator("interests")
    @classmethod
    def _dedupe_interests(cls, v: List[str]) -> List[str]:
        return _unique_strings(v)


class SignupInput(CamelModel):
    email: EmailStr
    name: str
    role: UserRole
    password: Optional[str] = None
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    links: Optional[UserLinks] = None
    preferences: Optional[UserPreferences] = None
    avatar: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own profile. Nested objects replace wholesale."""
    name: Optional[str] = None
    role: Optional[UserRole] = None
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    links: Optional[UserLinks] = None
    preferences: Optional[UserPreferences] = None
    avatar: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: User


# ============================================================
# PROJECT
# ============================================================

class CreateProjectInput(CamelModel):
    title: str
    description: str
    requirements: List[str]
    budget: str
    duration: str
    tags: List[str] = []
    status: ProjectStatus = ProjectStatus.active
    location: Optional[str] = None
    is_remote: Optional[bool] = None


class Project(CamelModel):
    id: str
    title: str
    description: str
    author_id: str
    author: User  # snapshot at creation, may go stale
    requirements: List[str]
    budget: str
    duration: str
    tags: List[str] = []
    status: ProjectStatus = ProjectStatus.active
    location: Optional[str] = None
    is_remote: Optional[bool] = None
    created_at: datetime


# ============================================================
# APPLICATION
# ============================================================

class ApplyInput(CamelModel):
    message: str


class StatusUpdateInput(CamelModel):
    status: ApplicationStatus


class Application(CamelModel):
    id: str
    user_id: str
    user: User  # applicant snapshot at apply time
    project_id: str
    message: str
    status: ApplicationStatus = ApplicationStatus.pending
    created_at: datetime


class ProjectDetail(Project):
    """Project plus its derived applications (visible to the author only)."""
    application_count: int = 0
    applications: List[Application] = []


class AppliedProject(CamelModel):
    project: Project
    application: Application


# ============================================================
# MESSAGING
# ============================================================

class SendMessageInput(CamelModel):
    receiver_id: str
    content: str


class Message(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    read: bool = False


class Conversation(CamelModel):
    id: str
    participants: List[User]
    last_message: Message
    messages: List[Message] = []


class ConversationSummary(CamelModel):
    id: str
    participant: User
    last_message: Message
    unread: int = 0


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    code: str
