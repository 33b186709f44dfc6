"""
User Directory Routes

GET /users - Discover profiles (search, role, interests, preference)
GET /users/interests - All interests in the roster
GET /users/{user_id} - One profile
GET /users/{user_id}/projects - Projects posted by a user
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from collabhub.core.auth import get_optional_session
from collabhub.core.errors import UnknownUserError
from collabhub.services.container import Services, get_services
from collabhub.services.identity_service import Session
from collabhub.schemas.schemas import Preference, Project, User, UserRole

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[User])
async def discover_users(
    search: Optional[str] = Query(None, description="Matches name, bio or interests"),
    role: Optional[UserRole] = Query(None),
    interest: List[str] = Query([], description="Repeat to select several"),
    preference: Optional[Preference] = Query(None),
    session: Session = Depends(get_optional_session),
    services: Services = Depends(get_services),
):
    """Filter the directory. The caller's own profile is left out."""
    return services.directory.search(
        term=search or "",
        role=role,
        interests=interest,
        preference=preference,
        exclude_user_id=session.user_id,
    )


@router.get("/interests", response_model=List[str])
async def list_interests(services: Services = Depends(get_services)):
    return services.directory.all_interests()


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, services: Services = Depends(get_services)):
    user = services.directory.get(user_id)
    if user is None:
        raise UnknownUserError("User not found", context={"user_id": user_id})
    return user


@router.get("/{user_id}/projects", response_model=List[Project])
async def get_user_projects(user_id: str, services: Services = Depends(get_services)):
    """Projects posted by this user, newest first."""
    return services.projects.list_by_author(user_id)
