"""
Application Routes

GET /applications/mine - My applications, each with its project
PUT /applications/{application_id}/status - Change status (project author only)
"""

from fastapi import APIRouter, Depends
from typing import List

from collabhub.core.auth import get_current_session
from collabhub.services.container import Services, get_services
from collabhub.services.identity_service import Session
from collabhub.schemas.schemas import Application, AppliedProject, StatusUpdateInput

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/mine", response_model=List[AppliedProject])
async def my_applications(
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    return services.applications.applied_projects(session.user_id)


@router.put("/{application_id}/status", response_model=Application)
async def update_application_status(
    application_id: str,
    update: StatusUpdateInput,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    """Set status to pending, interview, accepted or rejected."""
    return services.applications.update_status(application_id, update.status, session)
