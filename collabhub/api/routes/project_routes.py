"""
Project Routes

POST /projects - Post a project (logged-in user becomes author)
GET /projects - List projects, newest first, with search/tag filters
GET /projects/tags - All tags in use
GET /projects/{project_id} - Project detail (+ applications for the author)
POST /projects/{project_id}/apply - Apply to a project
GET /projects/{project_id}/applications - Applications received (author only)
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from collabhub.core.auth import get_current_session, get_optional_session
from collabhub.core.errors import ForbiddenError
from collabhub.services.container import Services, get_services
from collabhub.services.identity_service import Session
from collabhub.schemas.schemas import (
    Application, ApplyInput, CreateProjectInput, Project, ProjectDetail
)

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("", response_model=Project, status_code=201)
async def create_project(
    data: CreateProjectInput,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    """Post a new project. In live remote mode it shows up in listings once the feed delivers it."""
    return services.projects.create(data, session)


@router.get("", response_model=List[Project])
async def list_projects(
    search: Optional[str] = Query(None, description="Matches title, description or author name"),
    tag: List[str] = Query([], description="Repeat to select several"),
    services: Services = Depends(get_services),
):
    if search or tag:
        return services.projects.search(search or "", tag)
    return services.projects.list()


@router.get("/tags", response_model=List[str])
async def list_tags(services: Services = Depends(get_services)):
    return services.projects.all_tags()


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: str,
    session: Session = Depends(get_optional_session),
    services: Services = Depends(get_services),
):
    """Project details. Only the author sees the individual applications."""
    return services.applications.project_detail(project_id, session)


@router.post("/{project_id}/apply", response_model=Application, status_code=201)
async def apply_to_project(
    project_id: str,
    data: ApplyInput,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    """Apply to a project. Starts in status 'pending'."""
    return services.applications.apply(project_id, data.message, session)


@router.get("/{project_id}/applications", response_model=List[Application])
async def get_project_applications(
    project_id: str,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    """Applications received by a project. Author only."""
    project = services.projects.get(project_id)
    if project.author_id != session.user_id:
        raise ForbiddenError("Only the project author can see its applications",
                             context={"project_id": project_id})
    return services.applications.list_by_project(project_id)
