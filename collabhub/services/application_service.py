"""
Application Service - requests to join a project and their status workflow.

Status is one of pending / interview / accepted / rejected. Any status may
follow any other; only the author of the target project may change it.
Applicants may apply to the same project more than once.
"""

import logging
from datetime import datetime, timezone
from typing import List

from collabhub.core.errors import (
    ForbiddenError, UnknownApplicationError, UnknownProjectError, require_text
)
from collabhub.schemas.schemas import Application, ApplicationStatus, AppliedProject, ProjectDetail
from collabhub.services.directory_service import DirectoryService
from collabhub.services.identity_service import Session
from collabhub.services.project_service import ProjectRepository
from collabhub.services.repository import SyncedRepository, new_id

logger = logging.getLogger(__name__)


class ApplicationRepository(SyncedRepository[Application]):
    model = Application
    prepend = False  # applications keep submission order

    def __init__(self, persistence, projects: ProjectRepository, directory: DirectoryService):
        self.projects = projects
        self.directory = directory
        super().__init__(persistence)

    def apply(self, project_id: str, message: str, session: Session) -> Application:
        message = require_text(message, "message")
        applicant = session.require_user()
        if not self.projects.exists(project_id):
            raise UnknownProjectError("Project not found", context={"project_id": project_id})
        # Snapshot of the applicant as they are now; later profile edits do not reach it
        snapshot = self.directory.get(applicant.id) or applicant

        application = Application(
            id=new_id(),
            user_id=snapshot.id,
            user=snapshot,
            project_id=project_id,
            message=message,
            status=ApplicationStatus.pending,
            created_at=datetime.now(timezone.utc),
        )
        created = self._commit_insert(application)
        logger.info("Application %s by %s to project %s", created.id, snapshot.id, project_id)
        return created

    def list(self) -> List[Application]:
        return self.snapshot()

    def get(self, application_id: str) -> Application:
        application = next((a for a in self.snapshot() if a.id == application_id), None)
        if application is None:
            raise UnknownApplicationError("Application not found", context={"application_id": application_id})
        return application

    def list_by_project(self, project_id: str) -> List[Application]:
        return [a for a in self.snapshot() if a.project_id == project_id]

    def list_by_user(self, user_id: str) -> List[Application]:
        return [a for a in self.snapshot() if a.user_id == user_id]

    def update_status(self, application_id: str, new_status: ApplicationStatus, session: Session) -> Application:
        """
        Replace the status of one application.
        Raises ForbiddenError unless the acting user authored the target project.
        """
        new_status = ApplicationStatus(new_status)
        acting = session.require_user()
        application = self.get(application_id)
        project = self.projects.get(application.project_id)
        if project.author_id != acting.id:
            raise ForbiddenError(
                "Only the project author can change application status",
                context={"application_id": application_id, "user_id": acting.id},
            )
        if application.status == new_status:
            return application

        updated = application.model_copy(update={"status": new_status})
        if not self._commit_patch(application_id, {"status": new_status.value}, updated):
            raise UnknownApplicationError("Application no longer exists", context={"application_id": application_id})
        logger.info("Application %s: %s -> %s", application_id, application.status.value, new_status.value)
        return updated

    # ---------------------------------------------------------
    # Profile / detail views
    # ---------------------------------------------------------

    def applied_projects(self, user_id: str) -> List[AppliedProject]:
        """The user's applications joined with their projects (unknown projects skipped)."""
        projects = {p.id: p for p in self.projects.snapshot()}
        return [
            AppliedProject(project=projects[a.project_id], application=a)
            for a in self.list_by_user(user_id)
            if a.project_id in projects
        ]

    def project_detail(self, project_id: str, session: Session) -> ProjectDetail:
        """Project with its applications; the list itself is shown to the author only."""
        project = self.projects.get(project_id)
        applications = self.list_by_project(project_id)
        visible = applications if session.user_id == project.author_id else []
        return ProjectDetail(
            **project.model_dump(),
            application_count=len(applications),
            applications=visible,
        )
