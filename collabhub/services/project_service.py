"""
Project Service - posted collaboration projects.

create() validates and resolves the author before anything is written.
list() is always newest first. Where the snapshot comes from depends on the
persistence strategy (see services/persistence.py).
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List

from collabhub.core.errors import UnknownAuthorError, UnknownProjectError, ValidationError, require_text
from collabhub.schemas.schemas import CreateProjectInput, Project
from collabhub.services.directory_service import DirectoryService
from collabhub.services.identity_service import Session
from collabhub.services.repository import SyncedRepository, new_id

logger = logging.getLogger(__name__)


class ProjectRepository(SyncedRepository[Project]):
    model = Project
    prepend = True

    def __init__(self, persistence, directory: DirectoryService):
        self.directory = directory
        super().__init__(persistence)

    def create(self, data: CreateProjectInput, session: Session) -> Project:
        title = require_text(data.title, "title")
        description = require_text(data.description, "description")
        budget = require_text(data.budget, "budget")
        duration = require_text(data.duration, "duration")
        requirements = [r.strip() for r in data.requirements if r and r.strip()]
        if not requirements:
            raise ValidationError("At least one requirement is needed", context={"field": "requirements"})

        author_id = session.user_id
        author = self.directory.get(author_id) if author_id else None
        if author is None:
            raise UnknownAuthorError("Author not found", context={"author_id": author_id})

        project = Project(
            id=new_id(),
            title=title,
            description=description,
            author_id=author.id,
            author=author,
            requirements=requirements,
            budget=budget,
            duration=duration,
            tags=[t.strip() for t in data.tags if t and t.strip()],
            status=data.status,
            location=(data.location or "").strip() or None,
            is_remote=data.is_remote,
            created_at=datetime.now(timezone.utc),
        )
        created = self._commit_insert(project)
        logger.info("Project %s created by %s (%s)", created.id, author.id, self.persistence.mode.value)
        return created

    def list(self) -> List[Project]:
        # sorted() is stable, so same-timestamp projects keep storage order
        return sorted(self.snapshot(), key=lambda p: p.created_at, reverse=True)

    def get(self, project_id: str) -> Project:
        project = next((p for p in self.snapshot() if p.id == project_id), None)
        if project is None:
            raise UnknownProjectError("Project not found", context={"project_id": project_id})
        return project

    def exists(self, project_id: str) -> bool:
        return any(p.id == project_id for p in self.snapshot())

    def list_by_author(self, user_id: str) -> List[Project]:
        return [p for p in self.list() if p.author_id == user_id]

    def search(self, term: str = "", tags: Iterable[str] = ()) -> List[Project]:
        """Title, description or author name contains `term`; any selected tag matches."""
        needle = (term or "").strip().lower()
        wanted = set(tags or [])
        results = []
        for project in self.list():
            if needle and not (
                needle in project.title.lower()
                or needle in project.description.lower()
                or needle in project.author.name.lower()
            ):
                continue
            if wanted and not wanted.intersection(project.tags):
                continue
            results.append(project)
        return results

    def all_tags(self) -> List[str]:
        return sorted({t for p in self.snapshot() for t in p.tags})
