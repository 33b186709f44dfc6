"""
Service container - builds every store/repository once, from settings.

Usage:
    services = get_services()
    services.projects.list()
"""

import logging
from typing import Callable, Optional

from collabhub.core.config import Settings, get_settings
from collabhub.db.local_store import LocalRecordStore, RECORDS, get_record_store
from collabhub.services.application_service import ApplicationRepository
from collabhub.services.directory_service import DirectoryService
from collabhub.services.identity_service import IdentityService
from collabhub.services.messaging_service import MessagingService
from collabhub.services.mongo_service import MongoDocumentCollection
from collabhub.services.persistence import build_persistence
from collabhub.services.project_service import ProjectRepository

logger = logging.getLogger(__name__)


class Services:

    def __init__(
        self,
        settings: Settings,
        records: LocalRecordStore,
        collection_factory: Callable[[str], MongoDocumentCollection] = MongoDocumentCollection,
    ):
        self.settings = settings
        self.records = records
        mode = settings.storage_mode

        self.directory = DirectoryService(records, seed=settings.seed_directory)
        self.identity = IdentityService(records, self.directory, settings.placeholder_password)
        self.projects = ProjectRepository(
            build_persistence(mode, RECORDS["projects"], records, collection_factory),
            self.directory,
        )
        self.applications = ApplicationRepository(
            build_persistence(mode, RECORDS["applications"], records, collection_factory),
            self.projects,
            self.directory,
        )
        self.messaging = MessagingService(self.directory)
        logger.info("Services ready (storage_mode=%s)", mode.value)

    def start(self) -> None:
        """Start live feeds (no-op unless storage_mode is remote_live)."""
        self.projects.start()
        self.applications.start()

    def stop(self) -> None:
        self.projects.stop()
        self.applications.stop()


_services: Optional[Services] = None


def get_services() -> Services:
    """Get or create the service container (singleton pattern)"""
    global _services
    if _services is None:
        _services = Services(get_settings(), get_record_store())
    return _services


def reset_services() -> None:
    global _services
    if _services is not None:
        _services.stop()
    _services = None
