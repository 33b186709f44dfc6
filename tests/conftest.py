"""
Pytest configuration and fixtures.
Adds the project root to sys.path so `import collabhub` works without install.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest

from collabhub.db.local_store import LocalRecordStore
from collabhub.services.container import Services
from fakes.factories import login, make_settings
from fakes.fake_document_store import FakeDocumentStore


@pytest.fixture
def records(tmp_path):
    store = LocalRecordStore(f"sqlite:///{tmp_path / 'records.db'}")
    yield store
    store.dispose()


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def services(settings, records):
    return Services(settings, records)


@pytest.fixture
def remote_store():
    return FakeDocumentStore()


@pytest.fixture
def alice(services):
    """Student, id '1'."""
    return login(services, "alice@stanford.edu")


@pytest.fixture
def bob(services):
    """Founder, id '2'."""
    return login(services, "bob@biotech.com")


@pytest.fixture
def carol(services):
    """Professor, id '3'."""
    return login(services, "carol@mit.edu")
