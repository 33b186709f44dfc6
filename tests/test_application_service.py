"""Applications: apply, lookups and the author-only status workflow."""

import threading

import pytest

from collabhub.core.errors import (
    AuthenticationError, ForbiddenError, UnknownApplicationError, UnknownProjectError, ValidationError
)
from collabhub.schemas.schemas import ApplicationStatus, ProfileUpdate
from collabhub.services.container import Services
from collabhub.services.identity_service import Session
from fakes.factories import login, project_input


@pytest.fixture
def project(services, carol):
    return services.projects.create(project_input(), carol)


def test_apply_starts_pending_with_applicant_snapshot(services, alice, project):
    application = services.applications.apply(project.id, "I have worked on surface codes.", alice)

    assert application.status == ApplicationStatus.pending
    assert application.user_id == "1"
    assert application.user.name == "Alice Chen"
    assert application.project_id == project.id
    assert services.applications.list_by_project(project.id) == [application]
    assert services.applications.list_by_user("1") == [application]


@pytest.mark.parametrize("message", ["", "   "])
def test_apply_with_empty_message_changes_nothing(services, alice, project, message):
    with pytest.raises(ValidationError):
        services.applications.apply(project.id, message, alice)
    assert services.applications.list_by_project(project.id) == []


def test_apply_to_unknown_project(services, alice):
    with pytest.raises(UnknownProjectError):
        services.applications.apply("missing", "Hello", alice)
    assert services.applications.list() == []


def test_apply_requires_login(services, project):
    with pytest.raises(AuthenticationError):
        services.applications.apply(project.id, "Hello", Session("anon"))


def test_duplicate_applications_are_allowed(services, alice, project):
    first = services.applications.apply(project.id, "First try", alice)
    second = services.applications.apply(project.id, "Second try", alice)
    assert first.id != second.id
    assert [a.id for a in services.applications.list_by_project(project.id)] == [first.id, second.id]


def test_applicant_snapshot_does_not_follow_profile_edits(services, alice, project):
    application = services.applications.apply(project.id, "Hello", alice)
    services.identity.update_profile(alice, ProfileUpdate(name="Alice C."))
    assert services.applications.get(application.id).user.name == "Alice Chen"


def test_author_can_move_status_any_direction(services, alice, carol, project):
    application = services.applications.apply(project.id, "Hello", alice)
    for status in ["interview", "accepted", "rejected", "pending", "accepted"]:
        updated = services.applications.update_status(application.id, status, carol)
        assert updated.status == ApplicationStatus(status)
        assert services.applications.get(application.id).status == ApplicationStatus(status)

    final = services.applications.get(application.id)
    assert final.message == application.message
    assert final.user_id == application.user_id
    assert final.created_at == application.created_at


def test_non_owner_cannot_change_status(services, alice, bob, project):
    application = services.applications.apply(project.id, "Hello", alice)

    with pytest.raises(ForbiddenError):
        services.applications.update_status(application.id, "accepted", bob)
    # the applicant is not the author either
    with pytest.raises(ForbiddenError):
        services.applications.update_status(application.id, "accepted", alice)

    assert services.applications.get(application.id).status == ApplicationStatus.pending


def test_update_status_is_idempotent(services, records, alice, carol, project):
    application = services.applications.apply(project.id, "Hello", alice)
    once = services.applications.update_status(application.id, ApplicationStatus.interview, carol)
    twice = services.applications.update_status(application.id, ApplicationStatus.interview, carol)

    assert once == twice
    assert services.applications.get(application.id).status == ApplicationStatus.interview
    assert records.read("applications")[0]["status"] == "interview"


def test_update_status_unknown_application(services, carol):
    with pytest.raises(UnknownApplicationError):
        services.applications.update_status("missing", "accepted", carol)


def test_invalid_status_value(services, alice, carol, project):
    application = services.applications.apply(project.id, "Hello", alice)
    with pytest.raises(ValueError):
        services.applications.update_status(application.id, "hired", carol)


def test_round_trip_through_storage(settings, records, services, alice, bob, carol, project):
    services.applications.apply(project.id, "One", alice)
    second = services.applications.apply(project.id, "Two", bob)
    services.applications.update_status(second.id, "accepted", carol)

    reloaded = Services(settings, records)
    assert reloaded.applications.list() == services.applications.list()
    assert reloaded.applications.get(second.id).status == ApplicationStatus.accepted


def test_concurrent_apply_from_two_sessions(services, project):
    sessions = [login(services, "alice@stanford.edu"), login(services, "bob@biotech.com")]
    barrier = threading.Barrier(len(sessions))
    results, errors = [], []

    def worker(session):
        barrier.wait()
        try:
            results.append(services.applications.apply(project.id, "Count me in", session))
        except Exception as e:  # surfaced below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(s,)) for s in sessions]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    listed = services.applications.list_by_project(project.id)
    assert {a.user_id for a in listed} == {"1", "2"}
    assert all(a.status == ApplicationStatus.pending for a in listed)
    assert len({a.id for a in listed}) == 2
    assert len(services.records.read("applications")) == 2


def test_project_detail_shows_applications_to_author_only(services, alice, bob, carol, project):
    services.applications.apply(project.id, "Hello", alice)

    for_author = services.applications.project_detail(project.id, carol)
    assert for_author.application_count == 1
    assert len(for_author.applications) == 1

    for_other = services.applications.project_detail(project.id, bob)
    assert for_other.application_count == 1
    assert for_other.applications == []


def test_applied_projects(services, alice, bob, project):
    other = services.projects.create(project_input(title="Biotech venture"), bob)
    services.applications.apply(project.id, "A", alice)
    services.applications.apply(other.id, "B", alice)

    pairs = services.applications.applied_projects("1")
    assert [(p.project.id, p.application.message) for p in pairs] == [(project.id, "A"), (other.id, "B")]
