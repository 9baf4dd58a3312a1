from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from jobboard.models.job import Job
from jobboard.services import posting_service
from jobboard.services.errors import PermissionDenied, ValidationError

TODAY = date(2025, 3, 10)

DESCRIPTION = "x" * 120


def form(**overrides):
    data = {
        "title": "Research Assistant",
        "company": "Biology Department",
        "industry": "Education",
        "job_type": "Part-Time",
        "location": "Campus",
        "description": DESCRIPTION,
        "requirements": "GPA 3.0+\n\nLab safety training\n",
        "skills": "Pipetting, Excel, excel",
        "deadline": "2025-04-01",
        "apply_url": "https://university.edu/apply",
    }
    data.update(overrides)
    return data


def test_validate_posting_cleans_lists():
    values = posting_service.validate_posting(form(), TODAY)
    assert values["requirements"] == ["GPA 3.0+", "Lab safety training"]
    assert values["skills"] == ["Pipetting", "Excel"]
    assert values["deadline"] == date(2025, 4, 1)
    assert values["salary_range"] is None


@pytest.mark.parametrize("field", ["title", "company", "location", "apply_url", "deadline"])
def test_validate_posting_requires_fields(field):
    with pytest.raises(ValidationError, match="required fields"):
        posting_service.validate_posting(form(**{field: "  "}), TODAY)


def test_validate_posting_short_description():
    with pytest.raises(ValidationError, match="at least 100 characters"):
        posting_service.validate_posting(form(description="Too short"), TODAY)


def test_validate_posting_needs_a_skill():
    with pytest.raises(ValidationError, match="at least one required skill"):
        posting_service.validate_posting(form(skills=" , "), TODAY)


def test_validate_posting_rejects_unknown_job_type():
    with pytest.raises(ValidationError, match="Job type"):
        posting_service.validate_posting(form(job_type="Contract"), TODAY)


@pytest.mark.parametrize("value", ["04/01/2025", "2025-4-1", "2025-02-30", ""])
def test_parse_deadline_format(value):
    with pytest.raises(ValidationError):
        posting_service.parse_deadline(value)


def test_future_deadline_must_be_after_today():
    with pytest.raises(ValidationError, match="in the future"):
        posting_service.validate_future_deadline(TODAY.isoformat(), TODAY)
    assert posting_service.validate_future_deadline("2025-03-11", TODAY) == date(2025, 3, 11)


def test_rejection_requires_detailed_note():
    posting = Job(status="pending")
    with pytest.raises(ValidationError, match="at least 10 characters"):
        posting_service.apply_status_change(posting, "rejected", "too short")
    assert posting.status == "pending"
    assert posting.rejection_note is None


def test_rejection_note_cleared_when_not_rejected():
    posting = Job(status="pending")
    posting_service.apply_status_change(posting, "rejected", "Missing salary information")
    assert posting.rejection_note == "Missing salary information"
    posting_service.apply_status_change(posting, "active")
    assert posting.status == "active"
    assert posting.rejection_note is None


def test_invalid_status_value():
    with pytest.raises(ValidationError):
        posting_service.apply_status_change(Job(status="pending"), "archived")


def test_can_manage():
    owner = SimpleNamespace(role="rep", user_id="u1")
    other = SimpleNamespace(role="faculty", user_id="u2")
    admin = SimpleNamespace(role="admin", user_id="u3")
    posting = Job(created_by="u1")
    assert posting_service.can_manage(posting, owner)
    assert not posting_service.can_manage(posting, other)
    assert posting_service.can_manage(posting, admin)


def test_archived_and_current_split():
    current = Job(title="current", deadline=TODAY + timedelta(days=1))
    archived = Job(title="archived", deadline=TODAY - timedelta(days=1))
    assert posting_service.archived_and_current([current, archived], TODAY) == ([current], [archived])


async def test_create_job_status_depends_on_role(db, make_user):
    rep = await make_user("rep", company_name="Acme")
    staff = await make_user("staff")
    rep_job = await posting_service.create_job(db, rep, form(), TODAY)
    staff_job = await posting_service.create_job(db, staff, form(), TODAY)
    assert rep_job.status == "pending"
    assert staff_job.status == "active"


async def test_editing_rejected_posting_resubmits_it(db, make_user):
    faculty = await make_user("faculty")
    posting = await posting_service.create_job(db, faculty, form(), TODAY)
    await posting_service.moderate_job(db, posting, "rejected", "Please add a salary range")

    await posting_service.update_job(db, posting, faculty, form(salary_range="$15/hr"), TODAY)
    assert posting.status == "pending"
    assert posting.rejection_note is None
    assert posting.salary_range == "$15/hr"


async def test_update_by_non_owner_denied(db, make_user):
    faculty = await make_user("faculty")
    rep = await make_user("rep")
    posting = await posting_service.create_job(db, faculty, form(), TODAY)
    with pytest.raises(PermissionDenied):
        await posting_service.update_job(db, posting, rep, form(), TODAY)


async def test_reactivate_removed_posting(db, make_user):
    rep = await make_user("rep")
    posting = await posting_service.create_job(db, rep, form(), TODAY)
    await posting_service.moderate_job(db, posting, "active")
    await posting_service.remove_job(db, posting, rep)

    await posting_service.reactivate_job(db, posting, rep, "2025-05-01", TODAY)
    assert posting.status == "active"
    assert posting.deadline == date(2025, 5, 1)


async def test_reactivate_validates_date_and_status(db, make_user):
    rep = await make_user("rep")
    posting = await posting_service.create_job(db, rep, form(), TODAY)
    with pytest.raises(ValidationError, match="previously approved"):
        await posting_service.reactivate_job(db, posting, rep, "2025-05-01", TODAY)

    await posting_service.moderate_job(db, posting, "active")
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        await posting_service.reactivate_job(db, posting, rep, "05/01/2025", TODAY)
    with pytest.raises(ValidationError, match="in the future"):
        await posting_service.reactivate_job(db, posting, rep, "2025-03-01", TODAY)
    assert posting.deadline == date(2025, 4, 1)
