import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


async def test_short_rejection_note_changes_nothing(client, make_user, make_job, auth_headers):
    admin = await make_user("admin")
    rep = await make_user("rep")
    job = await make_job(owner=rep, status="pending")

    resp = await client.post(
        f"/api/admin/jobs/{job.id}/status",
        json={"status": "rejected", "rejectionNote": "bad"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    assert "at least 10 characters" in resp.json()["detail"]

    pending = await client.get("/api/admin/jobs/pending", headers=auth_headers(admin))
    assert [j["id"] for j in pending.json()] == [str(job.id)]

    resp = await client.post(
        f"/api/admin/jobs/{job.id}/status",
        json={"status": "rejected", "rejectionNote": "Salary range is missing"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"

    own = await client.get(f"/api/jobs/{job.id}", headers=auth_headers(rep))
    assert own.json()["rejection_note"] == "Salary range is missing"


async def test_admin_page_shows_rejection_error(client, make_user, make_job, auth_headers):
    admin = await make_user("admin")
    job = await make_job(status="pending")

    page = await client.get("/admin/dashboard", headers=auth_headers(admin))
    assert page.status_code == 200
    token = re.search(r'name="csrf_token" value="([^"]+)"', page.text).group(1)

    resp = await client.post(
        f"/admin/jobs/{job.id}/status",
        data={"csrf_token": token, "status": "rejected", "rejection_note": "short"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    assert "Please provide a detailed reason for rejection" in resp.text

    pending = await client.get("/api/admin/jobs/pending", headers=auth_headers(admin))
    assert pending.json()[0]["status"] == "pending"


async def test_admin_endpoints_require_admin(client, make_user, auth_headers):
    faculty = await make_user("faculty")
    assert (await client.get("/api/admin/settings")).status_code == 401
    assert (await client.get("/api/admin/settings", headers=auth_headers(faculty))).status_code == 403


async def test_settings_read_and_unknown_key(client, make_user, auth_headers):
    admin = await make_user("admin")
    resp = await client.get("/api/admin/settings", headers=auth_headers(admin))
    assert resp.json() == {"rep_can_post_jobs": True, "faculty_can_post_jobs": True}

    resp = await client.patch(
        "/api/admin/settings",
        json={"setting_key": "nope", "setting_value": True},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400


async def test_toggle_partial_returns_confirmed_state(client, make_user, auth_headers):
    admin = await make_user("admin")
    page = await client.get("/admin/dashboard", headers=auth_headers(admin))
    token = re.search(r'name="csrf_token" value="([^"]+)"', page.text).group(1)

    resp = await client.post(
        "/admin/settings/toggle",
        data={"setting_key": "faculty_can_post_jobs"},
        headers={**auth_headers(admin), "X-CSRF-Token": token},
    )
    assert resp.status_code == 200
    assert 'id="flag-faculty_can_post_jobs"' in resp.text
    assert "checked" not in resp.text

    resp = await client.get("/api/admin/settings", headers=auth_headers(admin))
    assert resp.json()["faculty_can_post_jobs"] is False


async def broken_flush(*args, **kwargs):
    raise SQLAlchemyError("connection reset")


async def test_failed_toggle_partial_keeps_previous_state(client, make_user, auth_headers, monkeypatch):
    admin = await make_user("admin")
    page = await client.get("/admin/dashboard", headers=auth_headers(admin))
    token = re.search(r'name="csrf_token" value="([^"]+)"', page.text).group(1)

    monkeypatch.setattr(AsyncSession, "flush", broken_flush)
    resp = await client.post(
        "/admin/settings/toggle",
        data={"setting_key": "rep_can_post_jobs"},
        headers={**auth_headers(admin), "X-CSRF-Token": token},
    )
    monkeypatch.undo()

    assert resp.status_code == 200
    assert 'id="flag-rep_can_post_jobs"' in resp.text
    assert "checked" in resp.text
    assert '<span class="error">Failed to update setting. Please try again.</span>' in resp.text

    resp = await client.get("/api/admin/settings", headers=auth_headers(admin))
    assert resp.json()["rep_can_post_jobs"] is True


async def test_failed_settings_patch_returns_500(client, make_user, auth_headers, monkeypatch):
    admin = await make_user("admin")
    resp = await client.patch(
        "/api/admin/settings",
        json={"setting_key": "faculty_can_post_jobs", "setting_value": False},
        headers=auth_headers(admin),
    )
    assert resp.json()["previous_value"] is True

    monkeypatch.setattr(AsyncSession, "flush", broken_flush)
    resp = await client.patch(
        "/api/admin/settings",
        json={"setting_key": "faculty_can_post_jobs", "setting_value": True},
        headers=auth_headers(admin),
    )
    monkeypatch.undo()

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to update setting. Please try again."
    resp = await client.get("/api/admin/settings", headers=auth_headers(admin))
    assert resp.json()["faculty_can_post_jobs"] is False


async def test_rep_registration_needs_approval(client, make_user, auth_headers):
    admin = await make_user("admin")
    resp = await client.post(
        "/api/auth/register-rep",
        json={
            "email": "Recruiter@Initech.example",
            "password": "hunter22",
            "company_name": "Initech",
            "first_name": "Bill",
            "last_name": "Lumbergh",
        },
    )
    assert resp.status_code == 201
    user_id = resp.json()["user_id"]

    login = await client.post("/api/auth/login", json={"email": "recruiter@initech.example", "password": "hunter22"})
    assert login.status_code == 403

    users = await client.get("/api/admin/users", params={"role": "rep"}, headers=auth_headers(admin))
    assert [(u["user_id"], u["is_active"]) for u in users.json()] == [(user_id, False)]

    resp = await client.post(
        f"/api/admin/users/{user_id}/status", json={"is_active": True}, headers=auth_headers(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["is_active"] is True

    login = await client.post("/api/auth/login", json={"email": "recruiter@initech.example", "password": "hunter22"})
    assert login.status_code == 200
    assert login.json()["role"] == "rep"

    logs = await client.get("/api/admin/status-logs", headers=auth_headers(admin))
    assert logs.json()[0]["action"] == "enabled"
    assert logs.json()[0]["changed_by_admin_email"] == admin.email


async def test_admin_cannot_disable_self(client, make_user, auth_headers):
    admin = await make_user("admin")
    resp = await client.post(
        f"/api/admin/users/{admin.user_id}/status", json={"is_active": False}, headers=auth_headers(admin)
    )
    assert resp.status_code == 400


async def test_disabled_user_loses_api_access(client, make_user, auth_headers):
    admin = await make_user("admin")
    student = await make_user("student")
    await client.post(
        f"/api/admin/users/{student.user_id}/status", json={"is_active": False}, headers=auth_headers(admin)
    )
    resp = await client.get("/api/jobs", headers=auth_headers(student))
    assert resp.status_code == 403


async def test_change_role(client, make_user, auth_headers):
    admin = await make_user("admin")
    faculty = await make_user("faculty")
    resp = await client.post(
        f"/api/admin/users/{faculty.user_id}/role", json={"role": "staff"}, headers=auth_headers(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "staff"
    resp = await client.post(
        f"/api/admin/users/{faculty.user_id}/role", json={"role": "owner"}, headers=auth_headers(admin)
    )
    assert resp.status_code == 400


async def test_platform_analytics(client, make_user, make_job, auth_headers):
    admin = await make_user("admin")
    await make_user("student")
    await make_job(company="Acme")
    await make_job(company="Globex", status="pending")

    resp = await client.get("/api/admin/analytics?days=14", headers=auth_headers(admin))
    assert resp.status_code == 200
    report = resp.json()
    assert report["overview"]["total_jobs"] == 2
    assert report["overview"]["pending_jobs"] == 1
    assert report["users_by_role"] == {"admin": 1, "student": 1}
    assert {c["company"] for c in report["top_companies"]} == {"Acme", "Globex"}
    assert len(report["trends"]) == 14
