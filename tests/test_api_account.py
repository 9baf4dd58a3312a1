from conftest import PASSWORD


async def test_wrong_confirmation_text_changes_nothing(client, make_user, auth_headers):
    student = await make_user("student", major="Biology")

    for confirm in ("delete", "DELETE ", ""):
        resp = await client.request(
            "DELETE", "/api/account/delete", json={"confirmText": confirm}, headers=auth_headers(student)
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == 'Confirmation text must be "DELETE"'

    me = await client.get("/api/profile/me", headers=auth_headers(student))
    assert me.status_code == 200
    assert me.json()["major"] == "Biology"
    login = await client.post("/api/auth/login", json={"email": student.email, "password": PASSWORD})
    assert login.status_code == 200


async def test_delete_account_anonymizes_and_keeps_postings(client, make_user, make_job, auth_headers):
    rep = await make_user("rep", company_name="Initech")
    admin = await make_user("admin")
    student = await make_user("student")
    job = await make_job(owner=rep)

    resp = await client.request(
        "DELETE",
        "/api/account/delete",
        json={"confirmText": "DELETE", "reason": "Leaving the company"},
        headers=auth_headers(rep),
    )
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    assert (await client.get("/api/profile/me", headers=auth_headers(rep))).status_code == 401
    login = await client.post("/api/auth/login", json={"email": rep.email, "password": PASSWORD})
    assert login.status_code == 400

    listing = await client.get("/api/jobs", headers=auth_headers(student))
    assert str(job.id) in {j["id"] for j in listing.json()}

    deleted = await client.get("/api/admin/deleted-users", headers=auth_headers(admin))
    [entry] = deleted.json()
    assert entry["email"] == rep.email
    assert entry["company_name"] == "Initech"
    assert entry["self_deleted"] is True
    assert entry["deletion_reason"] == "Leaving the company"

    users = await client.get("/api/admin/users", params={"role": "rep"}, headers=auth_headers(admin))
    [record] = users.json()
    assert record["first_name"] == "Deleted"
    assert record["company_name"] is None
    assert record["email"].endswith("@deleted.invalid")


async def test_admin_deletes_user(client, make_user, auth_headers):
    admin = await make_user("admin")
    student = await make_user("student")
    resp = await client.request(
        "DELETE",
        f"/api/admin/users/{student.user_id}",
        json={"confirmText": "DELETE", "reason": "Duplicate account"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["self_deleted"] is False
    assert resp.json()["deleted_by_admin_email"] == admin.email


async def test_update_own_profile(client, make_user, auth_headers):
    faculty = await make_user("faculty")
    resp = await client.put(
        "/api/profile/update",
        json={
            "userId": str(faculty.user_id),
            "email": faculty.email,
            "profileData": {
                "first_name": "Grace",
                "last_name": "Hopper",
                "department": "Computer Science",
                "office_hours": "Tue 2-4pm",
            },
        },
        headers=auth_headers(faculty),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["first_name"] == "Grace"
    assert body["department"] == "Computer Science"
    assert body["major"] is None


async def test_update_profile_rules(client, make_user, auth_headers):
    student = await make_user("student")
    other = await make_user("student")

    resp = await client.put(
        "/api/profile/update",
        json={"userId": str(other.user_id), "profileData": {"first_name": "A", "last_name": "B"}},
        headers=auth_headers(student),
    )
    assert resp.status_code == 403

    resp = await client.put(
        "/api/profile/update",
        json={"userId": str(student.user_id), "profileData": {"first_name": "", "last_name": "B"}},
        headers=auth_headers(student),
    )
    assert resp.status_code == 400

    resp = await client.put(
        "/api/profile/update",
        json={
            "userId": str(student.user_id),
            "email": other.email,
            "profileData": {"first_name": "A", "last_name": "B", "gpa": "3.9"},
        },
        headers=auth_headers(student),
    )
    assert resp.status_code == 400
    me = await client.get("/api/profile/me", headers=auth_headers(student))
    assert me.json()["gpa"] is None
    assert me.json()["first_name"] == "Student"
