import re
from uuid import uuid4

from conftest import PASSWORD
from jobboard.models.user import User
from jobboard.services.auth_service import (
    create_access_token,
    create_password_reset_token,
    hash_password,
    read_access_token,
    read_password_reset_token,
    verify_password,
)


def test_password_hashing():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("anything", "!" + "0" * 64)


def test_access_token_round_trip_and_expiry():
    user_id = uuid4()
    token = create_access_token(user_id)
    assert read_access_token(token) == user_id
    assert read_access_token(token, max_age=-1) is None
    assert read_access_token(token + "x") is None


def test_reset_token_is_not_an_access_token():
    user_id = uuid4()
    hashed = hash_password("correct horse")
    token = create_password_reset_token(user_id, "a@university.edu", hashed)
    assert read_password_reset_token(token) == (user_id, "a@university.edu", hashed[-16:])
    assert read_access_token(token) is None


async def test_guard_redirects_to_login_with_next(client):
    resp = await client.get("/student/dashboard")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?next=%2Fstudent%2Fdashboard"


async def test_guard_redirects_wrong_role(client, make_user, auth_headers):
    student = await make_user("student")
    faculty = await make_user("faculty")

    resp = await client.get("/admin/dashboard", headers=auth_headers(student))
    assert resp.status_code == 303
    assert resp.headers["location"] == "/unauthorized"

    resp = await client.get("/rep/dashboard", headers=auth_headers(faculty))
    assert resp.headers["location"] == "/unauthorized"

    resp = await client.get("/faculty/dashboard", headers=auth_headers(faculty))
    assert resp.status_code == 200


async def test_inactive_rep_blocked(client, make_user, auth_headers):
    rep = await make_user("rep", is_active=False)
    resp = await client.get("/api/profile/me", headers=auth_headers(rep))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Account is not active"


async def test_web_login_flow(client, make_user):
    student = await make_user("student")
    page = await client.get("/login?next=/student/dashboard")
    token = re.search(r'name="csrf_token" value="([^"]+)"', page.text).group(1)

    resp = await client.post(
        "/login",
        data={"csrf_token": token, "email": student.email, "password": "wrong-password"},
    )
    assert resp.status_code == 200
    assert "Invalid email or password." in resp.text

    resp = await client.post(
        "/login",
        data={"csrf_token": token, "email": student.email, "password": PASSWORD, "next": "//evil.example"},
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/student/dashboard"

    resp = await client.get("/")
    assert resp.headers["location"] == "/student/dashboard"


async def test_api_login_and_password_change(client, make_user):
    faculty = await make_user("faculty")
    resp = await client.post("/api/auth/login", json={"email": faculty.email.upper(), "password": PASSWORD})
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    resp = await client.post(
        "/api/auth/password", json={"password": "abc", "confirm_password": "abc"}, headers=headers
    )
    assert resp.status_code == 400

    resp = await client.post(
        "/api/auth/password", json={"password": "newpass1", "confirm_password": "newpass1"}, headers=headers
    )
    assert resp.status_code == 200
    resp = await client.post("/api/auth/login", json={"email": faculty.email, "password": "newpass1"})
    assert resp.status_code == 200


async def test_password_reset(client, make_user, session_factory):
    student = await make_user("student")
    async with session_factory() as session:
        hashed = (await session.get(User, student.user_id)).hashed_password
    resp = await client.post("/api/auth/password-reset/request", json={"email": "nobody@university.edu"})
    assert resp.status_code == 200

    token = create_password_reset_token(student.user_id, student.email, hashed)
    resp = await client.post(
        "/api/auth/password-reset/confirm",
        json={"token": token, "password": "brandnew1", "confirm_password": "brandnew2"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Passwords do not match."

    resp = await client.post(
        "/api/auth/password-reset/confirm",
        json={"token": token, "password": "brandnew1", "confirm_password": "brandnew1"},
    )
    assert resp.status_code == 200
    login = await client.post("/api/auth/login", json={"email": student.email, "password": "brandnew1"})
    assert login.status_code == 200

    stale = create_password_reset_token(student.user_id, "old-address@university.edu", hashed)
    resp = await client.post(
        "/api/auth/password-reset/confirm",
        json={"token": stale, "password": "another1", "confirm_password": "another1"},
    )
    assert resp.status_code == 400


async def test_password_reset_token_works_once(client, make_user, session_factory):
    student = await make_user("student")
    async with session_factory() as session:
        hashed = (await session.get(User, student.user_id)).hashed_password
    token = create_password_reset_token(student.user_id, student.email, hashed)

    resp = await client.post(
        "/api/auth/password-reset/confirm",
        json={"token": token, "password": "firstnew1", "confirm_password": "firstnew1"},
    )
    assert resp.status_code == 200

    resp = await client.post(
        "/api/auth/password-reset/confirm",
        json={"token": token, "password": "secondnew1", "confirm_password": "secondnew1"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Reset link is invalid or has expired."

    login = await client.post("/api/auth/login", json={"email": student.email, "password": "secondnew1"})
    assert login.status_code == 400
    login = await client.post("/api/auth/login", json={"email": student.email, "password": "firstnew1"})
    assert login.status_code == 200


async def test_register_student_duplicate_email(client):
    body = {"email": "new@university.edu", "password": "secret123", "first_name": "New", "last_name": "Student"}
    assert (await client.post("/api/auth/register-student", json=body)).status_code == 201
    resp = await client.post("/api/auth/register-student", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered."
