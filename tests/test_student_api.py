async def test_preferences_drive_recommendations(client, make_user, make_job, auth_headers):
    student = await make_user("student")
    match = await make_job(title="Data Intern", skills=["Python", "Pandas"])
    await make_job(title="Cashier", job_type="Part-Time", industry="Retail", skills=["Customer service"])

    assert (await client.get("/api/student/recommendations", headers=auth_headers(student))).json() == []

    resp = await client.put(
        "/api/student/profile",
        json={"skills": ["python"], "preferred_job_types": ["Internship"], "interests": ["data"]},
        headers=auth_headers(student),
    )
    assert resp.status_code == 200

    resp = await client.get("/api/student/recommendations", headers=auth_headers(student))
    assert [(j["id"], j["match_score"]) for j in resp.json()] == [(str(match.id), 5 + 3 + 2)]

    await client.post(f"/api/jobs/{match.id}/apply", headers=auth_headers(student))
    resp = await client.get("/api/student/recommendations", headers=auth_headers(student))
    assert resp.json() == []


async def test_saved_jobs(client, make_user, make_job, auth_headers):
    student = await make_user("student")
    job = await make_job()

    assert (await client.post(f"/api/student/saved/{job.id}", headers=auth_headers(student))).status_code == 201
    assert (await client.post(f"/api/student/saved/{job.id}", headers=auth_headers(student))).status_code == 201
    saved = await client.get("/api/student/saved", headers=auth_headers(student))
    assert [j["id"] for j in saved.json()] == [str(job.id)]

    assert (await client.delete(f"/api/student/saved/{job.id}", headers=auth_headers(student))).status_code == 204
    saved = await client.get("/api/student/saved", headers=auth_headers(student))
    assert saved.json() == []


async def test_student_endpoints_reject_other_roles(client, make_user, auth_headers):
    rep = await make_user("rep")
    assert (await client.get("/api/student/profile", headers=auth_headers(rep))).status_code == 403
