"""Photo session routes — booth reports, paginated admin listing, moderation."""

from uuid import uuid4

from photobooth.models import PhotoSession, Project, Style


async def test_booth_records_session(client, project, style):
    res = await client.post("/api/v1/public/projects/gala/sessions", json={
        "style_id": str(style.id), "gender": "f", "user_email": "Guest@Mail.EXAMPLE.COM",
        "result_image_url": "https://fal.test/r.png", "processing_time_ms": 4200,
    })

    assert res.status_code == 201
    body = res.json()
    assert body["project_id"] == str(project.id)
    assert body["user_email"] == "guest@mail.example.com"
    assert body["gender"] == "f"
    assert body["is_success"] is True
    assert body["moderation"] is None


async def test_record_rejects_style_of_another_project(client, project, other_admin, test_db):
    foreign = Project(name="Other", slug="other", created_by=other_admin.id)
    test_db.add(foreign)
    await test_db.commit()
    foreign_style = Style(project_id=foreign.id, name="X", style_key="x")
    test_db.add(foreign_style)
    await test_db.commit()

    res = await client.post("/api/v1/public/projects/gala/sessions", json={
        "style_id": str(foreign_style.id),
    })

    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "style_id"


async def test_record_for_unknown_project_is_404(client):
    res = await client.post("/api/v1/public/projects/nope/sessions", json={})

    assert res.status_code == 404


async def test_list_sessions_paginates(client, auth_headers, project, test_db):
    test_db.add_all([
        PhotoSession(project_id=project.id, is_success=True, processing_time_ms=i)
        for i in range(5)
    ])
    await test_db.commit()

    page = await client.get(
        f"/api/v1/projects/{project.id}/sessions",
        params={"limit": 2, "offset": 1}, headers=auth_headers,
    )

    body = page.json()
    assert body["total"] == 5
    assert body["limit"] == 2
    assert body["offset"] == 1
    assert len(body["sessions"]) == 2


async def test_list_sessions_limit_bounds(client, auth_headers, project):
    res = await client.get(
        f"/api/v1/projects/{project.id}/sessions", params={"limit": 500},
        headers=auth_headers,
    )

    assert res.status_code == 400


async def test_moderate_then_unmoderate(client, auth_headers, project, test_db):
    session = PhotoSession(project_id=project.id, is_success=True)
    test_db.add(session)
    await test_db.commit()

    hidden = await client.post(f"/api/v1/sessions/{session.id}/moderate", headers=auth_headers)
    shown = await client.post(f"/api/v1/sessions/{session.id}/unmoderate", headers=auth_headers)

    assert hidden.json()["moderation"] == "M"
    assert shown.json()["moderation"] is None


async def test_moderation_is_tenant_scoped(client, other_headers, project, test_db):
    session = PhotoSession(project_id=project.id, is_success=True)
    test_db.add(session)
    await test_db.commit()

    res = await client.post(f"/api/v1/sessions/{session.id}/moderate", headers=other_headers)
    missing = await client.post(f"/api/v1/sessions/{uuid4()}/moderate", headers=other_headers)

    assert res.status_code == 404
    assert missing.status_code == 404
