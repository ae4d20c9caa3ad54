"""Style routes — CRUD through the owning project, preview uploads, public listing."""

from sqlalchemy import select

from photobooth.models import Style

from tests.services.fakes import png_bytes


async def test_create_and_list_styles(client, auth_headers, project):
    created = await client.post(
        f"/api/v1/projects/{project.id}/styles",
        json={"name": "Viking", "gender": "m", "style_key": "viking", "prompt": "a viking"},
        headers=auth_headers,
    )
    listed = await client.get(f"/api/v1/projects/{project.id}/styles", headers=auth_headers)

    assert created.status_code == 201
    assert created.json()["gender"] == "m"
    assert created.json()["is_active"] is True
    assert [s["style_key"] for s in listed.json()] == ["viking"]


async def test_create_style_rejects_unknown_gender(client, auth_headers, project):
    res = await client.post(
        f"/api/v1/projects/{project.id}/styles",
        json={"name": "X", "gender": "zz", "style_key": "x"},
        headers=auth_headers,
    )

    assert res.status_code == 400


async def test_update_style(client, auth_headers, style):
    res = await client.patch(
        f"/api/v1/styles/{style.id}", json={"is_active": False, "name": "Corsaire"},
        headers=auth_headers,
    )

    assert res.status_code == 200
    assert res.json()["is_active"] is False
    assert res.json()["name"] == "Corsaire"
    assert res.json()["style_key"] == "pirate"


async def test_other_tenant_cannot_touch_style(client, other_headers, style):
    patched = await client.patch(
        f"/api/v1/styles/{style.id}", json={"name": "Mine"}, headers=other_headers,
    )
    deleted = await client.delete(f"/api/v1/styles/{style.id}", headers=other_headers)

    assert patched.status_code == 404
    assert deleted.status_code == 404


async def test_delete_style(client, auth_headers, style, test_db):
    style_id = style.id
    res = await client.delete(f"/api/v1/styles/{style_id}", headers=auth_headers)

    assert res.status_code == 200
    assert res.json() == {"deleted": True, "storage_error": None}
    test_db.expire_all()
    assert (await test_db.execute(select(Style).where(Style.id == style_id))).first() is None


async def test_preview_upload_replaces_previous_object(client, auth_headers, style, fakes):
    url = f"/api/v1/styles/{style.id}/preview"

    first = await client.post(
        url, files={"file": ("first.png", png_bytes(), "image/png")}, headers=auth_headers,
    )
    first_keys = fakes.storage.keys("projects/")
    second = await client.post(
        url, files={"file": ("second.png", png_bytes(), "image/png")}, headers=auth_headers,
    )

    assert first.status_code == 200
    assert first.json()["preview_image"].startswith(
        f"https://cdn.test/projects/{style.project_id}/styles/",
    )
    assert len(first_keys) == 1
    assert second.status_code == 200
    remaining = fakes.storage.keys("projects/")
    assert len(remaining) == 1
    assert remaining != first_keys


async def test_preview_upload_rejects_non_image(client, auth_headers, style):
    res = await client.post(
        f"/api/v1/styles/{style.id}/preview",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )

    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "file"


async def test_public_styles_filters_gender_and_inactive(client, project, style, test_db):
    test_db.add_all([
        Style(project_id=project.id, name="Knight", gender="m", style_key="knight"),
        Style(project_id=project.id, name="Hidden", gender="f", style_key="hidden",
              is_active=False),
    ])
    await test_db.commit()

    everyone = await client.get("/api/v1/public/projects/gala/styles")
    women = await client.get("/api/v1/public/projects/gala/styles", params={"gender": "f"})

    assert sorted(s["style_key"] for s in everyone.json()) == ["knight", "pirate"]
    assert [s["style_key"] for s in women.json()] == ["pirate"]
