"""Layout routes — private templates (create-or-update) and the project canvas layout."""

from uuid import uuid4

from tests.services.fakes import png_bytes

CANVAS = {"width": 1200, "height": 1800, "slots": [{"x": 0, "y": 0, "w": 600, "h": 900}]}


async def test_template_create_then_update(client, auth_headers):
    created = await client.post(
        "/api/v1/templates", json={"name": "Strip", "layout_data": CANVAS},
        headers=auth_headers,
    )
    template_id = created.json()["id"]
    updated = await client.post(
        "/api/v1/templates",
        json={"id": template_id, "name": "Strip v2", "layout_data": {"slots": []}},
        headers=auth_headers,
    )

    assert created.status_code == 201
    assert updated.status_code == 200
    assert updated.json()["id"] == template_id
    assert updated.json()["name"] == "Strip v2"
    assert updated.json()["layout_data"] == {"slots": []}


async def test_update_unknown_template_is_404(client, auth_headers):
    res = await client.post(
        "/api/v1/templates",
        json={"id": str(uuid4()), "name": "Ghost", "layout_data": {}},
        headers=auth_headers,
    )

    assert res.status_code == 404


async def test_templates_are_private(client, auth_headers, other_headers):
    created = await client.post(
        "/api/v1/templates", json={"name": "Mine", "layout_data": CANVAS},
        headers=auth_headers,
    )
    template_id = created.json()["id"]

    theirs = await client.get("/api/v1/templates", headers=other_headers)
    fetched = await client.get(f"/api/v1/templates/{template_id}", headers=other_headers)

    assert theirs.json() == []
    assert fetched.status_code == 404


async def test_delete_template(client, auth_headers):
    created = await client.post(
        "/api/v1/templates", json={"name": "Tmp", "layout_data": {}}, headers=auth_headers,
    )
    template_id = created.json()["id"]

    deleted = await client.delete(f"/api/v1/templates/{template_id}", headers=auth_headers)
    again = await client.get(f"/api/v1/templates/{template_id}", headers=auth_headers)

    assert deleted.json() == {"deleted": True}
    assert again.status_code == 404


async def test_template_thumbnail_upload(client, auth_headers, fakes):
    created = await client.post(
        "/api/v1/templates", json={"name": "Thumb", "layout_data": {}}, headers=auth_headers,
    )
    template_id = created.json()["id"]

    res = await client.post(
        f"/api/v1/templates/{template_id}/thumbnail",
        files={"file": ("t.png", png_bytes(), "image/png")},
        headers=auth_headers,
    )

    assert res.status_code == 200
    assert res.json()["thumbnail_url"] == f"https://cdn.test/templates/{template_id}.png"
    assert fakes.storage.keys("templates/") == [f"templates/{template_id}.png"]


async def test_project_layout_empty_then_saved(client, auth_headers, project):
    url = f"/api/v1/projects/{project.id}/layout"

    empty = await client.get(url, headers=auth_headers)
    saved = await client.put(url, json={"layout_data": CANVAS}, headers=auth_headers)
    reread = await client.get(url, headers=auth_headers)

    assert empty.json()["layout_data"] is None
    assert saved.status_code == 200
    assert reread.json()["layout_data"] == CANVAS
    assert reread.json()["updated_at"] is not None


async def test_project_layout_other_tenant_is_404(client, other_headers, project):
    res = await client.put(
        f"/api/v1/projects/{project.id}/layout", json={"layout_data": CANVAS},
        headers=other_headers,
    )

    assert res.status_code == 404
