"""Background routes — uploads, remote copies, deletion reporting, asset catalog."""

from pathlib import Path

from photobooth.config import get_settings
from photobooth.models import Background

from tests.services.fakes import png_bytes


async def test_upload_background(client, auth_headers, project, fakes):
    res = await client.post(
        f"/api/v1/projects/{project.id}/backgrounds/upload",
        files={"file": ("plage.png", png_bytes(), "image/png")},
        data={"name": "Plage"},
        headers=auth_headers,
    )

    assert res.status_code == 201
    assert res.json()["name"] == "Plage"
    assert fakes.storage.keys(f"projects/{project.id}/backgrounds/")


async def test_add_background_from_url_copies_into_storage(
    client, auth_headers, project, fakes,
):
    remote = "https://images.test/sunset.jpg?w=1200"
    fakes.fetcher.assets[remote] = (png_bytes(), "image/jpeg")

    res = await client.post(
        f"/api/v1/projects/{project.id}/backgrounds/from-url",
        json={"url": remote}, headers=auth_headers,
    )

    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "sunset.jpg"
    assert body["image_url"].startswith(f"https://cdn.test/projects/{project.id}/backgrounds/")
    assert fakes.fetcher.calls == [remote]


async def test_from_url_requires_http_url(client, auth_headers, project):
    res = await client.post(
        f"/api/v1/projects/{project.id}/backgrounds/from-url",
        json={"url": "file:///etc/passwd"}, headers=auth_headers,
    )

    assert res.status_code == 400


async def test_register_hosted_background_and_public_listing(client, auth_headers, project):
    await client.post(
        f"/api/v1/projects/{project.id}/backgrounds",
        json={"name": "Fond 1", "image_url": "/assets/background-1.png"},
        headers=auth_headers,
    )
    await client.post(
        f"/api/v1/projects/{project.id}/backgrounds",
        json={"name": "Off", "image_url": "/assets/background-2.png", "is_active": False},
        headers=auth_headers,
    )

    admin_view = await client.get(
        f"/api/v1/projects/{project.id}/backgrounds", headers=auth_headers,
    )
    public_view = await client.get("/api/v1/public/projects/gala/backgrounds")

    assert len(admin_view.json()) == 2
    assert [b["name"] for b in public_view.json()] == ["Fond 1"]


async def test_delete_background_reports_storage_errors(
    client, auth_headers, project, fakes, test_db,
):
    background = Background(
        project_id=project.id, name="Plage",
        image_url="https://cdn.test/projects/x/backgrounds/plage.png",
        storage_path=f"projects/{project.id}/backgrounds/plage.png",
    )
    test_db.add(background)
    await test_db.commit()
    fakes.storage.fail_deletes = True

    res = await client.delete(f"/api/v1/backgrounds/{background.id}", headers=auth_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["deleted"] == 1
    assert body["storage_deleted"] == 0
    assert body["storage_errors"][0].startswith("Plage:")


async def test_delete_all_project_backgrounds(client, auth_headers, project, fakes, test_db):
    key = f"projects/{project.id}/backgrounds/a.png"
    await fakes.storage.put(key, png_bytes(), "image/png")
    test_db.add_all([
        Background(project_id=project.id, name="A", image_url=fakes.storage.public_url(key),
                   storage_path=key),
        Background(project_id=project.id, name="Catalog", image_url="/assets/background-1.png"),
    ])
    await test_db.commit()

    res = await client.delete(
        f"/api/v1/projects/{project.id}/backgrounds", headers=auth_headers,
    )

    assert res.json() == {"deleted": 2, "storage_deleted": 1, "storage_errors": []}
    assert fakes.storage.keys(key) == []


async def test_other_tenant_cannot_delete_background(client, other_headers, project, test_db):
    background = Background(project_id=project.id, name="A", image_url="/assets/a.png")
    test_db.add(background)
    await test_db.commit()

    res = await client.delete(f"/api/v1/backgrounds/{background.id}", headers=other_headers)

    assert res.status_code == 404


async def test_catalog_lists_labelled_backgrounds_and_themes(client):
    catalog = Path(get_settings().asset_catalog_dir)
    for name in ("background-1.png", "background-neige.jpg", "bg-ocean.jpg", "readme.txt"):
        (catalog / name).write_bytes(b"x")

    backgrounds = await client.get("/api/v1/catalog/backgrounds")
    themes = await client.get("/api/v1/catalog/fresque-themes")

    by_file = {e["filename"]: e for e in backgrounds.json()}
    assert by_file["background-1.png"]["name"] == "Fond 1"
    assert by_file["background-neige.jpg"]["name"] == "Fond Neige"
    assert by_file["background-1.png"]["url"] == "/assets/background-1.png"
    assert "readme.txt" not in by_file
    assert [t["filename"] for t in themes.json()] == ["bg-ocean.jpg"]
