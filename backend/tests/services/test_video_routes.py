"""Video routes — ffmpeg jobs run through FakeFfmpeg; results land under videos/."""

from tests.services.fakes import png_bytes

CLIP = ("clip.webm", b"\x1a\x45\xdf\xa3", "video/webm")


async def test_convert(client, fakes):
    res = await client.post("/api/v1/video/convert", files={"file": CLIP})

    assert res.status_code == 200
    body = res.json()
    assert body["key"].startswith("videos/converted-")
    assert body["key"].endswith(".mp4")
    assert fakes.ffmpeg.operations() == ["convert"]
    [(_, argv)] = fakes.ffmpeg.commands
    assert argv[argv.index("-i") + 1].endswith("input.webm")
    assert fakes.storage.objects[body["key"]][1] == "video/mp4"


async def test_convert_rejects_images(client, fakes):
    res = await client.post(
        "/api/v1/video/convert", files={"file": ("a.png", png_bytes(), "image/png")},
    )

    assert res.status_code == 400
    assert fakes.ffmpeg.commands == []


async def test_merge_background(client, fakes):
    res = await client.post("/api/v1/video/merge-background", files={
        "video": ("green.mp4", b"\x00\x00\x00\x18ftyp", "video/mp4"),
        "background": ("beach.jpg", png_bytes(), "image/jpeg"),
    })

    assert res.status_code == 200
    assert res.json()["key"].startswith("videos/merged-")
    [(operation, argv)] = fakes.ffmpeg.commands
    assert operation == "merge_background"
    assert any("colorkey" in part or "chromakey" in part for part in argv)


async def test_photo_wall_fetches_every_photo(client, fakes):
    urls = [f"https://cdn.test/results/{i}.png" for i in range(3)]

    res = await client.post("/api/v1/video/photo-wall", json={"image_urls": urls})

    assert res.status_code == 200
    assert res.json()["key"].startswith("videos/photo-wall-")
    assert fakes.fetcher.calls == urls
    assert fakes.ffmpeg.operations() == ["photo_wall"]


async def test_photo_wall_needs_two_images(client):
    res = await client.post(
        "/api/v1/video/photo-wall", json={"image_urls": ["https://cdn.test/1.png"]},
    )

    assert res.status_code == 400


async def test_scroll_wide_video(client, fakes):
    res = await client.post("/api/v1/video/scroll", files={"file": CLIP})

    assert res.status_code == 200
    assert res.json()["scrolled"] is True
    assert fakes.ffmpeg.operations() == ["scale", "scroll"]


async def test_scroll_narrow_video_is_only_scaled(client, fakes):
    fakes.ffmpeg.size = (640, 480)

    res = await client.post("/api/v1/video/scroll", files={"file": CLIP})

    assert res.json()["scrolled"] is False
    assert fakes.ffmpeg.operations() == ["scale"]


async def test_fresque_stacks_clips(client, fakes):
    res = await client.post("/api/v1/video/fresque", files=[
        ("files", ("a.webm", b"a", "video/webm")),
        ("files", ("b.webm", b"b", "video/webm")),
        ("files", ("c.mp4", b"c", "video/mp4")),
    ])

    assert res.status_code == 200
    assert res.json()["key"].startswith("videos/fresque-")
    [(operation, argv)] = fakes.ffmpeg.commands
    assert operation == "fresque"
    assert argv.count("-i") == 3


async def test_fresque_needs_two_clips(client):
    res = await client.post("/api/v1/video/fresque", files=[
        ("files", ("a.webm", b"a", "video/webm")),
    ])

    assert res.status_code == 400
