"""Image API tests — upload, download, delete, owner isolation."""

import io

import pytest
from PIL import Image

from helpers import bearer, register


def _png(width: int = 3, height: int = 2) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


async def _upload(client, data: bytes, name="pic.png", mime="image/png", headers=None, **form):
    return await client.post(
        "/api/images",
        files={"image": (name, data, mime)},
        data=form,
        headers=headers or {},
    )


# ═══════════════════════════════════════════════════════════
# Upload / download (fixed identity)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_upload_png(client, test_settings):
    data = _png(3, 2)
    r = await _upload(client, data)
    assert r.status_code == 201
    img = r.json()
    assert img["original_name"] == "pic.png"
    assert img["mime_type"] == "image/png"
    assert img["size"] == len(data)
    assert (img["width"], img["height"]) == (3, 2)
    assert img["filename"] == f"{img['id']}.png"
    assert img["url"] == f"/api/images/{img['id']}"
    assert img["owner_id"] == 1

    from pathlib import Path

    stored = Path(test_settings.upload_dir) / img["filename"]
    assert stored.read_bytes() == data


@pytest.mark.asyncio
async def test_download_image(client):
    data = _png()
    img = (await _upload(client, data)).json()

    r = await client.get(f"/api/images/{img['id']}")
    assert r.status_code == 200
    assert r.content == data
    assert r.headers["content-type"] == "image/png"
    assert r.headers["cache-control"].startswith("private")


@pytest.mark.asyncio
async def test_non_image_upload_has_no_dimensions(client):
    r = await _upload(client, b"just text", name="notes", mime="text/plain")
    assert r.status_code == 201
    img = r.json()
    assert img["width"] is None and img["height"] is None
    assert img["filename"].endswith(".bin")


@pytest.mark.asyncio
async def test_empty_upload_rejected(client):
    r = await _upload(client, b"")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_oversized_upload_rejected(client, test_settings):
    from venus.config import get_settings
    from venus.main import app

    small = test_settings.model_copy(update={"max_upload_bytes": 10})
    app.dependency_overrides[get_settings] = lambda: small
    r = await _upload(client, b"x" * 11, mime="application/octet-stream")
    assert r.status_code == 413


@pytest.mark.asyncio
async def test_list_and_delete(client, test_settings):
    first = (await _upload(client, _png())).json()
    second = (await _upload(client, _png(5, 5))).json()

    r = await client.get("/api/images")
    assert {i["id"] for i in r.json()} == {first["id"], second["id"]}

    r = await client.delete(f"/api/images/{first['id']}")
    assert r.status_code == 204

    from pathlib import Path

    assert not (Path(test_settings.upload_dir) / first["filename"]).exists()
    assert (await client.get(f"/api/images/{first['id']}")).status_code == 404
    assert (await client.delete(f"/api/images/{first['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_survives_missing_file(client, test_settings):
    from pathlib import Path

    img = (await _upload(client, _png())).json()
    (Path(test_settings.upload_dir) / img["filename"]).unlink()

    r = await client.delete(f"/api/images/{img['id']}")
    assert r.status_code == 204


@pytest.mark.asyncio
async def test_download_missing_file_is_404(client, test_settings):
    from pathlib import Path

    img = (await _upload(client, _png())).json()
    (Path(test_settings.upload_dir) / img["filename"]).unlink()
    r = await client.get(f"/api/images/{img['id']}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_upload_to_own_project(client):
    pid = (await client.post("/api/projects", json={"name": "P"})).json()["id"]
    r = await _upload(client, _png(), project_id=pid)
    assert r.status_code == 201
    assert r.json()["project_id"] == pid


@pytest.mark.asyncio
async def test_upload_to_missing_project(client):
    r = await _upload(client, _png(), project_id="nope")
    assert r.status_code == 404
    assert r.json() == {"detail": "Project not found"}


# ═══════════════════════════════════════════════════════════
# Ownership (real tokens)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_other_users_image_is_not_found(unauthenticated_client):
    alice = await register(unauthenticated_client, "alice")
    bob = await register(unauthenticated_client, "bob")

    img = (await _upload(unauthenticated_client, _png(), headers=bearer(alice["token"]))).json()

    as_bob = bearer(bob["token"])
    foreign = await unauthenticated_client.get(f"/api/images/{img['id']}", headers=as_bob)
    missing = await unauthenticated_client.get("/api/images/no-such-image", headers=as_bob)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"detail": "Image not found"}

    r = await unauthenticated_client.delete(f"/api/images/{img['id']}", headers=as_bob)
    assert r.status_code == 404
    r = await unauthenticated_client.get("/api/images", headers=as_bob)
    assert r.json() == []

    r = await unauthenticated_client.get(f"/api/images/{img['id']}", headers=bearer(alice["token"]))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_cannot_attach_upload_to_foreign_project(unauthenticated_client):
    alice = await register(unauthenticated_client, "alice3")
    bob = await register(unauthenticated_client, "bob3")
    pid = (
        await unauthenticated_client.post(
            "/api/projects", json={"name": "A"}, headers=bearer(alice["token"])
        )
    ).json()["id"]

    r = await _upload(unauthenticated_client, _png(), headers=bearer(bob["token"]), project_id=pid)
    assert r.status_code == 404
    assert r.json() == {"detail": "Project not found"}


@pytest.mark.asyncio
async def test_image_via_cookie(unauthenticated_client):
    """<img> tags authenticate with the token cookie."""
    alice = await register(unauthenticated_client, "imgcookie")
    img = (await _upload(unauthenticated_client, _png(), headers=bearer(alice["token"]))).json()

    r = await unauthenticated_client.get(
        f"/api/images/{img['id']}", headers={"Cookie": f"token={alice['token']}"}
    )
    assert r.status_code == 200

    r = await unauthenticated_client.get(f"/api/images/{img['id']}")
    assert r.status_code == 401
