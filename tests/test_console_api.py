import asyncio

import pytest


@pytest.mark.asyncio
async def test_relation_dialog_flow(console):
    r = await console.post("/v1/relation-dialogs", json={"content_type": "author", "mode": "multiple", "current_value": [3, "ghost"]})
    assert r.status_code == 201, r.text
    dialog = r.json()
    dialog_id = dialog["id"]

    assert dialog["title"] == "Author"
    assert dialog["display_field"] == "name"
    assert [row["chosen"] for row in dialog["rows"]] == [False, False, True]
    assert dialog["selected"] == [
        {"id": "3", "label": "Grace Hopper", "loaded": True, "secondary": "grace@example.com"},
        {"id": "ghost", "label": "ghost", "loaded": False, "secondary": None},
    ]
    assert dialog["summary"] == "2 selected"

    r = await console.get(f"/v1/relation-dialogs/{dialog_id}", params={"q": "ALAN"})
    assert [row["id"] for row in r.json()["rows"]] == ["2"]

    r = await console.post(f"/v1/relation-dialogs/{dialog_id}/toggle", json={"id": 2})
    assert r.json()["summary"] == "3 selected"

    r = await console.post(f"/v1/relation-dialogs/{dialog_id}/confirm")
    assert r.status_code == 200
    assert r.json() == {"value": ["3", "ghost", "2"]}

    r = await console.get(f"/v1/relation-dialogs/{dialog_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_single_relation_confirm_requires_selection(console):
    r = await console.post("/v1/relation-dialogs", json={"content_type": "author"})
    dialog_id = r.json()["id"]
    assert r.json()["can_confirm"] is False

    r = await console.post(f"/v1/relation-dialogs/{dialog_id}/confirm")
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "EMPTY_SELECTION"

    await console.post(f"/v1/relation-dialogs/{dialog_id}/toggle", json={"id": "1"})
    r = await console.post(f"/v1/relation-dialogs/{dialog_id}/confirm")
    assert r.json() == {"value": "1"}


@pytest.mark.asyncio
async def test_relation_dialog_unknown_type_is_empty_state(console):
    r = await console.post("/v1/relation-dialogs", json={"content_type": "missing"})
    assert r.status_code == 201
    body = r.json()
    assert body["rows"] == []
    assert body["load_error"] == "Content type not found"


@pytest.mark.asyncio
async def test_cancel_and_kind_mismatch(console):
    r = await console.post("/v1/media-dialogs", json={"mode": "single", "current_value": "10"})
    dialog = r.json()
    assert dialog["kind"] == "media"
    assert dialog["rows"][0] == {
        "id": "10",
        "label": "logo.png",
        "chosen": True,
        "details": [],
        "url": "https://blob.example/10-logo.png",
        "size": "2 KB",
        "is_image": True,
    }
    assert dialog["selected"] == [{"id": "10", "label": "logo.png", "loaded": True, "secondary": "2 KB"}]

    r = await console.get(f"/v1/relation-dialogs/{dialog['id']}")
    assert r.status_code == 404

    r = await console.post(f"/v1/media-dialogs/{dialog['id']}/cancel")
    assert r.status_code == 204
    r = await console.post(f"/v1/media-dialogs/{dialog['id']}/confirm")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_upload_dialog_partial_failure(console):
    r = await console.post("/v1/upload-dialogs")
    assert r.status_code == 201
    dialog_id = r.json()["id"]

    files = [
        ("files", ("a.png", b"aaa", "image/png")),
        ("files", ("FAIL.png", b"bbb", "image/png")),
        ("files", ("a.png", b"ccc", "image/png")),
    ]
    r = await console.post(f"/v1/upload-dialogs/{dialog_id}/files", files=files)
    assert r.status_code == 200, r.text
    items = r.json()["items"]
    assert [i["status"] for i in items] == ["pending"] * 3
    assert len({i["key"] for i in items}) == 3

    r = await console.post(f"/v1/upload-dialogs/{dialog_id}/run")
    body = r.json()
    assert body["summary"] == {"success_count": 2, "total_count": 3, "text": "Successfully uploaded 2 of 3 files"}
    assert body["auto_close"] is False
    assert [i["status"] for i in body["dialog"]["items"]] == ["done", "failed", "done"]
    assert body["dialog"]["items"][1]["error"] == "File type not supported"
    assert body["dialog"]["notices"][0]["title"] == "Failed to upload FAIL.png"

    r = await console.get("/v1/media", params={"q": "a.png"})
    assert [m["name"] for m in r.json()] == ["a.png", "a.png"]

    await asyncio.sleep(0.01)
    r = await console.get(f"/v1/upload-dialogs/{dialog_id}")
    assert r.status_code == 200
    assert r.json()["is_open"] is True


@pytest.mark.asyncio
async def test_upload_dialog_auto_closes_on_full_success(console):
    dialog_id = (await console.post("/v1/upload-dialogs")).json()["id"]
    await console.post(f"/v1/upload-dialogs/{dialog_id}/files", files=[("files", ("ok.png", b"1", "image/png"))])

    r = await console.post(f"/v1/upload-dialogs/{dialog_id}/run")
    assert r.json()["auto_close"] is True

    await asyncio.sleep(0.01)
    r = await console.get(f"/v1/upload-dialogs/{dialog_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_upload_dialog_run_with_no_files(console, memory_backend):
    dialog_id = (await console.post("/v1/upload-dialogs")).json()["id"]
    r = await console.post(f"/v1/upload-dialogs/{dialog_id}/run")
    assert r.json()["summary"] is None
    assert r.json()["auto_close"] is False
    assert memory_backend.calls == []


@pytest.mark.asyncio
async def test_dismiss_and_close_upload_dialog(console):
    dialog_id = (await console.post("/v1/upload-dialogs")).json()["id"]
    r = await console.post(f"/v1/upload-dialogs/{dialog_id}/files", files=[("files", ("x.png", b"1", "image/png"))])
    key = r.json()["items"][0]["key"]

    r = await console.delete(f"/v1/upload-dialogs/{dialog_id}/files/{key}")
    assert r.status_code == 204
    r = await console.delete(f"/v1/upload-dialogs/{dialog_id}/files/{key}")
    assert r.status_code == 404

    r = await console.post(f"/v1/upload-dialogs/{dialog_id}/close")
    assert r.status_code == 204
    r = await console.get(f"/v1/upload-dialogs/{dialog_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_media_listing_and_delete(console):
    r = await console.get("/v1/media")
    assert [(m["id"], m["size_label"], m["is_image"]) for m in r.json()] == [("10", "2 KB", True), ("11", "4.77 MB", False)]

    r = await console.delete("/v1/media/10")
    assert r.status_code == 204
    r = await console.get("/v1/media")
    assert [m["id"] for m in r.json()] == ["11"]

    r = await console.delete("/v1/media/10")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_null_ids_in_current_value_are_dropped(console):
    r = await console.post("/v1/relation-dialogs", json={"content_type": "author", "mode": "multiple", "current_value": ["1", None, ""]})
    assert r.status_code == 201, r.text
    assert [i["id"] for i in r.json()["selected"]] == ["1"]

    r = await console.post(f"/v1/relation-dialogs/{r.json()['id']}/confirm")
    assert r.json() == {"value": ["1"]}


@pytest.mark.asyncio
async def test_closed_dialogs_are_forgotten(console, console_app):
    registry = console_app.state.dialogs

    for _ in range(3):
        relation = (await console.post("/v1/relation-dialogs", json={"content_type": "author"})).json()["id"]
        await console.post(f"/v1/relation-dialogs/{relation}/cancel")

        media = (await console.post("/v1/media-dialogs", json={"mode": "multiple"})).json()["id"]
        await console.post(f"/v1/media-dialogs/{media}/confirm")

        upload = (await console.post("/v1/upload-dialogs")).json()["id"]
        await console.post(f"/v1/upload-dialogs/{upload}/close")

    assert len(registry) == 0


@pytest.mark.asyncio
async def test_auto_closed_upload_dialog_is_forgotten(console, console_app):
    registry = console_app.state.dialogs
    dialog_id = (await console.post("/v1/upload-dialogs")).json()["id"]
    await console.post(f"/v1/upload-dialogs/{dialog_id}/files", files=[("files", ("ok.png", b"1", "image/png"))])
    session = registry.upload(dialog_id)
    await console.post(f"/v1/upload-dialogs/{dialog_id}/run")

    await session.auto_close_task
    assert not session.is_open
    assert len(registry) == 0
