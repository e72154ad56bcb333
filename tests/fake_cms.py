"""
Minimal stand-in for the CMS REST backend, served to the HTTP client over httpx.ASGITransport.
"""
import base64
import binascii

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response


def build_fake_cms(*, content_types: dict, entries: dict, media: list, broken: set[str] | None = None) -> FastAPI:
    """
    broken: paths that answer 500, e.g. {"/api/media"} or {"/api/content/author"}.
    """
    app = FastAPI()
    app.state.media = [dict(m) for m in media]
    app.state.requests = []
    broken = broken or set()
    next_id = {"value": 1 + max((int(m["id"]) for m in media), default=0)}

    @app.middleware("http")
    async def _track(request: Request, call_next):
        app.state.requests.append((request.method, request.url.path, request.headers.get("authorization")))
        if request.url.path in broken:
            return JSONResponse({"message": "Internal server error"}, status_code=500)
        return await call_next(request)

    @app.get("/api/content-types/{api_id}")
    async def get_content_type(api_id: str):
        if api_id not in content_types:
            return JSONResponse({"message": "Content type not found"}, status_code=404)
        return content_types[api_id]

    @app.get("/api/content/{api_id}")
    async def get_entries(api_id: str, page: int = 1, limit: int = 20):
        rows = entries.get(api_id, [])
        start = (page - 1) * limit
        return {"entries": rows[start:start + limit], "total": len(rows)}

    @app.get("/api/media")
    async def list_media():
        return app.state.media

    @app.post("/api/media")
    async def upload_media(request: Request):
        body = await request.json()
        name = body.get("fileName")
        if not name:
            return JSONResponse({"message": "No file uploaded"}, status_code=400)
        if not str(body.get("mimeType", "")).startswith(("image/", "text/", "application/pdf")):
            return JSONResponse({"message": "File type not supported"}, status_code=400)
        try:
            content = base64.b64decode(body.get("file", ""), validate=True)
        except (binascii.Error, ValueError):
            return JSONResponse({"message": "Malformed payload"}, status_code=400)

        media_id = next_id["value"]
        next_id["value"] += 1
        record = {
            "id": media_id,
            "name": name,
            "url": f"https://blob.example/{media_id}-{name}",
            "type": body["mimeType"],
            "size": len(content),
        }
        app.state.media.append(record)
        return JSONResponse(record, status_code=201)

    @app.delete("/api/media/{media_id}")
    async def delete_media(media_id: int):
        for i, m in enumerate(app.state.media):
            if m["id"] == media_id:
                app.state.media.pop(i)
                return Response(status_code=204)
        return JSONResponse({"message": "Media not found"}, status_code=404)

    return app
