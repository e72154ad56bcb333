from fastapi import HTTPException, Request

from cms_admin.services.dialogs import DialogRegistry
from cms_admin.services.media_library import MediaLibrary


def get_registry(request: Request) -> DialogRegistry:
    return request.app.state.dialogs


def get_media_library(request: Request) -> MediaLibrary:
    return request.app.state.media_library


def conflict(code: str, message: str) -> HTTPException:
    return HTTPException(status_code=409, detail={"code": code, "message": message})


def not_found(message: str) -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": message})
