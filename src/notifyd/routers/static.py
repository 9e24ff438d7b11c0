"""Serve generated audio to cast devices."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from ..errors import NotFoundError
from .actions import get_notification_service

router = APIRouter(prefix="/static", tags=["static"])

AUDIO_MEDIA_TYPE = "audio/wav"


@router.get("/{name:path}")
async def static_file(name: str, request: Request) -> FileResponse:
    service = get_notification_service(request)
    path = service.synthesizer.scratch.resolve(name)
    try:
        found = path is not None and path.is_file()
    except (OSError, ValueError):
        found = False
    if not found:
        raise NotFoundError(f"No generated audio named {name}", reason="File not found")
    return FileResponse(
        path,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Cache-Control": "no-store"},
    )


__all__ = ["router", "AUDIO_MEDIA_TYPE"]
