"""Routes that turn text into speech."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from ..schemas.notify import ActionResponse, CastRequest, SpeakRequest
from ..services.notifier import NotificationService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["actions"])

SPOKEN_REASON = "Done emitting requested text"
CASTED_REASON = "Content casted"


def get_notification_service(request: Request) -> NotificationService:
    service = getattr(request.app.state, "notification_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Notification service unavailable")
    return service


@router.post("/action/speak", response_model=ActionResponse)
async def speak(payload: SpeakRequest, request: Request) -> ActionResponse:
    """Synthesize the text and play it on the local speakers."""
    service = get_notification_service(request)
    await service.speak(payload.text)
    return ActionResponse(success=True, reason=SPOKEN_REASON)


@router.post("/action/cast", response_model=ActionResponse)
async def cast(payload: CastRequest, request: Request) -> ActionResponse:
    """Synthesize the text and have the device ``uid`` play it."""
    service = get_notification_service(request)
    await service.cast(payload.text, payload.uid)
    return ActionResponse(success=True, reason=CASTED_REASON)


@router.post("/notify", response_model=ActionResponse)
async def notify(payload: SpeakRequest, request: Request) -> ActionResponse:
    """Speak or cast depending on the configured target."""
    service = get_notification_service(request)
    mode = await service.notify(payload.text)
    logger.debug("Notification delivered via %s", mode)
    return ActionResponse(
        success=True,
        reason=SPOKEN_REASON if mode == "speak" else CASTED_REASON,
    )


__all__ = ["router", "get_notification_service", "SPOKEN_REASON", "CASTED_REASON"]
