"""Request and response payloads for the action endpoints."""

from pydantic import BaseModel, Field, field_validator


class SpeakRequest(BaseModel):
    text: str = Field(..., min_length=1)

    @field_validator("text", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class CastRequest(SpeakRequest):
    uid: str = Field(..., min_length=1, description="Identifier of the cast device")

    @field_validator("uid", mode="before")
    @classmethod
    def _strip_uid(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class ActionResponse(BaseModel):
    """Uniform envelope returned by every action endpoint."""

    success: bool
    reason: str
    err: str = ""
