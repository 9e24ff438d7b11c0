"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations


class NotifydError(RuntimeError):
    """Base error for failures surfaced to HTTP callers.

    ``reason`` is the short human description placed in the response
    envelope; ``detail`` carries the underlying diagnostic text (usually the
    standard error of an external tool) verbatim.
    """

    status_code: int = 400
    reason: str = "Request failed"

    def __init__(self, detail: str = "", *, reason: str | None = None) -> None:
        super().__init__(detail or reason or self.reason)
        self.detail = detail
        if reason is not None:
            self.reason = reason


class BadRequestError(NotifydError):
    reason = "Bad arguments"


class NotFoundError(NotifydError):
    status_code = 404
    reason = "Not found"


class SynthesisError(NotifydError):
    """Raised when the TTS engine fails to render text."""

    reason = "Speech synthesis failed"


class PlaybackError(NotifydError):
    """Raised when local playback fails."""

    reason = "Local playback failed"


class CastError(NotifydError):
    """Raised when the cast tool rejects a command."""

    reason = "Casting failed"


class StartupError(RuntimeError):
    """Fatal configuration problem detected while the daemon starts."""


class EngineNotFoundError(StartupError):
    """No usable TTS engine executable could be located."""


class CastUnavailableError(StartupError):
    """The cast tool is not installed."""


__all__ = [
    "BadRequestError",
    "CastError",
    "CastUnavailableError",
    "EngineNotFoundError",
    "NotFoundError",
    "NotifydError",
    "PlaybackError",
    "StartupError",
    "SynthesisError",
]
