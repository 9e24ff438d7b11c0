"""Speak, cast and notify pipelines shared by the HTTP routes."""

from __future__ import annotations

import logging
from urllib.parse import quote

from ..errors import CastError
from .artifacts import SpeechArtifact
from .cast import CastController
from .player import LocalPlayer
from .synthesizer import SpeechSynthesizer

logger = logging.getLogger(__name__)


class NotificationService:
    """Run one request from text to audible output.

    Every pipeline owns the artifact it synthesizes and releases it before
    returning, whatever the outcome.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        player: LocalPlayer,
        *,
        cast_controller: CastController | None,
        base_url: str,
        target: str,
        local_target: str,
        cast_unavailable_reason: str = "",
    ) -> None:
        self.synthesizer = synthesizer
        self.player = player
        self.cast_controller = cast_controller
        self.base_url = base_url.rstrip("/")
        self.target = target
        self.local_target = local_target
        self.cast_unavailable_reason = cast_unavailable_reason

    @property
    def can_cast(self) -> bool:
        return self.cast_controller is not None

    def static_url(self, artifact: SpeechArtifact) -> str:
        return f"{self.base_url}/static/{quote(artifact.name)}"

    async def speak(self, text: str) -> None:
        with await self.synthesizer.synthesize(text) as artifact:
            await self.player.play(artifact)

    async def cast(self, text: str, device: str) -> None:
        controller = self.cast_controller
        if controller is None:
            raise CastError(
                self.cast_unavailable_reason, reason="Casting is not available"
            )
        # The artifact must outlive the device-side fetch, so it is released last
        with await self.synthesizer.synthesize(text) as artifact:
            async with controller.target(device, self.static_url(artifact)) as target:
                await controller.cast(target)

    async def notify(self, text: str) -> str:
        """Speak or cast *text* depending on the configured target."""

        if self.target == self.local_target:
            await self.speak(text)
            return "speak"
        await self.cast(text, self.target)
        return "cast"


def build_base_url(host: str, port: int) -> str:
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{port}"


__all__ = ["NotificationService", "build_base_url"]
