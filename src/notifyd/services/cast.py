"""Control of networked speakers through an external cast tool."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import CastError, CastUnavailableError
from .capability import locate_executable, run_capability

logger = logging.getLogger(__name__)

DEFAULT_CAST_TOOL = "go-chromecast"


class CastController:
    """Issue ``load`` and ``stop`` commands to cast devices.

    The tool must be installed when the controller is built; there is no
    silent fallback to local playback here.
    """

    def __init__(self, tool: str = DEFAULT_CAST_TOOL) -> None:
        executable = locate_executable(tool)
        if not executable:
            raise CastUnavailableError(f"Cannot find cast tool {tool} in PATH")
        self.tool = tool
        self.executable = executable
        logger.info("Using cast tool %s (%s)", tool, executable)

    def target(self, device: str, url: str) -> "CastTarget":
        return CastTarget(device=device, url=url, controller=self)

    async def cast(self, target: "CastTarget") -> None:
        logger.info("Casting %s to %s", target.url, target.device)
        result = await run_capability(
            [self.executable, "load", target.url, "-u", target.device]
        )
        if not result.ok:
            logger.warning("Cast to %s failed: %s", target.device, result.error_text())
            raise CastError(result.error_text())

    async def stop(self, device: str) -> None:
        result = await run_capability([self.executable, "stop", "-u", device])
        if not result.ok:
            raise CastError(result.error_text(), reason="Stopping cast failed")


@dataclass
class CastTarget:
    """One in-flight cast; leaving the ``async with`` block stops the device."""

    device: str
    url: str
    controller: CastController = field(repr=False)

    async def __aenter__(self) -> "CastTarget":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        try:
            await self.controller.stop(self.device)
        except CastError as exc:
            logger.warning("Best-effort stop of %s failed: %s", self.device, exc.detail)


__all__ = ["CastController", "CastTarget", "DEFAULT_CAST_TOOL"]
