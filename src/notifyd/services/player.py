"""Local playback of generated speech."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from ..errors import PlaybackError
from .artifacts import SpeechArtifact
from .capability import locate_executable, run_capability

logger = logging.getLogger(__name__)

# External players tried in order, with the arguments placed before the file
EXTERNAL_PLAYERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("paplay", ()),
    ("aplay", ("-q",)),
    ("ffplay", ("-nodisp", "-autoexit", "-loglevel", "error")),
    ("afplay", ()),
)


class AudioOutput(Protocol):
    name: str

    async def play(self, path: Path) -> None: ...


class NativeAudioOutput:
    """Decode with soundfile and play through sounddevice in-process.

    Playback completion is observed by polling the output stream rather than
    by a callback, so the caller stays blocked for the whole sentence.
    """

    name = "native"

    def __init__(self, *, poll_interval: float = 0.05) -> None:
        self.poll_interval = poll_interval

    @staticmethod
    def _backends():
        # PortAudio is loaded on import; keep that failure a playback error
        try:
            import sounddevice as sd
            import soundfile as sf
        except (ImportError, OSError) as exc:
            raise PlaybackError(f"Native audio output unavailable: {exc}") from exc
        return sd, sf

    async def play(self, path: Path) -> None:
        sd, sf = self._backends()
        try:
            data, samplerate = await asyncio.to_thread(
                sf.read, str(path), dtype="float32"
            )
        except (RuntimeError, OSError) as exc:
            raise PlaybackError(f"Cannot decode {path.name}: {exc}") from exc

        try:
            sd.play(data, samplerate)
            stream = sd.get_stream()
            while stream.active:
                await asyncio.sleep(self.poll_interval)
        except (sd.PortAudioError, ValueError) as exc:
            raise PlaybackError(f"Audio device error: {exc}") from exc
        finally:
            # Also silences the device when the request is cancelled mid-sentence
            sd.stop()


class ExternalAudioOutput:
    """Play through the first available external player binary.

    Availability is looked up on every call because players may be
    installed or removed while the daemon runs.
    """

    name = "external"

    def __init__(
        self,
        candidates: tuple[tuple[str, tuple[str, ...]], ...] = EXTERNAL_PLAYERS,
    ) -> None:
        self.candidates = candidates

    def find_player(self) -> list[str] | None:
        for binary, args in self.candidates:
            path = locate_executable(binary)
            if path:
                return [path, *args]
        return None

    async def play(self, path: Path) -> None:
        command = self.find_player()
        if command is None:
            tried = ", ".join(binary for binary, _ in self.candidates)
            raise PlaybackError(f"No audio player found in PATH (tried: {tried})")
        result = await run_capability([*command, str(path)])
        if not result.ok:
            raise PlaybackError(result.error_text())


class LocalPlayer:
    """Serialize access to the local audio device and play artifacts."""

    def __init__(self, output: AudioOutput) -> None:
        self.output = output
        self._device_lock = asyncio.Lock()

    @property
    def strategy(self) -> str:
        return self.output.name

    async def play(self, artifact: SpeechArtifact) -> None:
        if artifact.released:
            raise PlaybackError(f"Artifact {artifact.name} was already released")
        async with self._device_lock:
            logger.info("Playing %s via %s output", artifact.name, self.strategy)
            await self.output.play(artifact.path)


def build_player(strategy: str, *, poll_interval: float = 0.05) -> LocalPlayer:
    if strategy == "external":
        return LocalPlayer(ExternalAudioOutput())
    return LocalPlayer(NativeAudioOutput(poll_interval=poll_interval))


__all__ = [
    "AudioOutput",
    "EXTERNAL_PLAYERS",
    "ExternalAudioOutput",
    "LocalPlayer",
    "NativeAudioOutput",
    "build_player",
]
