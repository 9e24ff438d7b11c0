"""Render text to WAV files with the resolved TTS engine."""

from __future__ import annotations

import hashlib
import itertools
import logging
import os
from datetime import datetime
from pathlib import Path

from ..errors import SynthesisError
from .artifacts import ScratchDirectory, SpeechArtifact
from .capability import run_capability
from .engines import ResolvedEngine

logger = logging.getLogger(__name__)


class SpeechSynthesizer:
    """Turn text into :class:`SpeechArtifact` objects under a scratch directory."""

    def __init__(
        self,
        engine: ResolvedEngine,
        locale: str,
        scratch: ScratchDirectory,
    ) -> None:
        self.engine = engine
        self.locale = locale
        self.scratch = scratch
        # Disambiguates identical texts hashed within the same microsecond
        self._nonce = itertools.count()

    def output_path(self, text: str) -> Path:
        """Return a fresh, collision-resistant output path for *text*."""

        stamp = datetime.now().isoformat(timespec="microseconds")
        seed = f"{text}{stamp}{os.getpid()}:{next(self._nonce)}"
        digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
        return self.scratch.path / f"{digest}.wav"

    def command(self, output: Path, text: str) -> list[str]:
        engine = self.engine.engine
        return [
            self.engine.executable,
            "-w",
            str(output),
            engine.locale_flag,
            engine.format_locale(self.locale),
            text,
        ]

    async def synthesize(self, text: str) -> SpeechArtifact:
        """Render *text* and return the handle owning the generated file."""

        output = self.output_path(text)
        result = await run_capability(self.command(output, text))
        if not result.ok:
            # Nothing references a partial file, so drop it right away
            output.unlink(missing_ok=True)
            logger.warning(
                "%s failed with status %d: %s",
                self.engine.engine.binary,
                result.returncode,
                result.error_text(),
            )
            raise SynthesisError(result.error_text())
        if not output.is_file():
            raise SynthesisError(
                f"{self.engine.engine.binary} reported success but wrote no audio"
            )

        logger.debug("Synthesized %s for %r", output.name, text)
        return SpeechArtifact(output, text, self.scratch)


__all__ = ["SpeechSynthesizer"]
