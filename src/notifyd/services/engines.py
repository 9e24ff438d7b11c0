"""TTS engine discovery and locale resolution."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from ..errors import EngineNotFoundError
from .capability import locate_executable

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"

# Variables consulted for the locale, most specific first
_LOCALE_VARIABLES = ("LC_ALL", "LC_MESSAGES", "LANG")
_NEUTRAL_LOCALES = frozenset({"C", "POSIX"})


class TTSEngine(str, Enum):
    """Engines the synthesizer knows how to drive."""

    PICO2WAVE = "pico2wave"
    ESPEAK = "espeak"
    ESPEAK_NG = "espeak-ng"

    @property
    def binary(self) -> str:
        return self.value

    @property
    def locale_flag(self) -> str:
        return "-l" if self is TTSEngine.PICO2WAVE else "-v"

    def format_locale(self, locale: str) -> str:
        # espeak voices are lowercase ("en-us"); pico2wave expects "en-US"
        return locale if self is TTSEngine.PICO2WAVE else locale.lower()


class EngineChoice(str, Enum):
    """Engine requested by configuration; ``AUTO`` is resolved, never run."""

    AUTO = "auto"
    PICO2WAVE = "pico2wave"
    ESPEAK = "espeak"
    ESPEAK_NG = "espeak-ng"


# Probe order used for EngineChoice.AUTO
AUTO_CANDIDATES: tuple[TTSEngine, ...] = (
    TTSEngine.PICO2WAVE,
    TTSEngine.ESPEAK,
    TTSEngine.ESPEAK_NG,
)


@dataclass(frozen=True)
class ResolvedEngine:
    engine: TTSEngine
    executable: str


def resolve_engine(requested: EngineChoice) -> ResolvedEngine:
    """Return the engine to use, failing fast when none can be located."""

    if requested is EngineChoice.AUTO:
        for candidate in AUTO_CANDIDATES:
            path = locate_executable(candidate.binary)
            if path:
                logger.info("Using TTS engine %s (%s)", candidate.binary, path)
                return ResolvedEngine(candidate, path)
        tried = ", ".join(c.binary for c in AUTO_CANDIDATES)
        raise EngineNotFoundError(
            f"Cannot find any TTS engine in PATH (tried: {tried})"
        )

    engine = TTSEngine(requested.value)
    path = locate_executable(engine.binary)
    if not path:
        raise EngineNotFoundError(f"Cannot find TTS engine {engine.binary} in PATH")
    logger.info("Using TTS engine %s (%s)", engine.binary, path)
    return ResolvedEngine(engine, path)


def normalize_locale(raw: str | None) -> str:
    """Turn a POSIX locale string such as ``fr_FR.UTF-8`` into ``fr-FR``."""

    if not raw:
        return DEFAULT_LOCALE
    value = raw.strip().split(".", 1)[0].split("@", 1)[0]
    if not value or value in _NEUTRAL_LOCALES:
        return DEFAULT_LOCALE
    return value.replace("_", "-")


def resolve_locale(
    environ: Mapping[str, str] | None = None,
    *,
    override: str | None = None,
) -> str:
    """Derive the daemon locale from *override* or the process environment."""

    if override:
        return normalize_locale(override)
    env = os.environ if environ is None else environ
    for name in _LOCALE_VARIABLES:
        value = env.get(name)
        if value:
            return normalize_locale(value)
    return DEFAULT_LOCALE


__all__ = [
    "AUTO_CANDIDATES",
    "DEFAULT_LOCALE",
    "EngineChoice",
    "ResolvedEngine",
    "TTSEngine",
    "normalize_locale",
    "resolve_engine",
    "resolve_locale",
]
