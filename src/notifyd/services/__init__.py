"""Services behind the notification daemon.

    text ──▶ SpeechSynthesizer ──▶ SpeechArtifact ──┬──▶ LocalPlayer
                                                     └──▶ CastController (via /static URL)
"""

from .artifacts import ScratchDirectory, SpeechArtifact, sweep_stale_scratch_dirs
from .cast import CastController, CastTarget
from .engines import EngineChoice, ResolvedEngine, TTSEngine, resolve_engine, resolve_locale
from .notifier import NotificationService, build_base_url
from .player import LocalPlayer, build_player
from .synthesizer import SpeechSynthesizer

__all__ = [
    "CastController",
    "CastTarget",
    "EngineChoice",
    "LocalPlayer",
    "NotificationService",
    "ResolvedEngine",
    "ScratchDirectory",
    "SpeechArtifact",
    "SpeechSynthesizer",
    "TTSEngine",
    "build_base_url",
    "build_player",
    "resolve_engine",
    "resolve_locale",
    "sweep_stale_scratch_dirs",
]
