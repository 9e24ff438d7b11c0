"""CLI entrypoint for running the daemon with uvicorn."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Sequence

import uvicorn

from .app import create_app
from .config import Settings
from .errors import StartupError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notifyd",
        description="Speak short notifications locally or on cast devices.",
    )
    parser.add_argument(
        "--config",
        help="Path to an env file with NOTIFYD_* settings (default: .env)",
    )
    parser.add_argument(
        "--engine",
        choices=["auto", "pico2wave", "espeak", "espeak-ng"],
        help="TTS engine to use",
    )
    parser.add_argument("--host", help="Address to listen on")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument(
        "--target",
        help="Device id used by /notify, or 'local' for the local speakers",
    )
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Merge command-line flags over environment and env-file settings."""

    overrides: dict[str, Any] = {
        key: value
        for key, value in (
            ("engine", args.engine),
            ("host", args.host),
            ("port", args.port),
            ("target", args.target),
        )
        if value is not None
    }
    if args.config:
        return Settings(_env_file=args.config, **overrides)  # pyright: ignore[reportCallIssue]
    return Settings(**overrides)  # pyright: ignore[reportCallIssue]


def main(argv: Sequence[str] | None = None) -> None:
    """Run the ASGI server."""

    args = build_parser().parse_args(argv)
    settings = load_settings(args)
    try:
        app = create_app(settings, log_level=args.log_level)
    except StartupError as exc:
        logger.error("Cannot start notifyd: %s", exc)
        sys.exit(1)

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
