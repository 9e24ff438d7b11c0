"""Utility helpers for the daemon."""

from .network import detect_local_address

__all__ = ["detect_local_address"]
