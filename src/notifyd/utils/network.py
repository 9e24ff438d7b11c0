"""Network helpers."""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

# Documentation address (RFC 5737); connecting a UDP socket sends nothing
_PROBE_ADDRESS = ("192.0.2.1", 9)


def detect_local_address(default: str = "127.0.0.1") -> str:
    """Return the address of the interface used for outbound traffic."""

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(_PROBE_ADDRESS)
        address = sock.getsockname()[0]
    except OSError as exc:
        logger.warning("Cannot detect local address, using %s: %s", default, exc)
        return default
    finally:
        sock.close()
    return address or default


__all__ = ["detect_local_address"]
