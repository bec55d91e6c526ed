"""
Runtime control: cooperative cancellation.

The poll loop never gets interrupted mid-read; a signal only sets a flag
that the loop checks once per cycle, after its sleep.
"""

from __future__ import annotations

import logging
import signal
from threading import Event
from typing import Any

log = logging.getLogger(__name__)


class CancelToken:
    """Thread- and signal-safe stop flag."""

    def __init__(self):
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def install_signal_handlers(token: CancelToken) -> None:
    """Route SIGINT (and SIGTERM where available) to token.cancel()."""

    def _handler(signum: int, frame: Any) -> None:
        log.info("Received signal %d, stopping after this cycle", signum)
        token.cancel()

    signal.signal(signal.SIGINT, _handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _handler)
