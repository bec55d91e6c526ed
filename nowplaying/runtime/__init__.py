"""Polling loop, change detection and cancellation."""

from .control import CancelToken, install_signal_handlers
from .loop import ChangeDetector, CycleReport, DetectorState, PollLoop, persist

__all__ = [
    "CancelToken",
    "ChangeDetector",
    "CycleReport",
    "DetectorState",
    "PollLoop",
    "install_signal_handlers",
    "persist",
]
