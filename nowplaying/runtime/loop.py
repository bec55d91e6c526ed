"""
Polling loop and change detection.

One cooperative cycle:
    sample -> diff -> render (every cycle) -> persist (only if changed)
    -> sleep -> check cancellation

Identity is title + artist. Position changes alone never count as a
change, so persisted files are rewritten only when the song changes while
the renderer keeps showing live progress.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Protocol

from ..memory.reader import SampleResult
from ..song import SongSnapshot
from .control import CancelToken

log = logging.getLogger(__name__)


class DetectorState(Enum):
    IDLE = "idle"  # No snapshot seen yet
    TRACKING = "tracking"


class ChangeDetector:
    """Compares each snapshot with the previous one."""

    def __init__(self):
        self._previous: SongSnapshot | None = None

    @property
    def state(self) -> DetectorState:
        return DetectorState.IDLE if self._previous is None else DetectorState.TRACKING

    @property
    def previous(self) -> SongSnapshot | None:
        return self._previous

    def update(self, snapshot: SongSnapshot) -> bool:
        """Store snapshot and report whether its identity changed."""
        previous = self._previous
        self._previous = snapshot
        if previous is None:
            return True
        return snapshot.title != previous.title or snapshot.artist != previous.artist


@dataclass(frozen=True)
class CycleReport:
    """Everything a renderer needs to draw one cycle."""
    cycle: int
    snapshot: SongSnapshot
    changed: bool
    module_base: int = 0
    errors: dict[str, str] = field(default_factory=dict)


class Sampler(Protocol):
    module_base: int

    def sample_with_errors(self) -> SampleResult: ...


class Renderer(Protocol):
    def render(self, report: CycleReport) -> None: ...


class SnapshotWriter(Protocol):
    def write(self, snapshot: SongSnapshot) -> None: ...


def persist(snapshot: SongSnapshot, writers: Iterable[SnapshotWriter]) -> None:
    """Hand the snapshot to every writer; failures are logged and skipped."""
    for writer in writers:
        try:
            writer.write(snapshot)
        except OSError as e:
            log.warning("Error writing %s: %s", getattr(writer, "path", writer), e)


class PollLoop:
    """
    Drives the sampler on a fixed cadence until cancelled.

    Cancellation is checked only after the sleep, so an in-flight read or
    render always completes.
    """

    def __init__(
        self,
        sampler: Sampler,
        token: CancelToken,
        interval: float,
        renderer: Renderer | None = None,
        writers: Iterable[SnapshotWriter] = (),
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.sampler = sampler
        self.token = token
        self.interval = interval
        self.renderer = renderer
        self.writers = list(writers)
        self.detector = ChangeDetector()
        self._sleep = sleep
        self._cycle = 0

    @property
    def cycles(self) -> int:
        return self._cycle

    def step(self) -> CycleReport:
        """Run one sample/diff/render/persist cycle (no sleep)."""
        self._cycle += 1
        result = self.sampler.sample_with_errors()
        changed = self.detector.update(result.snapshot)

        report = CycleReport(
            cycle=self._cycle,
            snapshot=result.snapshot,
            changed=changed,
            module_base=self.sampler.module_base,
            errors=result.errors,
        )

        if self.renderer is not None:
            self.renderer.render(report)

        if changed:
            # Keep INFO quiet while the renderer owns the screen
            level = logging.DEBUG if self.renderer is not None else logging.INFO
            log.log(level, "Now playing: %s - %s", result.snapshot.title, result.snapshot.artist)
            self.persist(result.snapshot)

        return report

    def persist(self, snapshot: SongSnapshot) -> None:
        persist(snapshot, self.writers)

    def run(self, max_cycles: int | None = None) -> int:
        """
        Loop until cancelled (or max_cycles reached).

        Returns the number of cycles run.
        """
        start = self._cycle
        while True:
            self.step()
            if max_cycles is not None and self._cycle - start >= max_cycles:
                break
            self._sleep(self.interval)
            if self.token.cancelled:
                log.info("Cancelled after %d cycles", self._cycle - start)
                break
        return self._cycle - start
