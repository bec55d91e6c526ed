"""
Terminal renderer for the watch loop.

Redraws the whole screen every cycle:

    🎵 Title - Artist
    💿 Album
    [██████████░░░░░░░░░░] 01:05 / 03:30  30.9%
    lyric line
    ---- debug ----
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from ..runtime.loop import CycleReport

CLEAR_SCREEN = "\x1b[2J\x1b[H"

_URL_RE = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)


def strip_urls(text: str) -> str:
    """Remove URL-like substrings and tidy the leftover whitespace."""
    return re.sub(r"[ \t]{2,}", " ", _URL_RE.sub("", text)).strip()


def lyric_lines(lyrics: str, limit: int) -> list[str]:
    """Non-empty, URL-free lyric lines, at most limit of them."""
    lines = [strip_urls(line) for line in lyrics.splitlines()]
    return [line for line in lines if line][:limit]


class ConsoleRenderer:
    """Draws a CycleReport as plain text."""

    def __init__(
        self,
        stream: TextIO | None = None,
        bar_width: int = 30,
        show_lyrics: bool = True,
        max_lyric_lines: int = 3,
        debug: bool = False,
        clear: bool = True,
    ):
        self.stream = stream or sys.stdout
        self.bar_width = bar_width
        self.show_lyrics = show_lyrics
        self.max_lyric_lines = max_lyric_lines
        self.debug = debug
        self.clear = clear

    def render_lines(self, report: CycleReport) -> list[str]:
        song = report.snapshot
        lines: list[str] = []

        if song.is_valid:
            lines.append(f"🎵 {song.title} - {song.artist}" if song.artist else f"🎵 {song.title}")
            lines.append(f"💿 {song.album}" if song.album else "💿 -")
        else:
            lines.append("⏸️  No music playing or song title not found.")

        lines.append(
            f"[{song.progress_bar(self.bar_width)}] "
            f"{song.format_current_time()} / {song.format_total_time()}  "
            f"{song.progress_percent:5.1f}%"
        )

        if self.show_lyrics and song.lyrics:
            lines.append("")
            lines.extend(lyric_lines(song.lyrics, self.max_lyric_lines))

        if self.debug:
            lines.append("")
            lines.append("---- debug ----")
            lines.append(f"cycle: {report.cycle}  changed: {report.changed}")
            lines.append(f"module base: 0x{report.module_base:X}")
            lines.append(f"complete: {song.is_complete}")
            for name, reason in sorted(report.errors.items()):
                lines.append(f"⚠️  {name}: {reason}")

        return lines

    def render(self, report: CycleReport) -> None:
        text = "\n".join(self.render_lines(report))
        if self.clear:
            text = CLEAR_SCREEN + text
        self.stream.write(text + "\n")
        self.stream.flush()
