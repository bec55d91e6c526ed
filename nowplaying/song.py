"""Now-playing snapshot model."""

from __future__ import annotations

from dataclasses import dataclass

FILLED_GLYPH = "█"
EMPTY_GLYPH = "░"


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def progress_percent(current_time: int, total_time: int) -> float:
    """Playback progress in [0, 100]; exactly 0.0 when total is unknown."""
    if total_time <= 0:
        return 0.0
    return min(100.0, max(0.0, current_time / total_time * 100.0))


@dataclass(slots=True, frozen=True)
class SongSnapshot:
    """Immutable view of what is playing at one sampling instant."""

    title: str = ""
    artist: str = ""
    album: str = ""
    lyrics: str = ""
    current_time: int = 0  # Seconds
    total_time: int = 0  # Seconds
    progress_percent: float = 0.0  # 0.0 - 100.0

    @classmethod
    def build(
        cls,
        title: str = "",
        artist: str = "",
        album: str = "",
        lyrics: str = "",
        current_time: int = 0,
        total_time: int = 0,
    ) -> SongSnapshot:
        """Create a snapshot with progress derived from the two times."""
        current_time = max(0, current_time)
        total_time = max(0, total_time)
        return cls(
            title=title,
            artist=artist,
            album=album,
            lyrics=lyrics,
            current_time=current_time,
            total_time=total_time,
            progress_percent=progress_percent(current_time, total_time),
        )

    @classmethod
    def placeholder(cls, title: str = "ERROR") -> SongSnapshot:
        """Stand-in persisted by one-shot runs when nothing could be read."""
        return cls(title=title)

    @property
    def is_valid(self) -> bool:
        return bool(self.title)

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.artist and self.album)

    def format_current_time(self) -> str:
        return format_time(self.current_time)

    def format_total_time(self) -> str:
        return format_time(self.total_time)

    def progress_bar(
        self,
        width: int,
        filled: str = FILLED_GLYPH,
        empty: str = EMPTY_GLYPH,
    ) -> str:
        """Textual progress bar; blank when the total time is unknown."""
        if self.total_time == 0:
            return " " * width
        count = min(width, int(self.progress_percent / 100.0 * width))
        return filled * count + empty * (width - count)
