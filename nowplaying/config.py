"""
Configuration models and loaders for nowplaying.
Uses Pydantic for validation and TOML for file format.

Offsets are version-specific: when the target updates they break and
must be re-discovered (e.g. with Cheat Engine) and written to config.toml.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import BaseModel, Field, ValidationError, field_validator

from .memory.fields import FieldKind, FieldPolicy, FieldSpec

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.toml")


def _parse_int(v: Any) -> Any:
    """Accept "0x2B2C"-style strings alongside plain integers."""
    if isinstance(v, str):
        return int(v, 0)
    return v


class MemoryOffsets(BaseModel):
    """Module-relative offsets and pointer chains per field."""
    song_name_offset: int = 0x0002B2C
    song_singer_offset: int = 0x0002B2C
    song_album_offset: int = 0x0002B2C
    song_lyrics_offset: int = 0x0002B2C
    current_time_offset: int = 0x0002B2C
    total_time_offset: int = 0x0002B2C
    song_name_chain: list[int] = Field(default_factory=lambda: [0x0])
    song_singer_chain: list[int] = Field(default_factory=lambda: [0x0])
    song_album_chain: list[int] = Field(default_factory=lambda: [0x0])
    song_lyrics_chain: list[int] = Field(default_factory=lambda: [0x0])
    current_time_chain: list[int] = Field(default_factory=lambda: [0x0])
    total_time_chain: list[int] = Field(default_factory=lambda: [0x0])
    title_offset: int = 0x90C  # Applied to string fields after the chain resolves

    @field_validator(
        "song_name_offset",
        "song_singer_offset",
        "song_album_offset",
        "song_lyrics_offset",
        "current_time_offset",
        "total_time_offset",
        "title_offset",
        mode="before",
    )
    @classmethod
    def parse_offset(cls, v: Any) -> Any:
        return _parse_int(v)

    @field_validator(
        "song_name_chain",
        "song_singer_chain",
        "song_album_chain",
        "song_lyrics_chain",
        "current_time_chain",
        "total_time_chain",
        mode="before",
    )
    @classmethod
    def parse_chain(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_parse_int(o) for o in v]
        return v


class Settings(BaseModel):
    """Runtime settings."""
    update_interval_ms: int = 500
    max_retries: int = 3  # Accepted for compatibility; sampling never retries
    process_name: str = "QQMusic.exe"
    module_name: str = "QQMusic.dll"
    output_txt: bool = True
    output_json: bool = True
    txt_filename: str = "now_playing.txt"
    json_filename: str = "now_playing.json"
    debug_mode: bool = False
    max_string_length: int = 4096
    pointer_size: int = 4  # Target is a 32-bit process
    progress_bar_width: int = 30
    show_lyrics: bool = True
    max_lyric_lines: int = 3

    @field_validator("update_interval_ms", "max_string_length", "progress_bar_width")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("max_retries", "max_lyric_lines")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("pointer_size")
    @classmethod
    def validate_pointer_size(cls, v: int) -> int:
        if v not in (4, 8):
            raise ValueError("pointer_size must be 4 or 8")
        return v

    @property
    def interval_seconds(self) -> float:
        return self.update_interval_ms / 1000.0


class Config(BaseModel):
    """Complete configuration."""
    memory_offsets: MemoryOffsets = Field(default_factory=MemoryOffsets)
    settings: Settings = Field(default_factory=Settings)

    @classmethod
    def from_toml(cls, path: str | Path) -> Config:
        """Load configuration from TOML file."""
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data)

    @classmethod
    def load(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
        """Load from file, falling back to defaults if missing or invalid."""
        path = Path(path)
        try:
            config = cls.from_toml(path)
        except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
            log.warning("Could not load config file %s: %s", path, e)
            log.warning("Using default configuration")
            return cls()
        log.debug("Loaded config file %s", path)
        return config

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with the given settings replaced; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        settings = Settings.model_validate({**self.settings.model_dump(), **changes})
        return self.model_copy(update={"settings": settings})

    def field_specs(self) -> dict[str, FieldSpec]:
        """Build the six FieldSpecs sampled every cycle."""
        m = self.memory_offsets

        def text(name: str, base: int, chain: list[int]) -> FieldSpec:
            return FieldSpec(name, FieldKind.STRING, base, tuple(chain), m.title_offset, FieldPolicy.REPORT)

        def counter(name: str, base: int, chain: list[int]) -> FieldSpec:
            return FieldSpec(name, FieldKind.UINT32, base, tuple(chain), 0, FieldPolicy.DEFAULT)

        specs = [
            text("title", m.song_name_offset, m.song_name_chain),
            text("artist", m.song_singer_offset, m.song_singer_chain),
            text("album", m.song_album_offset, m.song_album_chain),
            text("lyrics", m.song_lyrics_offset, m.song_lyrics_chain),
            counter("current_time", m.current_time_offset, m.current_time_chain),
            counter("total_time", m.total_time_offset, m.total_time_chain),
        ]
        return {spec.name: spec for spec in specs}
