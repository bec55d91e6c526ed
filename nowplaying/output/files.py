"""
Now-playing files for external consumers (e.g. OBS text sources).

Both files hold UTF-16LE text with no BOM and no terminator, and are fully
rewritten on every write.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from ..song import SongSnapshot

if TYPE_CHECKING:
    from ..config import Settings


def encode_utf16le(text: str) -> bytes:
    return text.encode("utf-16-le")


def write_title_txt(path: str | Path, title: str) -> None:
    Path(path).write_bytes(encode_utf16le(title))


def write_title_json(path: str | Path, title: str) -> None:
    body = json.dumps({"title": title}, ensure_ascii=False)
    Path(path).write_bytes(encode_utf16le(body))


class TextTitleWriter:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def write(self, snapshot: SongSnapshot) -> None:
        write_title_txt(self.path, snapshot.title)


class JsonTitleWriter:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def write(self, snapshot: SongSnapshot) -> None:
        write_title_json(self.path, snapshot.title)


def build_writers(settings: Settings) -> list[TextTitleWriter | JsonTitleWriter]:
    """Writers enabled by the output toggles."""
    writers: list[TextTitleWriter | JsonTitleWriter] = []
    if settings.output_txt:
        writers.append(TextTitleWriter(settings.txt_filename))
    if settings.output_json:
        writers.append(JsonTitleWriter(settings.json_filename))
    return writers
