"""Renderers and file writers fed by the poll loop."""

from .console import ConsoleRenderer
from .files import JsonTitleWriter, TextTitleWriter, build_writers

__all__ = [
    "ConsoleRenderer",
    "JsonTitleWriter",
    "TextTitleWriter",
    "build_writers",
]
