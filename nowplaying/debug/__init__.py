"""Logging helpers."""

from .trace import setup_logging

__all__ = ["setup_logging"]
