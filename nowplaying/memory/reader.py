"""
Song reader - samples every configured field into one SongSnapshot.

Fields are extracted independently: a broken chain for the album does not
stop the title from being read. A snapshot without a title is a normal
result ("nothing playing" or stale offsets), not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..song import SongSnapshot
from .fields import FieldExtractor, FieldSpec
from .process import MemorySource
from .resolver import AddressResolver
from .strings import StringDecoder

if TYPE_CHECKING:
    from ..config import Config

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleResult:
    snapshot: SongSnapshot
    errors: dict[str, str] = field(default_factory=dict)  # field name -> reason


class SongSampler:
    """
    Reads the now-playing fields from a target process.

    The memory source is borrowed: the sampler never closes it.
    """

    def __init__(self, memory: MemorySource, module_base: int, config: Config):
        settings = config.settings
        self.module_base = module_base
        self.specs: dict[str, FieldSpec] = config.field_specs()
        self.extractor = FieldExtractor(
            AddressResolver(memory, pointer_size=settings.pointer_size),
            StringDecoder(memory, max_chars=settings.max_string_length),
            module_base,
        )

    def sample_with_errors(self) -> SampleResult:
        """Read all fields, recording which ones were unavailable."""
        values: dict[str, str | int] = {}
        errors: dict[str, str] = {}

        for name, spec in self.specs.items():
            result = self.extractor.extract(spec)
            values[name] = result.value
            if not result.ok:
                errors[name] = result.error or ""

        snapshot = SongSnapshot.build(**values)

        if snapshot.is_valid:
            log.debug(
                "Read song: title=%r artist=%r album=%r lyrics=%r",
                snapshot.title,
                snapshot.artist,
                snapshot.album,
                snapshot.lyrics[:50],
            )
        else:
            log.debug("No song title read (%d field errors)", len(errors))

        return SampleResult(snapshot, errors)

    def sample(self) -> SongSnapshot:
        return self.sample_with_errors().snapshot
