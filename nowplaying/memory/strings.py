"""
Wide-character string decoding from unlabelled memory.

The target may store a string either as a length-prefixed object
(u32 length followed by UTF-16LE code units) or as a raw null-terminated
UTF-16LE buffer. Nothing in memory says which, so both are tried in a
fixed order:

    1. length-prefixed: plausible only if 0 < length <= max_chars
    2. null-terminated: only when (1) found no plausible length
"""

from __future__ import annotations

import logging

from .errors import EmptyRead
from .process import MemorySource

log = logging.getLogger(__name__)

CODE_UNIT = 2


class StringDecoder:
    """Decode UTF-16LE strings through the raw read primitive."""

    def __init__(self, memory: MemorySource, max_chars: int = 4096, chunk_chars: int = 64):
        self.memory = memory
        self.max_chars = max_chars
        self.chunk_chars = max(1, chunk_chars)

    def decode(self, address: int) -> str:
        """
        Decode the string at address.

        Raises EmptyRead if no code units could be obtained.
        """
        if address == 0:
            raise EmptyRead(address)

        raw = self.read_length_prefixed(address)
        if raw is None:
            raw = self.read_null_terminated(address)

        if not raw:
            raise EmptyRead(address)

        log.debug("Raw u16 buffer at 0x%X: %s", address, raw.hex(" ", CODE_UNIT))
        return raw.decode("utf-16-le", errors="replace")

    def read_length_prefixed(self, address: int) -> bytes | None:
        """
        Read a u32-length-prefixed string body.

        Returns None when the first four bytes are not a plausible length.
        """
        data = self.memory.read(address, 4)
        if data is None or len(data) < 4:
            return None

        length = int.from_bytes(data[:4], "little", signed=False)
        if not 0 < length <= self.max_chars:
            return None

        return self._read_units(address + 4, length)

    def read_null_terminated(self, address: int) -> bytes:
        """Read up to max_chars code units, stopping at the first zero unit."""
        return self._read_units(address, self.max_chars)

    def _read_units(self, address: int, limit: int) -> bytes:
        """
        Collect up to limit code units starting at address.

        Stops at a zero code unit or a failed unit read. A chunk that
        faults or comes back short is re-read one unit at a time, so units
        just before unreadable memory are kept.
        """
        out = bytearray()
        remaining = limit

        while remaining > 0:
            count = min(self.chunk_chars, remaining)
            data = self.memory.read(address, count * CODE_UNIT)
            if data is None or len(data) < count * CODE_UNIT:
                data = self._read_unit_by_unit(address, count)
            data = data[:count * CODE_UNIT]
            complete = len(data) == count * CODE_UNIT

            for pos in range(0, len(data), CODE_UNIT):
                unit = data[pos:pos + CODE_UNIT]
                if unit == b"\x00\x00":
                    return bytes(out)
                out += unit

            if not complete:
                break

            address += count * CODE_UNIT
            remaining -= count

        return bytes(out)

    def _read_unit_by_unit(self, address: int, count: int) -> bytes:
        """Read up to count code units singly, stopping at the first failure."""
        out = bytearray()
        for _ in range(count):
            unit = self.memory.read(address, CODE_UNIT)
            if unit is None or len(unit) < CODE_UNIT:
                break
            out += unit[:CODE_UNIT]
            address += CODE_UNIT
        return bytes(out)
