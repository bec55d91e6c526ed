"""
Pointer chain resolution over a foreign address space.

A chain is data, not code:
    base = module_base + field_offset, offsets = [0x10, 0x48, 0x0C]
    resolves to: [[[base] + 0x10] + 0x48] + 0x0C

Every offset is applied after dereferencing the running address, so an
empty chain resolves to the base itself.
"""

from __future__ import annotations

from .errors import InvalidAddress, NullPointer, ReadFault
from .process import MemorySource

MIN_VALID_ADDRESS = 0x1000
MAX_VALID_ADDRESS = 0x7FFFFFFFFFFFFFFF


class AddressResolver:
    """Walks pointer chains using only the raw read primitive."""

    def __init__(self, memory: MemorySource, pointer_size: int = 4):
        if pointer_size not in (4, 8):
            raise ValueError(f"pointer_size must be 4 or 8, got {pointer_size}")
        self.memory = memory
        self.pointer_size = pointer_size

    def read_pointer(self, address: int, index: int | None = None) -> int:
        """Read a pointer-sized little-endian value."""
        data = self.memory.read(address, self.pointer_size)
        if data is None or len(data) < self.pointer_size:
            raise ReadFault(address, index)
        return int.from_bytes(data[: self.pointer_size], "little", signed=False)

    def read_u32(self, address: int) -> int:
        """Read an unsigned 32-bit integer."""
        data = self.memory.read(address, 4)
        if data is None or len(data) < 4:
            raise ReadFault(address)
        return int.from_bytes(data[:4], "little", signed=False)

    def resolve(self, base: int, offsets: list[int] | tuple[int, ...]) -> int:
        """
        Follow a pointer chain from base.

        Raises ReadFault or NullPointer carrying the failing chain index.
        """
        address = base
        for index, offset in enumerate(offsets):
            value = self.read_pointer(address, index)
            if value == 0:
                raise NullPointer(address, index)
            address = value + offset
        return address

    @staticmethod
    def check(address: int) -> int:
        """Reject addresses outside the sane user-space range."""
        if not MIN_VALID_ADDRESS < address < MAX_VALID_ADDRESS:
            raise InvalidAddress(address)
        return address

    def resolve_valid(self, base: int, offsets: list[int] | tuple[int, ...]) -> int:
        """resolve() followed by check()."""
        return self.check(self.resolve(base, offsets))
