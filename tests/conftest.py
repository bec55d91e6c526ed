"""Shared fixtures: an in-process fake of a target address space."""

import logging
import struct

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by cli.main() so later tests start clean."""
    yield
    logger = logging.getLogger("nowplaying")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class FakeMemory:
    """Sparse address space made of byte regions."""

    def __init__(self):
        self.regions: dict[int, bytearray] = {}
        self.reads: list[tuple[int, int]] = []

    def put(self, address: int, data: bytes) -> None:
        self.regions[address] = bytearray(data)

    def put_u32(self, address: int, value: int) -> None:
        self.put(address, struct.pack("<I", value))

    def put_u64(self, address: int, value: int) -> None:
        self.put(address, struct.pack("<Q", value))

    def put_wstring(self, address: int, text: str, prefixed: bool = False) -> None:
        body = text.encode("utf-16-le")
        if prefixed:
            self.put(address, struct.pack("<I", len(text)) + body + b"\x00\x00")
        else:
            self.put(address, body + b"\x00\x00")

    def read(self, address: int, size: int) -> bytes | None:
        self.reads.append((address, size))
        for base, data in self.regions.items():
            if base <= address < base + len(data):
                start = address - base
                return bytes(data[start:start + size])
        return None


class StrictMemory(FakeMemory):
    """Faults any read that touches an unmapped byte, like ReadProcessMemory."""

    def read(self, address: int, size: int) -> bytes | None:
        self.reads.append((address, size))
        for base, data in self.regions.items():
            if base <= address and address + size <= base + len(data):
                start = address - base
                return bytes(data[start:start + size])
        return None


@pytest.fixture
def memory() -> FakeMemory:
    return FakeMemory()


@pytest.fixture
def strict_memory() -> StrictMemory:
    return StrictMemory()
