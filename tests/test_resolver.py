"""Tests for pointer chain resolution."""

import pytest

from nowplaying.memory.errors import InvalidAddress, NullPointer, ReadFault
from nowplaying.memory.resolver import MAX_VALID_ADDRESS, MIN_VALID_ADDRESS, AddressResolver


def test_empty_chain_returns_base(memory):
    resolver = AddressResolver(memory)
    assert resolver.resolve(0x400000, []) == 0x400000
    assert memory.reads == []


def test_null_first_link_reports_index_zero(memory):
    memory.put_u32(0x400000, 0)
    resolver = AddressResolver(memory)

    with pytest.raises(NullPointer) as exc:
        resolver.resolve(0x400000, [0x10])

    assert exc.value.index == 0


def test_multi_level_chain(memory):
    memory.put_u32(0x400000, 0x500000)
    memory.put_u32(0x500010, 0x600000)
    resolver = AddressResolver(memory)

    assert resolver.resolve(0x400000, [0x10, 0x24]) == 0x600024


def test_read_fault_reports_failing_index(memory):
    memory.put_u32(0x400000, 0x500000)
    resolver = AddressResolver(memory)

    with pytest.raises(ReadFault) as exc:
        resolver.resolve(0x400000, [0x10, 0x24])

    assert exc.value.index == 1
    assert exc.value.address == 0x500010


def test_short_read_is_fault(memory):
    memory.put(0x400000, b"\x01\x02")
    resolver = AddressResolver(memory)

    with pytest.raises(ReadFault):
        resolver.resolve(0x400000, [0])


def test_null_in_middle_of_chain(memory):
    memory.put_u32(0x400000, 0x500000)
    memory.put_u32(0x500008, 0)
    resolver = AddressResolver(memory)

    with pytest.raises(NullPointer) as exc:
        resolver.resolve(0x400000, [0x8, 0x4])

    assert exc.value.index == 1


def test_eight_byte_pointers(memory):
    memory.put_u64(0x400000, 0x1_0000_0000)
    resolver = AddressResolver(memory, pointer_size=8)

    assert resolver.resolve(0x400000, [0x20]) == 0x1_0000_0020


def test_invalid_pointer_size():
    with pytest.raises(ValueError):
        AddressResolver(None, pointer_size=2)


@pytest.mark.parametrize("address", [0, 0x10, MIN_VALID_ADDRESS, MAX_VALID_ADDRESS, 0xFFFFFFFFFFFFFFFF])
def test_check_rejects_garbage(address):
    with pytest.raises(InvalidAddress):
        AddressResolver.check(address)


def test_check_accepts_user_space():
    assert AddressResolver.check(0x400000) == 0x400000


def test_resolve_valid_rejects_before_reading(memory):
    memory.put_u32(0x400000, 0x10)
    resolver = AddressResolver(memory)

    with pytest.raises(InvalidAddress):
        resolver.resolve_valid(0x400000, [0x0])

    assert memory.reads == [(0x400000, 4)]


def test_read_u32(memory):
    memory.put_u32(0x400000, 215)
    assert AddressResolver(memory).read_u32(0x400000) == 215
