"""Tests for the wide-string decoder."""

import pytest

from nowplaying.memory.errors import EmptyRead
from nowplaying.memory.strings import StringDecoder


def test_length_prefixed(memory):
    memory.put(0x400000, bytes([0x03, 0, 0, 0, ord("A"), 0, ord("B"), 0, ord("C"), 0]))
    assert StringDecoder(memory).decode(0x400000) == "ABC"


def test_null_terminated_fallback(memory):
    memory.put(0x400000, bytes([ord("X"), 0, ord("Y"), 0, 0, 0]))
    assert StringDecoder(memory).decode(0x400000) == "XY"


def test_length_prefixed_stops_at_declared_length(memory):
    memory.put(0x400000, bytes([0x02, 0, 0, 0]) + "ABCD".encode("utf-16-le"))
    assert StringDecoder(memory).decode(0x400000) == "AB"


def test_length_prefixed_stops_early_at_zero_unit(memory):
    memory.put(0x400000, bytes([0x05, 0, 0, 0]) + "AB".encode("utf-16-le") + b"\x00\x00CD")
    assert StringDecoder(memory).decode(0x400000) == "AB"


def test_length_prefixed_stops_at_failed_read(memory):
    memory.put(0x400000, bytes([0x10, 0, 0, 0]) + "Hi".encode("utf-16-le"))
    assert StringDecoder(memory).decode(0x400000) == "Hi"


def test_length_above_budget_falls_back(memory):
    decoder = StringDecoder(memory, max_chars=8)
    assert decoder.read_length_prefixed(0x400000) is None

    memory.put(0x400000, bytes([0x09, 0, 0, 0]))
    assert decoder.read_length_prefixed(0x400000) is None


def test_null_terminated_respects_budget(memory):
    memory.put(0x400000, "ABCDEFGH".encode("utf-16-le"))
    decoder = StringDecoder(memory, max_chars=3, chunk_chars=2)
    assert decoder.read_null_terminated(0x400000) == "ABC".encode("utf-16-le")


def test_chunked_reads_span_chunks(memory):
    text = "月亮代表我的心" * 5
    memory.put_wstring(0x400000, text, prefixed=True)
    assert StringDecoder(memory, chunk_chars=4).decode(0x400000) == text


def test_unicode_null_terminated(memory):
    memory.put_wstring(0x400000, "晴天")
    assert StringDecoder(memory).decode(0x400000) == "晴天"


def test_lone_surrogate_is_replaced(memory):
    memory.put(0x400000, b"\x00\xd8A\x00\x00\x00")
    assert StringDecoder(memory).decode(0x400000) == "�A"


class TestFaultingMemory:
    """Reads that cross into unmapped memory fault as a whole."""

    def test_null_terminated_at_end_of_mapping(self, strict_memory):
        strict_memory.put_wstring(0x400000, "Hi")
        assert StringDecoder(strict_memory).decode(0x400000) == "Hi"

    def test_unterminated_string_stops_at_unmapped_byte(self, strict_memory):
        strict_memory.put(0x400000, "Hi".encode("utf-16-le"))
        assert StringDecoder(strict_memory).decode(0x400000) == "Hi"

    def test_length_prefixed_stops_at_unmapped_byte(self, strict_memory):
        strict_memory.put(0x400000, bytes([0x05, 0, 0, 0]) + "AB".encode("utf-16-le"))
        assert StringDecoder(strict_memory).decode(0x400000) == "AB"

    def test_full_chunks_then_partial_chunk(self, strict_memory):
        strict_memory.put(0x400000, "ABCDEF".encode("utf-16-le"))
        assert StringDecoder(strict_memory, chunk_chars=4).decode(0x400000) == "ABCDEF"


def test_empty_string_raises(memory):
    memory.put(0x400000, b"\x00\x00\x00\x00")
    with pytest.raises(EmptyRead):
        StringDecoder(memory).decode(0x400000)


def test_unreadable_address_raises(memory):
    with pytest.raises(EmptyRead):
        StringDecoder(memory).decode(0x400000)


def test_zero_address_raises_without_reading(memory):
    with pytest.raises(EmptyRead):
        StringDecoder(memory).decode(0)
    assert memory.reads == []
