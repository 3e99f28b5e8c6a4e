from io import BytesIO
from struct import pack

import pytest

from wartool.errors import ArchiveIOError
from wartool.lzss import bits, decompress

def test_bits_lsb_first():
    assert bits(0b00000101) == (1, 0, 1, 0, 0, 0, 0, 0)

def test_literals():
    stream = b"\xff" + b"ABCDEFGH"
    assert decompress(BytesIO(stream), 8, len(stream)) == b"ABCDEFGH"

def test_backref_reads_bytes_it_just_wrote():
    # two literals, then a reference to pos 0 with run 0 (3 bytes)
    stream = bytes([0b011]) + b"AB" + pack("<H", 0)
    assert decompress(BytesIO(stream), 5, len(stream)) == b"ABABA"

def test_backref_overlapping_run():
    code = (2 << 12) | 0  # run 2 -> 5 bytes
    stream = bytes([0b1]) + b"x" + pack("<H", code)
    assert decompress(BytesIO(stream), 6, len(stream)) == b"xxxxxx"

def test_backref_wraps_window():
    # pos 4095 wraps to 0 and 1, both still zero
    code = 0x0FFF
    stream = bytes([0b0]) + pack("<H", code)
    assert decompress(BytesIO(stream), 3, len(stream)) == b"\x00\x00\x00"

def test_stops_at_target_inside_backref():
    stream = bytes([0b011]) + b"AB" + pack("<H", 0xF000)
    assert decompress(BytesIO(stream), 4, len(stream)) == b"ABAB"

def test_stops_at_target_inside_control_byte():
    stream = b"\xff" + b"ABC"
    fd = BytesIO(stream + b"trailing")
    assert decompress(fd, 3, len(stream)) == b"ABC"
    assert fd.read() == b"trailing"

def test_zero_size():
    assert decompress(BytesIO(b""), 0, 0) == b""

def test_truncated_literal():
    with pytest.raises(ArchiveIOError):
        decompress(BytesIO(b"\xff" + b"ABC"), 8, 9)

def test_truncated_backref():
    with pytest.raises(ArchiveIOError):
        decompress(BytesIO(bytes([0b0]) + b"\x00"), 3, 3)

def test_budget_exhausted_before_target():
    stream = b"\xff" + b"ABCDEFGH" + b"\xff" + b"IJ"
    with pytest.raises(ArchiveIOError):
        decompress(BytesIO(stream), 10, 9)

def test_deterministic():
    stream = bytes([0b0111]) + b"abc" + pack("<H", (1 << 12) | 1) + b"\x00" * 8
    first = decompress(BytesIO(stream), 7, len(stream))
    second = decompress(BytesIO(stream), 7, len(stream))
    assert first == second == b"abcbcbc"

def test_window_not_shared_between_calls():
    decompress(BytesIO(b"\xff" + b"ABCDEFGH"), 8, 9)
    # position 0 was written by the previous call only
    stream = bytes([0b0]) + pack("<H", 0)
    assert decompress(BytesIO(stream), 3, len(stream)) == b"\x00\x00\x00"
