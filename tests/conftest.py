from io import BytesIO
from struct import pack

import pytest

DOS_RETAIL = b"\x18\x00\x00\x00"
DOS_SHAREWARE = b"\x19\x00\x00\x00"
MAC_RETAIL = b"\x00\x00\x00\x1a"
MAC_SHAREWARE = b"\x00\x00\x00\x19"

def raw_entry(data):
    return pack("<I", len(data)) + data

def compressed_entry(size, payload):
    return pack("<I", 0x20000000 | size) + payload

def build_archive(entries, magic=DOS_RETAIL, placeholders=()):
    """Lay out `entries` (bytes, header included) after the file table.

    `placeholders` maps slot index to a sentinel offset, or to None for
    the retail next-minus-one convention."""
    placeholders = dict(placeholders)
    count = len(entries) + len(placeholders)
    data = bytearray()
    offsets = []
    base = 8 + 4 * count
    pending = []
    it = iter(entries)
    for i in range(count):
        if i in placeholders:
            if placeholders[i] is None:
                pending.append(i)
                offsets.append(None)
            else:
                offsets.append(placeholders[i])
            continue
        offset = base + len(data)
        for p in pending:
            offsets[p] = offset - 1
        pending = []
        offsets.append(offset)
        data += next(it)
    return magic + pack("<I", count) + pack("<%dI" % count, *offsets) + bytes(data)

@pytest.fixture
def archive_bytes():
    return build_archive([
        raw_entry(b"hello"),
        compressed_entry(8, b"\xff" + b"ABCDEFGH"),
        raw_entry(b""),
    ])

@pytest.fixture
def archive_fd(archive_bytes):
    return BytesIO(archive_bytes)
