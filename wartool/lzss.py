from io import BytesIO
from struct import unpack

from .errors import ArchiveIOError

WINDOW = 4096

def bits(byte):
    return ((byte >> 0) & 1,
            (byte >> 1) & 1,
            (byte >> 2) & 1,
            (byte >> 3) & 1,
            (byte >> 4) & 1,
            (byte >> 5) & 1,
            (byte >> 6) & 1,
            (byte >> 7) & 1)

def _read(fd, n):
    try:
        data = fd.read(n)
    except OSError as e:
        raise ArchiveIOError("read failed in compressed data") from e
    if len(data) != n:
        raise ArchiveIOError("unexpected end of compressed data")
    return data

def decompress(fd, size, length):
    """Decode `size` bytes from the compressed stream at the current
    position of `fd`, consuming at most `length` bytes of control bytes.

    Each control byte selects, LSB first, a literal byte (1) or a
    little-endian 16-bit back-reference (0) of run = code // 4096 + 3
    bytes copied from window position code % 4096.
    """
    window = bytearray(WINDOW)

    pos = 0
    consumed = 0
    _out = BytesIO()

    def out(byte):
        nonlocal pos
        window[pos % WINDOW] = byte
        pos += 1
        _out.write(bytes([byte]))

    while pos < size and consumed < length:
        control = _read(fd, 1)[0]
        consumed += 1
        for literal in bits(control):
            if pos == size:
                break
            if literal:
                out(_read(fd, 1)[0])
                consumed += 1
            else:
                code, = unpack("<H", _read(fd, 2))
                consumed += 2
                run, offset = divmod(code, WINDOW)
                for m in range(run + 3):
                    if pos == size:
                        break
                    out(window[(offset + m) % WINDOW])

    if pos != size:
        raise ArchiveIOError("compressed data exhausted after %d of %d bytes" % (pos, size))

    return _out.getvalue()
