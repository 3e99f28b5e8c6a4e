"""Reader for WAR asset archives.

Layout, little-endian throughout::

    magic      4 bytes, identifies the release
    count      uint32
    offsets    count * uint32, absolute
    data       per present slot: uint32 (flag << 24 | size) then payload

Files are not named inside the archive, so slot positions are fixed and
stripped down releases keep placeholders in the table. Placeholders are
0x00000000 or 0xFFFFFFFF, or in retail releases an offset exactly one
less than the next one.
"""

import logging
import os

from collections import namedtuple
from io import BytesIO
from types import MappingProxyType

import numpy as np

from construct import ConstructError

from .errors import (ArchiveIOError, NotFound, TableMappingMismatch,
                     UnknownVersion, UnsupportedVersion)
from .lzss import decompress
from .manifest import unnamed
from .warstructs import VARIANTS, SUPPORTED, Magic, Count, EntryHeader

int32ul = np.dtype("<u4")

logger = logging.getLogger("wartool")

LoadOptions = namedtuple("LoadOptions", "log load_unsupported",
                         defaults=(logger, False))

Entry = namedtuple("Entry", "index name offset header size compressed length")


class Archive:
    __slots__ = "_files", "_variant"

    def __init__(self, variant, files):
        self._variant = variant
        self._files = MappingProxyType(dict(files))

    @property
    def variant(self):
        return self._variant

    @property
    def files(self):
        return self._files

    def open(self, name):
        try:
            return BytesIO(self._files[name])
        except KeyError:
            raise NotFound(name) from None

    def __getitem__(self, name):
        return self._files[name]

    def __contains__(self, name):
        return name in self._files

    def __iter__(self):
        return iter(self._files)

    def __len__(self):
        return len(self._files)

    def __setattr__(self, name, value):
        if hasattr(self, name):
            raise AttributeError("Archive is read-only")
        object.__setattr__(self, name, value)

    def __repr__(self):
        return "<Archive %s, %d files>" % (self._variant, len(self._files))


def _parse(struct, fd):
    try:
        return struct.parse_stream(fd)
    except (ConstructError, OSError) as e:
        raise ArchiveIOError("truncated archive at 0x%x" % _tell(fd)) from e

def _tell(fd):
    try:
        return fd.tell()
    except OSError:
        return -1

def _seek(fd, offset):
    try:
        fd.seek(offset)
    except (OSError, ValueError, OverflowError) as e:
        raise ArchiveIOError("cannot seek to 0x%x" % offset) from e


def detect_variant(magic):
    magic = bytes(magic)
    variant = VARIANTS.get(magic)
    if variant is None:
        raise UnknownVersion(magic)
    if variant not in SUPPORTED:
        raise UnsupportedVersion(variant)
    return variant

def read_file_table(fd, manifest):
    count = _parse(Count, fd)
    if count != len(manifest):
        raise TableMappingMismatch(count, len(manifest))
    try:
        raw = fd.read(count * int32ul.itemsize)
    except OSError as e:
        raise ArchiveIOError("cannot read file table") from e
    if len(raw) != count * int32ul.itemsize:
        raise ArchiveIOError("truncated file table")
    return np.frombuffer(raw, dtype=int32ul, count=count)

def is_placeholder(table, i):
    offset = int(table[i])
    if offset in (0x0, 0xFFFFFFFF):
        return True
    # no successor to compare against
    if i == len(table) - 1:
        return False
    return offset == (int(table[i + 1]) - 1) & 0xFFFFFFFF

def payload_lengths(table, size):
    """Bytes of payload after each slot's header word, measured to the
    next offset or to the end of the archive for the last slot.

    Wraps as uint32, so a slot followed by a 0 placeholder gets an
    effectively unbounded budget."""
    offsets = table.astype(np.int64)
    return (np.diff(offsets, append=np.int64(size)) - 4) & 0xFFFFFFFF

def read_header(fd, manifest, options=LoadOptions()):
    _seek(fd, 0)
    variant = detect_variant(_parse(Magic, fd))
    options.log.info("Archive ID: %s", variant)

    table = read_file_table(fd, manifest)
    options.log.info("Number of files in archive: %d", len(table))
    return variant, table

def scan_entries(fd, table, size, manifest, options=LoadOptions()):
    """Yield an Entry for every present, wanted slot, leaving `fd`
    positioned at its payload."""
    log = options.log
    lengths = payload_lengths(table, size)
    taken = frozenset(manifest)

    for i, offset in enumerate(table.tolist()):
        name = manifest[i]
        if is_placeholder(table, i):
            if name:
                log.warning("Incomplete WAR file. Missing '%s'.", name)
            log.info("Skipping placeholder: %d", i)
            continue

        _seek(fd, offset)
        hdr = _parse(EntryHeader, fd)

        if not name:
            if not options.load_unsupported:
                continue
            log.warning("Filename table is incomplete! Missing file with id %d.", i)
            name = unnamed(i, taken)

        yield Entry(i, name, offset, hdr.header, hdr.size, hdr.compressed, int(lengths[i]))

def decode_entry(fd, entry, options=LoadOptions()):
    if entry.compressed:
        options.log.info("Compressed entry: #%d %s", entry.index, entry.name)
        return decompress(fd, entry.size, entry.length)

    options.log.info("Uncompressed entry: #%d %s", entry.index, entry.name)
    try:
        data = fd.read(entry.size)
    except OSError as e:
        raise ArchiveIOError("cannot read %s" % entry.name) from e
    if len(data) != entry.size:
        raise ArchiveIOError("short read in %s: got %d of %d bytes"
                             % (entry.name, len(data), entry.size))
    return data

def load_archive(fd, size, manifest, options=LoadOptions()):
    manifest = tuple(manifest)
    variant, table = read_header(fd, manifest, options)
    files = {}
    for entry in scan_entries(fd, table, size, manifest, options):
        files[entry.name] = decode_entry(fd, entry, options)
    return Archive(variant, files)

def open_archive(path, manifest, options=LoadOptions()):
    with open(os.fspath(path), "rb") as fd:
        size = os.fstat(fd.fileno()).st_size
        return load_archive(fd, size, manifest, options)
