from .errors import (WarError, UnknownVersion, UnsupportedVersion,
                     TableMappingMismatch, ArchiveIOError, NotFound)
from .war import (Archive, Entry, LoadOptions, detect_variant, is_placeholder,
                  load_archive, open_archive)
from .lzss import decompress
from .manifest import load_manifest
