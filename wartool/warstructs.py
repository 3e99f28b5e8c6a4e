from construct import *

VARIANTS = {
    b"\x18\x00\x00\x00": "DOS Retail",
    b"\x19\x00\x00\x00": "DOS Shareware",
    b"\x00\x00\x00\x1a": "Mac Retail",
    b"\x00\x00\x00\x19": "Mac Shareware",
}

SUPPORTED = ("DOS Retail", "DOS Shareware")

Magic = Bytes(4)

Count = Int32ul

# (flag << 24) | size, a flag byte of 0x20 means compressed
EntryHeader = Struct(
    "header"     / Int32ul,
    "compressed" / Computed(this.header >> 24 == 0x20),
    "size"       / Computed(this.header & 0x00FFFFFF),
)

__all__ = ["VARIANTS", "SUPPORTED", "Magic", "Count", "EntryHeader"]
