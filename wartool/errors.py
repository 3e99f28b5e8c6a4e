class WarError(Exception):
    pass

class UnknownVersion(WarError):
    def __init__(self, magic):
        WarError.__init__(self, "unknown version: %s" % magic.hex())
        self.magic = magic

class UnsupportedVersion(WarError):
    def __init__(self, variant):
        WarError.__init__(self, "unsupported version: %s" % variant)
        self.variant = variant

class TableMappingMismatch(WarError):
    def __init__(self, count, expected):
        WarError.__init__(self, "table mapping mismatch: archive has %d files, manifest has %d"
                          % (count, expected))
        self.count = count
        self.expected = expected

class ArchiveIOError(WarError, IOError):
    pass

class NotFound(WarError, FileNotFoundError):
    def __init__(self, name):
        WarError.__init__(self, "no such file in archive: %s" % name)
        self.name = name
