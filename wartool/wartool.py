#!/usr/bin/env python3
import logging
import os
import sys

from argparse import ArgumentParser, FileType
from pathlib import Path

from .errors import WarError
from .manifest import load_manifest
from .war import LoadOptions, load_archive, read_header, scan_entries

argparser = ArgumentParser(prog="wartool", description="List or extract WAR archives")
argparser.add_argument("file", type=FileType("rb"))
argparser.add_argument("manifest", type=FileType("r", encoding="utf-8"))
argparser.add_argument("out", type=Path, nargs="?")
argparser.add_argument("-u", "--load-unsupported", action="store_true",
                       help="keep files missing from the manifest as DATA.WAR.<id>")
argparser.add_argument("-v", "--verbose", action="store_true")

def list_entries(fd, size, manifest, options, out=None):
    out = out or sys.stdout
    variant, table = read_header(fd, manifest, options)
    print("Index", "Offset", "Length", "Compressed", "Size", "Name", sep='\t', file=out)
    for entry in scan_entries(fd, table, size, manifest, options):
        print(entry.index, hex(entry.offset), entry.length, int(entry.compressed),
              entry.size, entry.name, sep='\t', file=out)

def unsafe_names(names, out):
    root = out.resolve()
    return [name for name in names
            if root not in (root / name).resolve().parents]

def extract(archive, out):
    for name, data in archive.files.items():
        path = out / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as fd:
            fd.write(data)

def main(argv=None):
    args = argparser.parse_args(argv)

    logging.basicConfig(stream=sys.stderr, format="%(levelname)s: %(message)s",
                        level=logging.INFO if args.verbose else logging.WARNING)

    try:
        with args.manifest as fd:
            manifest = load_manifest(fd)
    except UnicodeDecodeError as e:
        sys.stderr.write("%s: not a UTF-8 manifest: %s\n" % (args.manifest.name, e))
        args.file.close()
        return 1

    options = LoadOptions(load_unsupported=args.load_unsupported)

    try:
        with args.file as fd:
            size = os.fstat(fd.fileno()).st_size
            if args.out is None:
                list_entries(fd, size, manifest, options)
                return 0
            archive = load_archive(fd, size, manifest, options)
    except WarError as e:
        sys.stderr.write("%s: %s\n" % (args.file.name, e))
        return 1

    unsafe = unsafe_names(archive.files, args.out)
    if unsafe:
        sys.stderr.write("%s: refusing to write outside %s: %s\n"
                         % (args.file.name, args.out, ", ".join(unsafe)))
        return 1

    extract(archive, args.out)
    return 0

if __name__ == "__main__":
    sys.exit(main())
