import os

# Archives carry no names, slot index is the only identity. A manifest
# is a text file with one name per line; a blank line marks a slot with
# no known name and lines starting with '#' are ignored.

def parse_manifest(lines):
    names = []
    for line in lines:
        line = line.rstrip("\r\n")
        if line.startswith("#"):
            continue
        names.append(line.strip())
    return tuple(names)

def load_manifest(path):
    if hasattr(path, "read"):
        return parse_manifest(path)
    with open(os.fspath(path), "r", encoding="utf-8") as fd:
        return parse_manifest(fd)

def unnamed(index, manifest=()):
    name = "DATA.WAR.%d" % index
    while name in manifest:
        name += "_"
    return name
