import zipfile
from pathlib import Path

from .enum import Format

VERSION_LINE_START = b"osu file format v"


def guess_format(path: Path) -> Format:
    if path.is_dir():
        if any(path.glob("*.osu")):
            return Format.OSU
        raise ValueError("Can't guess chart format for a folder with no .osu file")

    if zipfile.is_zipfile(path):
        return Format.OSZ

    if looks_like_osu(path):
        return Format.OSU

    raise ValueError("Unrecognized file format")


def looks_like_osu(path: Path) -> bool:
    with path.open(mode="rb") as f:
        for line in f:
            stripped = line.lstrip(b"\xef\xbb\xbf").strip()
            if stripped:
                return stripped.startswith(VERSION_LINE_START)

    return False
