import zipfile
from pathlib import Path
from typing import List, Protocol, Sequence, Tuple


class Bundle(Protocol):
    """A set of named files. Names use forward slashes whatever the platform,
    like inside zip archives. Contents are only read when asked for"""

    def names(self) -> Sequence[str]:
        ...

    def read(self, name: str) -> bytes:
        """Raises KeyError when the bundle has no file with that name"""
        ...

    def entries(self) -> Sequence[Tuple[str, bytes]]:
        ...


class BundleBase:
    def names(self) -> List[str]:
        raise NotImplementedError

    def read(self, name: str) -> bytes:
        raise NotImplementedError

    def entries(self) -> List[Tuple[str, bytes]]:
        """Every file of the bundle, read into memory"""
        return [(name, self.read(name)) for name in self.names()]


class ZipBundle(BundleBase):
    """A .osz file, which is a plain zip archive"""

    def __init__(self, path: Path) -> None:
        self.path = path

    def names(self) -> List[str]:
        with zipfile.ZipFile(self.path) as archive:
            return [info.filename for info in archive.infolist() if not info.is_dir()]

    def read(self, name: str) -> bytes:
        with zipfile.ZipFile(self.path) as archive:
            return archive.read(name)


class FolderBundle(BundleBase):
    """An extracted .osz archive. When recursive is False only the files
    sitting directly in the folder are part of the bundle"""

    def __init__(self, path: Path, recursive: bool = True) -> None:
        self.path = path
        self.recursive = recursive

    def names(self) -> List[str]:
        paths = self.path.rglob("*") if self.recursive else self.path.iterdir()
        return [
            p.relative_to(self.path).as_posix() for p in sorted(paths) if p.is_file()
        ]

    def read(self, name: str) -> bytes:
        path = self.path / name
        if not path.is_file() or (not self.recursive and "/" in name):
            raise KeyError(name)

        return path.read_bytes()
