"""Reading and writing the zip container of a workbook package."""

from __future__ import annotations

import os
import zipfile
from typing import IO, BinaryIO, Union

_Source = Union[str, "os.PathLike[str]", IO[bytes]]


class ZipReader:
    """Read-only access to the regular files stored in a zip archive.

    Raises FileNotFoundError when a path does not exist and ValueError
    when the data is not a zip archive.
    """

    def __init__(self, source: _Source) -> None:
        try:
            self._archive = zipfile.ZipFile(source, "r")
        except zipfile.BadZipFile as exc:
            raise ValueError(f"not a zip archive: {exc}") from exc
        self._paths = [info.filename for info in self._archive.infolist() if not info.is_dir()]

    def file_paths(self) -> list[str]:
        """Return the paths of the files in archive order, directories left out."""
        return list(self._paths)

    def file_data(self, name: str) -> bytes:
        """Return the content of one file; KeyError when it is not in the archive."""
        if name not in self._paths:
            raise KeyError(name)
        return self._archive.read(name)

    def close(self) -> None:
        self._archive.close()

    def __enter__(self) -> ZipReader:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class ZipWriter:
    """Writes files into a new zip archive, compressing them with deflate."""

    def __init__(self, target: _Source) -> None:
        self._archive = zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED)
        self._closed = False

    def add_file(self, path: str, data: bytes | str | BinaryIO) -> None:
        """Store data, given as bytes, text or a readable binary file, under path."""
        if self._closed:
            raise ValueError("cannot add a file to a closed archive")
        if isinstance(data, str):
            content = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray, memoryview)):
            content = bytes(data)
        else:
            content = data.read()
        self._archive.writestr(path, content)

    def close(self) -> None:
        if not self._closed:
            self._archive.close()
            self._closed = True

    def __enter__(self) -> ZipWriter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()