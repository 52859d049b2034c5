"""In-memory archive tree and ZIP packaging."""

import io
import zipfile
from typing import Optional, Union

from taxpack.core.exceptions import ArchiveError

Entry = tuple[str, Optional[bytes]]


class ArchiveTree:
    """
    Ordered set of archive entries under a path prefix.

    Folders are recorded as directory entries the first time they are
    requested; files are stored as bytes. Child folders share their parent's
    entry list, so everything written below a tree lands in that tree.
    """

    def __init__(self, prefix: str = "", entries: Optional[dict[str, Optional[bytes]]] = None):
        if prefix and not prefix.endswith("/"):
            prefix += "/"
        self._prefix = prefix
        self._entries: dict[str, Optional[bytes]] = entries if entries is not None else {}
        if prefix and prefix not in self._entries:
            self._entries[prefix] = None

    @property
    def path(self) -> str:
        return self._prefix

    def folder(self, name: str) -> "ArchiveTree":
        """Return the sub-folder called name, creating it if needed."""
        name = name.strip("/")
        if not name:
            raise ArchiveError(f"Invalid folder name under '{self._prefix}'")
        return type(self)(self._prefix + name, self._entries)

    def file(self, name: str, data: Union[str, bytes]) -> str:
        """Add a file and return its full archive path."""
        if not name or "/" in name:
            raise ArchiveError(f"Invalid file name '{name}' under '{self._prefix}'")
        path = self._prefix + name
        if path in self._entries:
            raise ArchiveError(f"Duplicate archive entry: {path}")
        self._entries[path] = data.encode("utf-8") if isinstance(data, str) else data
        return path

    def merge(self, other: "ArchiveTree") -> None:
        """Copy every entry of another tree into this one."""
        for path, data in other.entries():
            if data is None:
                self._entries.setdefault(path, None)
            elif path in self._entries:
                raise ArchiveError(f"Duplicate archive entry: {path}")
            else:
                self._entries[path] = data

    def entries(self) -> list[Entry]:
        return list(self._entries.items())

    def names(self) -> list[str]:
        return list(self._entries)


def build_zip(tree: ArchiveTree, compresslevel: int = 6) -> bytes:
    """Package every entry of a tree into a DEFLATE-compressed ZIP."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(
        buffer,
        mode="w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=compresslevel,
    ) as archive:
        for path, data in tree.entries():
            if data is None:
                info = zipfile.ZipInfo(path)
                info.external_attr = (0o40755 << 16) | 0x10  # directory
                archive.writestr(info, b"")
            else:
                archive.writestr(path, data)
    return buffer.getvalue()
