"""
Read-only virtual filesystem: file handles, metadata and two concrete backends.

A FileSystem opens slash-separated paths and returns File handles. Handles are
readable, seekable and statable; directory handles can also list their
children with readdir(). Missing paths raise FileNotFoundError.
"""

import errno
import io
import os
import posixpath
import stat as stat_mod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Protocol, Set, Tuple, Union

from assethash.paths import clean_path


@dataclass(frozen=True)
class FileInfo:
    """
    Metadata for a file or directory. mode holds permission bits only; mtime
    None means no modification time. is_regular is False for directories and
    for special files (FIFOs, sockets, devices).
    """

    name: str
    size: int
    mode: int
    mtime: Optional[datetime]
    is_dir: bool
    sys: Any = None
    is_regular: bool = True


class File(Protocol):
    """Open handle on a file or directory."""

    def read(self, size: int = -1) -> bytes: ...

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int: ...

    def tell(self) -> int: ...

    def close(self) -> None: ...

    def stat(self) -> FileInfo: ...

    def readdir(self, count: int = -1) -> List[FileInfo]: ...

    def __enter__(self) -> "File": ...

    def __exit__(self, *exc: Any) -> None: ...


class FileSystem(Protocol):
    """Anything that can open a path into a File."""

    def open(self, name: str) -> File: ...


def not_found(path: str) -> FileNotFoundError:
    """FileNotFoundError for a virtual path (no host paths in the message)."""
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)


def not_a_directory(path: str) -> NotADirectoryError:
    return NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)


def _base_name(path: str) -> str:
    return posixpath.basename(path) or "/"


class Handle:
    """Context-manager support shared by all handles."""

    def close(self) -> None:
        pass

    def __enter__(self) -> "Handle":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class BytesFile(Handle):
    """Read-only in-memory file with fixed metadata."""

    def __init__(self, data: bytes, info: FileInfo) -> None:
        self._buf = io.BytesIO(data)
        self._info = info

    def read(self, size: int = -1) -> bytes:
        return self._buf.read(size)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._buf.seek(offset, whence)

    def tell(self) -> int:
        return self._buf.tell()

    def stat(self) -> FileInfo:
        return self._info

    def readdir(self, count: int = -1) -> List[FileInfo]:
        raise not_a_directory(self._info.name)


class ListingDir(Handle):
    """
    Directory handle over a list of entries, loaded on first readdir.
    readdir(count) with count <= 0 returns all remaining entries; with count > 0
    at most count entries, and an empty list once the listing is exhausted.
    """

    def __init__(self, path: str, info: FileInfo, load: Callable[[], List[FileInfo]]) -> None:
        self._path = path
        self._info = info
        self._load = load
        self._entries: Optional[List[FileInfo]] = None
        self._offset = 0
        self._pos = 0

    def read(self, size: int = -1) -> bytes:
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), self._path)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = self._info.size + offset
        else:
            raise ValueError(f"invalid whence ({whence!r})")
        if pos < 0:
            raise OSError(errno.EINVAL, os.strerror(errno.EINVAL), self._path)
        self._pos = pos
        return pos

    def tell(self) -> int:
        return self._pos

    def stat(self) -> FileInfo:
        return self._info

    def readdir(self, count: int = -1) -> List[FileInfo]:
        if self._entries is None:
            self._entries = sorted(self._load(), key=lambda i: i.name)
        rest = self._entries[self._offset :]
        if count > 0:
            rest = rest[:count]
        self._offset += len(rest)
        return list(rest)


class MapFileSystem:
    """
    In-memory filesystem from a mapping of path -> content.
    Keys are slash paths (leading / optional); str values are stored UTF-8 encoded.
    Parent directories are implied by the file paths.
    """

    def __init__(self, files: Mapping[str, Union[str, bytes]]) -> None:
        self._files: Dict[str, bytes] = {}
        self._children: Dict[str, Set[str]] = {"/": set()}
        for key, value in files.items():
            path = clean_path(key)
            if path == "/":
                raise ValueError(f"Not a file path: {key!r}")
            self._files[path] = value.encode("utf-8") if isinstance(value, str) else bytes(value)
            child = path
            while child != "/":
                parent = posixpath.dirname(child)
                self._children.setdefault(parent, set()).add(posixpath.basename(child))
                child = parent

    def _info(self, path: str) -> FileInfo:
        if path in self._files:
            return FileInfo(_base_name(path), len(self._files[path]), 0o444, None, False)
        return FileInfo(_base_name(path), 0, 0o555, None, True, is_regular=False)

    def open(self, name: str) -> File:
        path = clean_path(name)
        if path in self._files:
            return BytesFile(self._files[path], self._info(path))
        if path in self._children:
            def load() -> List[FileInfo]:
                return [self._info(posixpath.join(path, c)) for c in self._children[path]]

            return ListingDir(path, self._info(path), load)
        raise not_found(path)


def _info_from_stat(name: str, st: os.stat_result) -> FileInfo:
    return FileInfo(
        name=name,
        size=st.st_size,
        mode=stat_mod.S_IMODE(st.st_mode),
        mtime=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        is_dir=stat_mod.S_ISDIR(st.st_mode),
        sys=st,
        is_regular=stat_mod.S_ISREG(st.st_mode),
    )


class OSFile(Handle):
    """Read-only handle on a regular file of the host filesystem."""

    def __init__(self, path: str, fp: io.BufferedReader) -> None:
        self._path = path
        self._fp = fp

    def read(self, size: int = -1) -> bytes:
        return self._fp.read(size)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._fp.seek(offset, whence)

    def tell(self) -> int:
        return self._fp.tell()

    def close(self) -> None:
        self._fp.close()

    def stat(self) -> FileInfo:
        return _info_from_stat(_base_name(self._path), os.fstat(self._fp.fileno()))

    def readdir(self, count: int = -1) -> List[FileInfo]:
        raise not_a_directory(self._path)


class DirFileSystem:
    """
    Serves a host directory read-only. Paths are cleaned, so they cannot leave root.
    Only directories and regular files can be opened; special files are listed
    but not found.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self._root = Path(root)

    def _host_path(self, path: str) -> Path:
        return self._root.joinpath(*[p for p in path.split("/") if p])

    def open(self, name: str) -> File:
        path = clean_path(name)
        host = self._host_path(path)
        try:
            st = host.stat()
        except (FileNotFoundError, NotADirectoryError):
            raise not_found(path) from None
        if stat_mod.S_ISDIR(st.st_mode):
            def load() -> List[FileInfo]:
                with os.scandir(host) as it:
                    return [_info_from_stat(e.name, e.stat()) for e in it]

            return ListingDir(path, _info_from_stat(_base_name(path), st), load)
        if not stat_mod.S_ISREG(st.st_mode):
            # FIFOs and devices would block or never end on read
            raise not_found(path)
        try:
            fp = open(host, "rb")
        except FileNotFoundError:
            raise not_found(path) from None
        return OSFile(path, fp)


def walk(fs: FileSystem, root: str = "/") -> Iterator[Tuple[str, FileInfo]]:
    """
    Yield (path, info) for root and everything below it, depth first, children
    in name order. Errors from open/readdir propagate to the caller.
    """
    root = clean_path(root)
    with fs.open(root) as f:
        info = f.stat()
    yield root, info
    if info.is_dir:
        yield from _walk_dir(fs, root)


def _walk_dir(fs: FileSystem, dir_path: str) -> Iterator[Tuple[str, FileInfo]]:
    with fs.open(dir_path) as f:
        entries = f.readdir(-1)
    for info in sorted(entries, key=lambda i: i.name):
        path = posixpath.join(dir_path, info.name)
        yield path, info
        if info.is_dir:
            yield from _walk_dir(fs, path)
