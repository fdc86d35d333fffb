"""
Content-addressable wrapper around a read-only filesystem.

Every regular file is exposed as name-<hash>.ext, where <hash> is a truncated
SHA-512 digest of its content. Original names are hidden from listings and
cannot be opened. A manifest mapping original to hashed paths is served at
MANIFEST_PATH.
"""

import dataclasses
import errno
import io
import json
import logging
import os
import posixpath
from typing import Dict, List, NamedTuple

from assethash.once import Once
from assethash.paths import add_hash_to_path, clean_path, file_digest
from assethash.vfs import BytesFile, File, FileInfo, FileSystem, Handle, not_found, walk

log = logging.getLogger(__name__)

MANIFEST_PATH = "/.assethash-assets.json"
MANIFEST_NAME = posixpath.basename(MANIFEST_PATH)
MANIFEST_MODE = 0o400


class Mapping(NamedTuple):
    """Result of the one-time build: both directions plus the serialized manifest."""

    names: Dict[str, str]  # /example.css -> /example-deadbeef.css
    names_rev: Dict[str, str]  # /example-deadbeef.css -> /example.css
    manifest: bytes  # {"/example.css":"/example-deadbeef.css"}


def build_mapping(fs: FileSystem) -> Mapping:
    """
    Walk fs from the root, hash every regular file and return the mapping.
    Directories and special files (FIFOs, sockets, devices) are not hashed.
    Any error while listing, opening or reading aborts the build.
    A file already sitting at MANIFEST_PATH is skipped.
    Hashed-name collisions are not detected; the last file walked wins.
    """
    names: Dict[str, str] = {}
    names_rev: Dict[str, str] = {}
    for path, info in walk(fs, "/"):
        if not info.is_regular or path == MANIFEST_PATH:
            continue
        with fs.open(path) as f:
            digest = file_digest(f)
        hashed = add_hash_to_path(path, digest)
        names[path] = hashed
        names_rev[hashed] = path
    manifest = json.dumps(names, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return Mapping(names, names_rev, manifest)


def manifest_info(size: int) -> FileInfo:
    """Metadata reported for the synthetic manifest file."""
    return FileInfo(name=MANIFEST_NAME, size=size, mode=MANIFEST_MODE, mtime=None, is_dir=False, sys=None)


class HashFileSystem:
    """
    Wraps a FileSystem so its files are content-addressable.
    The mapping is built lazily on first use, once per instance, and is never
    refreshed; construct a new instance to pick up changed content. If the
    build fails, every operation re-raises the same error.
    """

    def __init__(self, fs: FileSystem) -> None:
        self._fs = fs
        self._mapping: Once[Mapping] = Once(self._compute_hashes)

    def _compute_hashes(self) -> Mapping:
        try:
            mapping = build_mapping(self._fs)
        except OSError as e:
            log.warning("Hashing assets failed: %s", e)
            raise
        log.info("Hashed %d assets", len(mapping.names))
        return mapping

    def _get_mapping(self) -> Mapping:
        return self._mapping.get()

    def names(self) -> Dict[str, str]:
        """Copy of the original -> hashed mapping."""
        return dict(self._get_mapping().names)

    def manifest(self) -> bytes:
        """Serialized manifest (UTF-8 JSON object)."""
        return self._get_mapping().manifest

    def open(self, name: str) -> File:
        """Open name, resolving hashed names and hiding original file names."""
        mapping = self._get_mapping()
        name = clean_path(name)

        if name == MANIFEST_PATH:
            return BytesFile(mapping.manifest, manifest_info(len(mapping.manifest)))
        if name == "/":
            return RootDir(self._fs.open(name), mapping, name)

        orig_name = mapping.names_rev.get(name)
        if orig_name is not None:
            return RenamedFile(self._fs.open(orig_name), name)

        f = self._fs.open(name)
        try:
            info = f.stat()
        except OSError:
            f.close()
            raise
        if not info.is_dir:
            f.close()
            log.debug("Rejected open of unhashed path %s", name)
            raise not_found(name)
        return HashedNamesDir(f, mapping, name)


class FileWrapper(Handle):
    """Forwards every handle operation to an inner File; subclasses override what they rewrite."""

    def __init__(self, inner: File) -> None:
        self._inner = inner

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(size)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._inner.seek(offset, whence)

    def tell(self) -> int:
        return self._inner.tell()

    def close(self) -> None:
        self._inner.close()

    def stat(self) -> FileInfo:
        return self._inner.stat()

    def readdir(self, count: int = -1) -> List[FileInfo]:
        return self._inner.readdir(count)


class RenamedFile(FileWrapper):
    """File opened by its hashed name; stat() reports the hashed base name."""

    def __init__(self, inner: File, name: str) -> None:
        super().__init__(inner)
        self._name = name

    def stat(self) -> FileInfo:
        return dataclasses.replace(self._inner.stat(), name=posixpath.basename(self._name))


class HashedNamesDir(FileWrapper):
    """Directory whose listing reports hashed names for mapped files."""

    def __init__(self, inner: File, mapping: Mapping, dir_path: str) -> None:
        super().__init__(inner)
        self._mapping = mapping
        self._dir = dir_path

    def readdir(self, count: int = -1) -> List[FileInfo]:
        infos = self._inner.readdir(count)
        names = self._mapping.names
        out = []
        for info in infos:
            hashed = names.get(posixpath.join(self._dir, info.name))
            if hashed is not None:
                info = dataclasses.replace(info, name=posixpath.basename(hashed))
            out.append(info)
        return out


class RootDir(HashedNamesDir):
    """
    Root directory: the listing also contains the manifest file.
    Only a full listing from the start can include it, so partial listings
    (count > 0, or after the cursor moved) raise ENOTSUP.
    """

    def readdir(self, count: int = -1) -> List[FileInfo]:
        if count > 0 or self.seek(0, io.SEEK_CUR) != 0:
            raise OSError(errno.ENOTSUP, os.strerror(errno.ENOTSUP), self._dir)
        infos = [i for i in super().readdir(count) if i.name != MANIFEST_NAME]
        infos.append(manifest_info(len(self._mapping.manifest)))
        return infos
