"""Content-addressable asset names for read-only filesystems."""

from assethash.hashfs import MANIFEST_PATH, HashFileSystem
from assethash.names import AssetNames, ManifestError
from assethash.paths import add_hash_to_path, clean_path
from assethash.vfs import DirFileSystem, File, FileInfo, FileSystem, MapFileSystem, walk

__all__ = [
    "MANIFEST_PATH",
    "HashFileSystem",
    "AssetNames",
    "ManifestError",
    "add_hash_to_path",
    "clean_path",
    "DirFileSystem",
    "File",
    "FileInfo",
    "FileSystem",
    "MapFileSystem",
    "walk",
]
