"""Look up content-addressable names from the manifest of a wrapped filesystem."""

import json
import logging
from typing import Dict, Optional

from assethash.hashfs import MANIFEST_PATH
from assethash.once import Once
from assethash.paths import clean_path
from assethash.vfs import File, FileSystem

log = logging.getLogger(__name__)


class ManifestError(ValueError):
    """The manifest file exists but is not a JSON object of path -> path."""


def parse_manifest(data: bytes) -> Dict[str, str]:
    """Decode manifest bytes. Raises ManifestError if they are not a str -> str JSON object."""
    try:
        names = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestError(f"Invalid asset manifest {MANIFEST_PATH}: {e}") from e
    if not isinstance(names, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in names.items()
    ):
        raise ManifestError(f"Invalid asset manifest {MANIFEST_PATH}: expected an object of paths")
    return names


class AssetNames:
    """
    Maps asset paths to their content-addressable equivalents using the manifest
    of a filesystem wrapped with HashFileSystem.

    If the filesystem has no manifest it was not wrapped; lookups then return
    paths unchanged, so the same code works against plain asset directories
    during development. A manifest that exists but cannot be read or parsed is
    an error, raised on first use and on every use after that.
    """

    def __init__(self, fs: FileSystem) -> None:
        self._fs = fs
        self._names: Once[Optional[Dict[str, str]]] = Once(self._load)

    def _load(self) -> Optional[Dict[str, str]]:
        try:
            f = self._fs.open(MANIFEST_PATH)
        except FileNotFoundError:
            log.debug("No asset manifest at %s; names are passed through as is", MANIFEST_PATH)
            return None
        with f:
            data = f.read()
        names = parse_manifest(data)
        log.debug("Loaded asset manifest with %d names", len(names))
        return names

    def is_content_addressable(self) -> bool:
        """True if the filesystem was wrapped with HashFileSystem (even with no assets)."""
        return self._names.get() is not None

    def lookup(self, name: str) -> str:
        """
        Return the content-addressable name of the asset at name.
        Unknown names, and every name when the filesystem is not wrapped, are
        returned cleaned but otherwise as is.
        """
        names = self._names.get()
        name = clean_path(name)
        if names is not None:
            return names.get(name, name)
        return name

    def open(self, name: str) -> File:
        """Open the content-addressable equivalent of name on the filesystem."""
        return self._fs.open(self.lookup(name))
