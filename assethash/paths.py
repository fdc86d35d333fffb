"""Path cleaning and content-addressed renaming (digest spliced into the base name)."""

import base64
import hashlib
import posixpath
from typing import BinaryIO

# Length of the digest prefix embedded in hashed names (base64url characters)
HASH_LENGTH = 16

_CHUNK_SIZE = 64 * 1024


def clean_path(name: str) -> str:
    """
    Return the rooted, lexically cleaned form of name.
    Repeated slashes and . / .. segments are resolved; .. never climbs above /.
    """
    # normpath keeps a leading "//" (POSIX), so strip leading slashes first
    return posixpath.normpath("/" + name.lstrip("/"))


def split_ext(name: str) -> str:
    """Extension of a base name: suffix from the last '.', or '' if there is none."""
    i = name.rfind(".")
    return name[i:] if i >= 0 else ""


def file_digest(f: BinaryIO) -> bytes:
    """SHA-512 digest of everything readable from f (streamed in chunks)."""
    h = hashlib.sha512()
    while True:
        chunk = f.read(_CHUNK_SIZE)
        if not chunk:
            break
        h.update(chunk)
    return h.digest()


def add_hash_to_path(path: str, digest: bytes) -> str:
    """
    Splice a truncated digest into the base name of path.
    /styles.css -> /styles-<hash>.css; dot files: /.env -> /.<hash>.env
    """
    dir_name, name = posixpath.split(path)
    digest_text = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    short = digest_text[:HASH_LENGTH]

    ext = split_ext(name)
    if name == ext:
        hashed = "." + short + name
    else:
        hashed = name[: len(name) - len(ext)] + "-" + short + ext
    return posixpath.join(dir_name, hashed)
