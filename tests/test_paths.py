"""Tests for path cleaning and hashed-name construction."""

import hashlib
import io

import pytest

from assethash.paths import HASH_LENGTH, add_hash_to_path, clean_path, file_digest, split_ext


@pytest.mark.parametrize(
    "name, cleaned",
    [
        ("", "/"),
        ("/", "/"),
        ("test1", "/test1"),
        ("./test1", "/test1"),
        ("//test1", "/test1"),
        ("example/../test1", "/test1"),
        ("/example//test2", "/example/test2"),
        ("/example/./test2/", "/example/test2"),
        ("/../../etc/passwd", "/etc/passwd"),
    ],
)
def test_clean_path(name: str, cleaned: str) -> None:
    """Paths are rooted and lexically cleaned; .. stops at the root."""
    assert clean_path(name) == cleaned


def test_split_ext() -> None:
    """Extension starts at the last dot of the base name."""
    assert split_ext("styles.css") == ".css"
    assert split_ext("archive.tar.gz") == ".gz"
    assert split_ext(".env") == ".env"
    assert split_ext("README") == ""


def test_add_hash_to_path_matches_expected(expected_hashes) -> None:
    """SHA-512 of the fixture contents yields the pinned hashed names."""
    contents = {
        "/test1": b"test1",
        "/example/test2": b"test2",
        "/test3.txt": b"test3",
        "/.test4": b"test4",
        "/.test.test5": b"test5",
        "/test6/.test": b"test6",
        "/example/test7.txt": b"test7",
    }
    for path, content in contents.items():
        digest = hashlib.sha512(content).digest()
        assert add_hash_to_path(path, digest) == expected_hashes[path]


def test_add_hash_to_path_splices_before_extension() -> None:
    """Hash goes between stem and extension, and before the name of dot files."""
    digest = hashlib.sha512(b"body { color: red }").digest()
    hashed = add_hash_to_path("/css/styles.css", digest)
    assert hashed.startswith("/css/styles-")
    assert hashed.endswith(".css")
    assert len(hashed) == len("/css/styles.css") + 1 + HASH_LENGTH

    dot = add_hash_to_path("/.env", digest)
    assert dot.startswith("/.")
    assert dot.endswith(".env")
    assert len(dot) == len("/.env") + 1 + HASH_LENGTH


def test_add_hash_to_path_url_safe() -> None:
    """Hashed names only contain URL-safe base64 characters (no padding)."""
    for i in range(50):
        digest = hashlib.sha512(str(i).encode()).digest()
        short = add_hash_to_path("/x", digest)[len("/x-") :]
        assert len(short) == HASH_LENGTH
        assert "+" not in short and "/" not in short and "=" not in short


def test_add_hash_to_path_differs_by_content() -> None:
    """Different content gives a different name; same content the same name."""
    a = add_hash_to_path("/a.js", hashlib.sha512(b"one").digest())
    b = add_hash_to_path("/a.js", hashlib.sha512(b"two").digest())
    assert a != b
    assert a == add_hash_to_path("/a.js", hashlib.sha512(b"one").digest())


def test_file_digest_streams_whole_content() -> None:
    """file_digest reads past the chunk size and matches hashlib."""
    data = b"x" * (200 * 1024 + 7)
    assert file_digest(io.BytesIO(data)) == hashlib.sha512(data).digest()
    assert file_digest(io.BytesIO(b"")) == hashlib.sha512(b"").digest()
