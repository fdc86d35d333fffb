"""Pytest configuration: shared asset fixtures with their pinned SHA-512 hashed names."""

import pytest

from assethash.hashfs import HashFileSystem
from assethash.vfs import MapFileSystem

ASSETS = {
    "test1": "test1",
    "example/test2": "test2",
    "test3.txt": "test3",
    ".test4": "test4",
    ".test.test5": "test5",
    "test6/.test": "test6",
    "example/test7.txt": "test7",
}

EXPECTED_HASHES = {
    "/test1": "/test1-sW7X0ks-y9QWTc2t",
    "/example/test2": "/example/test2-bSAb7u-1ibCO8Gct",
    "/test3.txt": "/test3-y4ct4rjSUJxUNEQ1.txt",
    "/.test4": "/.IleqtEtCgTFCqorE.test4",
    "/.test.test5": "/.test-ZMJv_js1xl37k6j9.test5",
    "/test6/.test": "/test6/.MGNPwt0o5BKmhHcY.test",
    "/example/test7.txt": "/example/test7-zuH_3DDgV2WktHg3.txt",
}


@pytest.fixture
def assets_fs() -> MapFileSystem:
    """Plain (unwrapped) in-memory asset filesystem."""
    return MapFileSystem(ASSETS)


@pytest.fixture
def hashed_fs(assets_fs: MapFileSystem) -> HashFileSystem:
    """The asset filesystem wrapped with content-addressable names."""
    return HashFileSystem(assets_fs)


@pytest.fixture
def expected_hashes() -> dict:
    return dict(EXPECTED_HASHES)
