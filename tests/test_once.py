"""Tests for the run-once gate."""

import time
import traceback
from concurrent.futures import ThreadPoolExecutor

import pytest

from assethash.once import Once


def test_once_runs_func_once() -> None:
    """Repeated get() returns the first result without calling func again."""
    calls = []

    def func():
        calls.append(1)
        return {"a": 1}

    once = Once(func)
    assert once.done is False
    first = once.get()
    assert once.get() is first
    assert calls == [1]
    assert once.done is True


def test_once_concurrent_callers_share_result() -> None:
    """Threads arriving while func runs block and see the same result."""
    calls = []

    def func():
        calls.append(1)
        time.sleep(0.05)
        return object()

    once = Once(func)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: once.get(), range(16)))
    assert len(calls) == 1
    assert all(r is results[0] for r in results)


def test_once_failure_is_sticky() -> None:
    """An exception from func is re-raised to every caller; func is not retried."""
    calls = []

    def func():
        calls.append(1)
        raise PermissionError("denied")

    once = Once(func)
    with pytest.raises(PermissionError, match="denied"):
        once.get()
    with pytest.raises(PermissionError, match="denied"):
        once.get()
    assert calls == [1]
    assert once.done is True


def test_once_failure_traceback_does_not_grow() -> None:
    """Re-raising the stored failure starts from the original traceback every time."""

    def func():
        raise PermissionError("denied")

    once = Once(func)
    depths = []
    for _ in range(50):
        try:
            once.get()
        except PermissionError as e:
            depths.append(len(traceback.extract_tb(e.__traceback__)))
    assert len(depths) == 50
    assert len(set(depths)) == 1
