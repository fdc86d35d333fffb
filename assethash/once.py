"""Run a computation exactly once across threads; every caller sees the same outcome."""

import threading
from types import TracebackType
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Once(Generic[T]):
    """
    Lazily runs func on the first call to get(). Callers arriving while it runs
    block on the lock until it finishes. The result, or the exception raised by
    func, is kept for the lifetime of the instance: a failure is never retried
    and is re-raised to every later caller.
    """

    def __init__(self, func: Callable[[], T]) -> None:
        self._func = func
        self._lock = threading.Lock()
        self._done = False
        self._result: Optional[T] = None
        self._error: Optional[BaseException] = None
        self._tb: Optional[TracebackType] = None

    @property
    def done(self) -> bool:
        """True once func has run (successfully or not)."""
        return self._done

    def get(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    try:
                        self._result = self._func()
                    except Exception as e:
                        self._error = e
                        self._tb = e.__traceback__
                    self._done = True
        if self._error is not None:
            # Restart from the build traceback so repeated raises do not grow it
            raise self._error.with_traceback(self._tb)
        return self._result  # type: ignore[return-value]
