"""Write-once result handle for requests in flight.

A PendingResult starts PENDING and moves to exactly one of RESOLVED or
REJECTED. The transition happens under a lock on whichever thread completes
the request first; later attempts raise InvalidStateError.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar

from dblapi.core.api.http.errors import InvalidStateError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


class ResultState(str, Enum):
    """Lifecycle state of a PendingResult."""

    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class PendingResult(Generic[T]):
    """Write-once container for the outcome of an asynchronous call.

    Readers can block (``result``/``exception``), poll (``done``/``state``),
    attach continuations (``add_done_callback``) or await from asyncio via
    ``to_asyncio``.

    Example:
        >>> pending = PendingResult[int]()
        >>> pending.resolve(42)
        >>> pending.result()
        42
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._state = ResultState.PENDING
        self._value: Any = _UNSET
        self._error: BaseException | None = None
        self._callbacks: list[Callable[[PendingResult[T]], Any]] = []

    def __repr__(self) -> str:
        if self._state is ResultState.RESOLVED:
            return f"<PendingResult resolved value={self._value!r}>"
        if self._state is ResultState.REJECTED:
            return f"<PendingResult rejected error={self._error!r}>"
        return "<PendingResult pending>"

    @property
    def state(self) -> ResultState:
        return self._state

    def done(self) -> bool:
        """Return True once the result is resolved or rejected."""
        return self._done.is_set()

    def resolve(self, value: T) -> None:
        """Complete successfully with ``value``.

        Raises:
            InvalidStateError: If the result was already completed
        """
        self._complete(ResultState.RESOLVED, value, None)

    def reject(self, error: BaseException) -> None:
        """Complete with ``error``.

        Raises:
            InvalidStateError: If the result was already completed
        """
        self._complete(ResultState.REJECTED, _UNSET, error)

    def _complete(self, state: ResultState, value: Any, error: BaseException | None) -> None:
        with self._lock:
            if self._state is not ResultState.PENDING:
                raise InvalidStateError(f"PendingResult already {self._state.value}")
            self._state = state
            self._value = value
            self._error = error
            callbacks, self._callbacks = self._callbacks, []
            self._done.set()

        for fn in callbacks:
            self._invoke(fn)

    def _invoke(self, fn: Callable[[PendingResult[T]], Any]) -> None:
        try:
            fn(self)
        except Exception:
            logger.exception("PendingResult callback %r raised", fn)

    def add_done_callback(self, fn: Callable[[PendingResult[T]], Any]) -> None:
        """Run ``fn(self)`` when the result completes.

        Runs on the completing thread, or immediately on the calling thread
        if the result is already complete. Exceptions from ``fn`` are logged.
        """
        with self._lock:
            if self._state is ResultState.PENDING:
                self._callbacks.append(fn)
                return
        self._invoke(fn)

    def _wait(self, timeout: float | None) -> None:
        if not self._done.wait(timeout):
            raise TimeoutError(f"PendingResult not completed within {timeout}s")

    def result(self, timeout: float | None = None) -> T:
        """Block until complete and return the value.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Raises:
            TimeoutError: If the result is still pending after ``timeout``
            ApiError: The stored failure, if the result was rejected
        """
        self._wait(timeout)
        if self._error is not None:
            raise self._error
        return self._value

    def exception(self, timeout: float | None = None) -> BaseException | None:
        """Block until complete and return the failure, or None on success."""
        self._wait(timeout)
        return self._error

    def to_asyncio(self, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[T]:
        """Bridge into an asyncio future on ``loop`` (default: the running loop).

        Completion is marshalled onto the loop thread with call_soon_threadsafe.
        """
        loop = loop or asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()

        def _transfer(pending: PendingResult[T]) -> None:
            if future.done():
                return
            if pending._error is not None:
                future.set_exception(pending._error)
            else:
                future.set_result(pending._value)

        def _on_done(pending: PendingResult[T]) -> None:
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(_transfer, pending)

        self.add_done_callback(_on_done)
        return future
