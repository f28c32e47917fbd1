"""Bookkeeping of callbacks awaiting invocation results."""

from __future__ import annotations

import itertools
import threading
from typing import Callable, Optional

from signalr_hub.value import InvokeResult, SignalRValue

CompletionCallback = Callable[[InvokeResult], None]


def _as_result(value: SignalRValue) -> InvokeResult:
    if isinstance(value, InvokeResult):
        return value
    value = SignalRValue.of(value)
    return InvokeResult(value.type, value.value)


class CallbackManager:
    """Thread-safe registry of completion callbacks keyed by invocation id."""

    def __init__(self) -> None:
        self._callbacks: dict[str, Optional[CompletionCallback]] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count()
        self._id_lock = threading.Lock()

    def _next_id(self) -> str:
        with self._id_lock:
            return str(next(self._ids))

    def register_callback(self, callback: Optional[CompletionCallback] = None) -> str:
        """Store ``callback`` under a fresh id and return that id."""
        callback_id = self._next_id()
        with self._lock:
            self._callbacks[callback_id] = callback
        return callback_id

    def invoke_callback(self, callback_id: str, result: SignalRValue, remove: bool = True) -> bool:
        """Call the callback registered as ``callback_id`` with ``result``.

        Returns False when no such callback is registered. The callback runs
        outside the lock, after it has been removed if ``remove`` is true.
        """
        with self._lock:
            if callback_id not in self._callbacks:
                return False
            if remove:
                callback = self._callbacks.pop(callback_id)
            else:
                callback = self._callbacks[callback_id]

        if callback is not None:
            callback(_as_result(result))
        return True

    def remove_callback(self, callback_id: str) -> bool:
        """Forget ``callback_id``; True if it was registered."""
        with self._lock:
            return self._callbacks.pop(callback_id, _MISSING) is not _MISSING

    def clear(self, error_message: str) -> None:
        """Fail every pending callback with ``error_message`` and forget them all."""
        with self._lock:
            pending = list(self._callbacks.values())
            self._callbacks.clear()

        for callback in pending:
            if callback is not None:
                callback(InvokeResult.error(error_message))

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def __contains__(self, callback_id: object) -> bool:
        with self._lock:
            return callback_id in self._callbacks


_MISSING = object()