# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Callback-completable operation handle."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

from snapbridge.tasks.ports.outbound import CompletionListener

T = TypeVar("T")

logger = logging.getLogger(__name__)


class HandleState(Enum):
    """Completion state of an operation handle."""

    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"


class CompletionSource(Generic[T]):
    """Thread-safe :class:`~snapbridge.tasks.ports.outbound.CancellableHandle`.

    The producer completes it once with :meth:`set_result`,
    :meth:`set_exception` or :meth:`cancel`; later attempts are ignored and
    return ``False``. Listeners run on the completing thread, outside the lock.

    Args:
        on_cancel: Called once when :meth:`cancel` wins, so the producer can
            stop the work backing this handle.
    """

    def __init__(self, on_cancel: Callable[[], object] | None = None) -> None:
        self._lock = threading.Lock()
        self._state = HandleState.PENDING
        self._result: T | None = None
        self._exception: BaseException | None = None
        self._listeners: list[CompletionListener] = []
        self._on_cancel = on_cancel

    @classmethod
    def completed(cls, result: T) -> CompletionSource[T]:
        """A handle that already succeeded with *result*."""
        source: CompletionSource[T] = cls()
        source.set_result(result)
        return source

    @classmethod
    def failed(cls, exception: BaseException) -> CompletionSource[T]:
        """A handle that already failed with *exception*."""
        source: CompletionSource[T] = cls()
        source.set_exception(exception)
        return source

    def __repr__(self) -> str:
        return f"<CompletionSource state={self._state.value}>"

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is not HandleState.PENDING

    @property
    def is_canceled(self) -> bool:
        return self._state is HandleState.CANCELED

    @property
    def is_successful(self) -> bool:
        return self._state is HandleState.SUCCEEDED

    @property
    def result(self) -> T | None:
        return self._result

    @property
    def exception(self) -> BaseException | None:
        return self._exception

    def add_on_complete_listener(self, listener: CompletionListener) -> CompletionSource[T]:
        """Register *listener*; runs immediately if the handle is already complete."""
        with self._lock:
            if self._state is HandleState.PENDING:
                self._listeners.append(listener)
                return self
        self._notify(listener)
        return self

    def set_result(self, result: T) -> bool:
        return self._complete(HandleState.SUCCEEDED, result=result)

    def set_exception(self, exception: BaseException) -> bool:
        return self._complete(HandleState.FAILED, exception=exception)

    def cancel(self) -> bool:
        if not self._complete(HandleState.CANCELED):
            return False
        if self._on_cancel is not None:
            self._on_cancel()
        return True

    def _complete(
        self,
        state: HandleState,
        result: T | None = None,
        exception: BaseException | None = None,
    ) -> bool:
        with self._lock:
            if self._state is not HandleState.PENDING:
                return False
            self._state = state
            self._result = result
            self._exception = exception
            listeners, self._listeners = self._listeners, []
        for listener in listeners:
            self._notify(listener)
        return True

    def _notify(self, listener: CompletionListener) -> None:
        try:
            listener(self)
        except Exception:
            logger.exception("completion_listener_failed", extra={"state": self._state.value})
