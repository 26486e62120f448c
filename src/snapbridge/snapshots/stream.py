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
"""Push listener to async iterator conversion.

:class:`SnapshotStream` owns one upstream listener registration for the
lifetime of one consumer. It moves through three states:

* ``IDLE`` -- constructed, nothing registered yet (streams are cold).
* ``SUBSCRIBED`` -- registered on the first ``__anext__``.
* ``TERMINATED`` -- upstream error, ``close()``/``aclose()``, leaving
  ``async with``, or cancellation of the consuming task.

Every path into ``TERMINATED`` goes through ``_terminate`` and removes the
registration exactly once, before ``_terminate`` returns.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any, Generic, TypeVar, cast

from snapbridge.kernel.exceptions import BufferOverflowException, StreamStateException
from snapbridge.kernel.types import OverflowPolicy
from snapbridge.snapshots.ports.outbound import ListenerRegistration
from snapbridge.snapshots.registration import Subscriber

E = TypeVar("E")

logger = logging.getLogger(__name__)


class StreamState(Enum):
    IDLE = "IDLE"
    SUBSCRIBED = "SUBSCRIBED"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True)
class PendingEvent(Generic[E]):
    """An undelivered event; ``build`` runs when the consumer pulls it."""

    kind: type
    build: Callable[[], E]


Translator = Callable[[Any], Iterable[PendingEvent[E]]]
"""Turns one raw upstream event into the pending events it produces, in order."""


class SnapshotStream(Generic[E]):
    """Single-consumer, cold, non-restartable async iterator over listener events.

    Upstream callbacks may arrive on any thread. They are handed to the event
    loop of the consumer, so the translator and the buffer are only touched
    from that loop.

    Args:
        subscribe: Registers the upstream listener, returns its registration.
        translate: Converts each raw event into pending events.
        capacity: Maximum undelivered events, 0 for unbounded.
        overflow: What to do when a bounded buffer is full.
        name: Label used in log records.
    """

    def __init__(
        self,
        subscribe: Subscriber,
        translate: Translator[E],
        *,
        capacity: int = 0,
        overflow: OverflowPolicy = OverflowPolicy.FAIL,
        name: str = "snapshot_stream",
    ) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._subscribe = subscribe
        self._translate: Translator[E] | None = translate
        self._capacity = capacity
        self._overflow = overflow
        self._name = name
        self._state = StreamState.IDLE
        self._loop: asyncio.AbstractEventLoop | None = None
        self._registration: ListenerRegistration | None = None
        self._buffer: deque[PendingEvent[E]] = deque()
        self._error: BaseException | None = None
        self._waiter: asyncio.Future[None] | None = None

    def __repr__(self) -> str:
        return f"<SnapshotStream {self._name} state={self._state.value} buffered={len(self._buffer)}>"

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def name(self) -> str:
        return self._name

    # -- consumer side -------------------------------------------------------

    def __aiter__(self) -> SnapshotStream[E]:
        if self._state is StreamState.TERMINATED and not self._buffer and self._error is None:
            raise StreamStateException(
                f"Stream '{self._name}' is closed and cannot be restarted; create a new one",
                code="STREAM_CLOSED",
            )
        return self

    async def __anext__(self) -> E:
        if self._state is StreamState.IDLE:
            self._start()

        while True:
            if self._buffer:
                pending = self._buffer.popleft()
                try:
                    return pending.build()
                except Exception as exc:
                    self._terminate(exc, discard_buffer=True)
                    raise

            if self._state is StreamState.TERMINATED:
                if self._error is not None:
                    raise self._error
                raise StopAsyncIteration

            if self._waiter is not None:
                raise StreamStateException(
                    f"Stream '{self._name}' already has a waiting consumer",
                    code="STREAM_SINGLE_CONSUMER",
                )
            loop = cast(asyncio.AbstractEventLoop, self._loop)
            self._waiter = loop.create_future()
            try:
                await self._waiter
            except asyncio.CancelledError:
                self._terminate(None, discard_buffer=True)
                raise
            finally:
                self._waiter = None

    async def __aenter__(self) -> SnapshotStream[E]:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Stop listening. Undelivered events are dropped; idempotent."""
        self._terminate(None, discard_buffer=True)

    async def aclose(self) -> None:
        self.close()

    # -- producer side -------------------------------------------------------

    def _start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._state = StreamState.SUBSCRIBED
        try:
            registration = self._subscribe(self._on_event, self._on_error)
        except Exception as exc:
            self._terminate(exc)
            return
        self._registration = registration
        if self._state is StreamState.TERMINATED:
            # Failed synchronously while registering.
            self._release()
            return
        logger.debug("snapshot_stream_subscribed", extra={"stream": self._name})

    def _on_event(self, raw: Any) -> None:
        self._dispatch(self._handle, raw)

    def _on_error(self, error: BaseException) -> None:
        self._dispatch(self._terminate, error)

    def _dispatch(self, callback: Callable[..., None], *args: Any) -> None:
        loop = self._loop
        if loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            callback(*args)
            return
        try:
            loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            logger.debug("snapshot_after_loop_closed", extra={"stream": self._name})

    def _handle(self, raw: Any) -> None:
        if self._state is not StreamState.SUBSCRIBED or self._translate is None:
            return
        try:
            pending_events = list(self._translate(raw))
        except Exception as exc:
            self._terminate(exc)
            return
        for pending in pending_events:
            if not self._offer(pending):
                return
        self._wake()

    def _offer(self, pending: PendingEvent[E]) -> bool:
        if self._capacity and len(self._buffer) >= self._capacity:
            if self._overflow is OverflowPolicy.DROP_OLDEST:
                dropped = self._buffer.popleft()
                logger.debug("stream_event_dropped", extra={"stream": self._name, "kind": dropped.kind.__name__})
            elif self._overflow is OverflowPolicy.DROP_NEWEST:
                logger.debug("stream_event_dropped", extra={"stream": self._name, "kind": pending.kind.__name__})
                return True
            else:
                self._terminate(
                    BufferOverflowException(
                        f"Stream '{self._name}' exceeded its capacity of {self._capacity} events",
                        code="STREAM_BUFFER_OVERFLOW",
                        context={"stream": self._name, "capacity": self._capacity},
                    )
                )
                return False
        self._buffer.append(pending)
        return True

    def _terminate(self, error: BaseException | None, *, discard_buffer: bool = False) -> None:
        if self._state is StreamState.TERMINATED:
            return
        self._state = StreamState.TERMINATED
        self._error = error
        self._translate = None
        if discard_buffer:
            self._buffer.clear()
        self._release()
        self._wake()
        if error is None:
            logger.debug("snapshot_stream_closed", extra={"stream": self._name})
        else:
            logger.debug(
                "snapshot_stream_failed",
                extra={"stream": self._name, "error": type(error).__name__},
            )

    def _release(self) -> None:
        registration, self._registration = self._registration, None
        if registration is None:
            return
        try:
            registration.remove()
        except Exception:
            logger.warning("listener_removal_failed", extra={"stream": self._name}, exc_info=True)

    def _wake(self) -> None:
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(None)
