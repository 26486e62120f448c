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
"""Bridge between callback-completed operation handles and asyncio.

Three conversions:

* :func:`await_handle` -- suspend until a handle completes, without blocking
  the event loop or the thread that completes the handle.
* :func:`as_future` -- eager conversion of a handle into an asyncio future.
* :func:`as_handle` -- the inverse: expose a coroutine, task or future as an
  :class:`~snapbridge.tasks.ports.outbound.OperationHandle`.

Cancellation round-trips in both directions as cancellation, never as a
plain failure.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar, cast

from snapbridge.tasks.adapters.completion_source import CompletionSource
from snapbridge.tasks.ports.outbound import OperationHandle

T = TypeVar("T")

logger = logging.getLogger(__name__)

_CANCELLED_ERRORS = (asyncio.CancelledError, concurrent.futures.CancelledError)


def _reports_cancellation(handle: OperationHandle[Any]) -> bool:
    return handle.is_canceled or isinstance(handle.exception, _CANCELLED_ERRORS)


def _unwrap(handle: OperationHandle[T]) -> T:
    """Return or raise the outcome of a completed handle."""
    if _reports_cancellation(handle):
        raise asyncio.CancelledError(f"Task {handle!r} was cancelled normally.")
    exception = handle.exception
    if exception is not None:
        raise exception
    return cast(T, handle.result)


def _transfer(handle: OperationHandle[T], future: asyncio.Future[T]) -> None:
    """Copy a completed handle's outcome into *future* unless it already resolved."""
    if future.done():
        return
    if _reports_cancellation(handle):
        future.cancel(f"Task {handle!r} was cancelled normally.")
    elif handle.exception is not None:
        future.set_exception(handle.exception)
    else:
        future.set_result(cast(T, handle.result))


def _cancel_source(handle: OperationHandle[Any]) -> None:
    cancel = getattr(handle, "cancel", None)
    if cancel is None or handle.is_complete:
        return
    try:
        cancel()
    except Exception:
        logger.warning("handle_cancel_failed", extra={"handle": repr(handle)}, exc_info=True)


def as_future(handle: OperationHandle[T]) -> asyncio.Future[T]:
    """Convert *handle* to a future bound to the running event loop.

    An already-completed handle resolves the future immediately and no
    listener is registered. Otherwise exactly one completion listener is
    added; it hops onto the loop with ``call_soon_threadsafe`` because the
    data source may complete handles on its own threads.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    if handle.is_complete:
        _transfer(handle, future)
        return future

    # The handle holds its listener until it completes, possibly never; the
    # listener only reaches the future through this slot, emptied on cancel.
    target: list[asyncio.Future[T]] = [future]

    def forget(done: asyncio.Future[T]) -> None:
        if done.cancelled():
            target.clear()

    def on_complete(completed: OperationHandle[T]) -> None:
        pending = target[:]
        if not pending:
            return
        try:
            loop.call_soon_threadsafe(_transfer, completed, pending[0])
        except RuntimeError:
            # Loop already closed, nobody is left to deliver to.
            logger.debug("handle_completed_after_loop_closed", extra={"handle": repr(completed)})

    future.add_done_callback(forget)
    handle.add_on_complete_listener(on_complete)
    return future


async def await_handle(handle: OperationHandle[T]) -> T:
    """Await the completion of *handle*.

    Returns the result, raises the handle's own exception object on failure
    and :class:`asyncio.CancelledError` when the handle was cancelled.

    If the awaiting task is cancelled, the wait stops at once, the
    cancellation propagates, and ``handle.cancel()`` is attempted when the
    handle offers it. A completion arriving afterwards is dropped.
    """
    if handle.is_complete:
        return _unwrap(handle)

    future = as_future(handle)
    try:
        return await future
    except asyncio.CancelledError:
        _cancel_source(handle)
        raise


def as_handle(awaitable: Awaitable[T]) -> CompletionSource[T]:
    """Expose *awaitable* as an operation handle.

    Coroutines are scheduled as tasks on the running loop. The handle
    completes with the awaitable's value or exception, and reports
    cancellation (``is_canceled``) when the awaitable is cancelled.
    Cancelling the handle cancels the underlying task.
    """
    task = asyncio.ensure_future(awaitable)
    source: CompletionSource[T] = CompletionSource(on_cancel=task.cancel)

    def on_done(done: asyncio.Future[T]) -> None:
        if done.cancelled():
            source.cancel()
            return
        exception = done.exception()
        if exception is not None:
            source.set_exception(exception)
        else:
            source.set_result(done.result())

    task.add_done_callback(on_done)
    return source
