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
"""Tests for the future bridge — await_handle, as_future and as_handle."""

from __future__ import annotations

import asyncio
import concurrent.futures
import gc
import logging
import threading
import weakref
from typing import Any

import pytest

from snapbridge.tasks.adapters.completion_source import CompletionSource
from snapbridge.tasks.bridge import as_future, as_handle, await_handle


class CountingSource(CompletionSource[Any]):
    """Records how many completion listeners were registered."""

    def __init__(self) -> None:
        super().__init__()
        self.listeners_added = 0

    def add_on_complete_listener(self, listener: Any) -> CompletionSource[Any]:
        self.listeners_added += 1
        return super().add_on_complete_listener(listener)


class UncancellableSource(CompletionSource[Any]):
    def cancel(self) -> bool:
        raise RuntimeError("cannot cancel")


def complete_later(action: Any, *args: Any, delay: float = 0.01) -> threading.Timer:
    timer = threading.Timer(delay, action, args=args)
    timer.start()
    return timer


class TestAwaitHandleFastPath:
    async def test_success_without_listener(self):
        handle = CountingSource()
        handle.set_result(42)
        assert await await_handle(handle) == 42
        assert handle.listeners_added == 0

    async def test_failure_raises_same_object(self):
        error = ValueError("upstream")
        handle = CountingSource()
        handle.set_exception(error)
        with pytest.raises(ValueError) as exc_info:
            await await_handle(handle)
        assert exc_info.value is error
        assert handle.listeners_added == 0

    async def test_cancelled_handle_raises_cancelled_error(self):
        handle = CountingSource()
        handle.cancel()
        with pytest.raises(asyncio.CancelledError, match="cancelled normally"):
            await await_handle(handle)
        assert handle.listeners_added == 0

    async def test_cancellation_reported_as_exception(self):
        handle = CompletionSource.failed(concurrent.futures.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await await_handle(handle)


class TestAwaitHandleSlowPath:
    async def test_result_from_foreign_thread(self):
        handle = CountingSource()
        complete_later(handle.set_result, "done")
        assert await await_handle(handle) == "done"
        assert handle.listeners_added == 1

    async def test_error_from_foreign_thread_is_same_object(self):
        error = ConnectionError("offline")
        handle: CompletionSource[str] = CompletionSource()
        complete_later(handle.set_exception, error)
        with pytest.raises(ConnectionError) as exc_info:
            await await_handle(handle)
        assert exc_info.value is error

    async def test_cancellation_from_foreign_thread(self):
        handle: CompletionSource[str] = CompletionSource()
        complete_later(handle.cancel)
        with pytest.raises(asyncio.CancelledError):
            await await_handle(handle)

    async def test_result_delivered_on_loop_thread(self):
        loop_thread = threading.get_ident()
        handle: CompletionSource[int] = CompletionSource()
        complete_later(handle.set_result, 7)
        await await_handle(handle)
        assert threading.get_ident() == loop_thread


class TestAwaitHandleCancellation:
    async def test_cancelling_waiter_cancels_handle(self):
        handle: CompletionSource[str] = CompletionSource()
        waiter = asyncio.create_task(await_handle(handle))
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert handle.is_canceled

    async def test_failed_cancel_is_logged_and_late_completion_ignored(self, caplog: pytest.LogCaptureFixture):
        handle = UncancellableSource()
        waiter = asyncio.create_task(await_handle(handle))
        await asyncio.sleep(0)
        with caplog.at_level(logging.WARNING, logger="snapbridge.tasks.bridge"):
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter
        assert "handle_cancel_failed" in caplog.text

        handle.set_result("too late")
        await asyncio.sleep(0)
        assert waiter.cancelled()


class TestAsFuture:
    async def test_completed_handle_gives_done_future(self):
        future = as_future(CompletionSource.completed("x"))
        assert future.done()
        assert future.result() == "x"

    async def test_pending_handle_resolves_later(self):
        handle: CompletionSource[str] = CompletionSource()
        future = as_future(handle)
        assert not future.done()
        complete_later(handle.set_result, "y")
        assert await future == "y"

    async def test_cancelled_handle_cancels_future(self):
        handle: CompletionSource[str] = CompletionSource()
        future = as_future(handle)
        handle.cancel()
        with pytest.raises(asyncio.CancelledError):
            await future
        assert future.cancelled()

    async def test_cancelled_future_not_kept_alive_by_pending_handle(self):
        handle: CompletionSource[str] = CompletionSource()
        future = as_future(handle)
        future.cancel()
        await asyncio.sleep(0)
        reference = weakref.ref(future)
        del future
        gc.collect()

        assert reference() is None
        handle.set_result("late")
        await asyncio.sleep(0)

    async def test_uncancelled_future_still_resolves(self):
        handle: CompletionSource[str] = CompletionSource()
        future = as_future(handle)
        handle.set_result("kept")
        assert await future == "kept"


class TestAsHandle:
    async def test_value(self):
        async def compute() -> int:
            await asyncio.sleep(0)
            return 5

        handle = as_handle(compute())
        assert await await_handle(handle) == 5
        assert handle.is_successful

    async def test_exception_is_same_object(self):
        error = KeyError("missing")

        async def fail() -> None:
            raise error

        handle = as_handle(fail())
        with pytest.raises(KeyError) as exc_info:
            await await_handle(handle)
        assert exc_info.value is error
        assert handle.exception is error

    async def test_cancelled_task_reports_cancellation_not_failure(self):
        task = asyncio.ensure_future(asyncio.sleep(10))
        handle = as_handle(task)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await await_handle(handle)
        assert handle.is_canceled
        assert handle.exception is None

    async def test_cancelling_handle_cancels_task(self):
        task = asyncio.ensure_future(asyncio.sleep(10))
        handle = as_handle(task)
        assert handle.cancel() is True
        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()

    async def test_round_trip_preserves_value_and_error(self):
        async def echo(value: str) -> str:
            return value

        assert await await_handle(as_handle(echo("same"))) == "same"

        error = ValueError("same error")

        async def fail() -> str:
            raise error

        with pytest.raises(ValueError) as exc_info:
            await await_handle(as_handle(fail()))
        assert exc_info.value is error
