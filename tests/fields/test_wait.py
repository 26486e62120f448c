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
"""Tests for field waits — wait_for_field, on_field_updated and friends."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Coroutine
from datetime import timedelta
from typing import Any

import pytest

from snapbridge.config.properties.fields import FieldWaitProperties
from snapbridge.fields.wait import (
    field_values,
    on_field_updated,
    on_field_updated_or_null,
    wait_for_field,
    wait_for_value,
)
from snapbridge.kernel.exceptions import ListenerClosedException, OperationTimeoutException
from snapbridge.snapshots.adapters.memory import (
    InMemoryDocumentStore,
    MemoryDocumentSnapshot,
    ScriptedSnapshotSource,
)


def upload(url: str | None) -> MemoryDocumentSnapshot:
    return MemoryDocumentSnapshot("upload-1", {"status": "pending", "url": url})


async def until(condition: Callable[[], bool]) -> None:
    for _ in range(100):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


async def waiting(coro: Coroutine[Any, Any, Any], source: ScriptedSnapshotSource) -> asyncio.Task[Any]:
    """Run *coro* until it has registered its listener on *source*."""
    task = asyncio.create_task(coro)
    await until(lambda: source.active_listeners > 0)
    return task


class TestNonNullableWait:
    async def test_skips_none_values(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url"), source)

        source.emit(upload(None))
        source.emit(MemoryDocumentSnapshot("upload-1"))
        source.emit(upload("https://cdn/file.png"))

        assert await wait == "https://cdn/file.png"
        assert source.remove_calls == 1

    async def test_error_propagates_unchanged(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(on_field_updated(source, "url"), source)
        error = PermissionError("denied")
        source.fail(error)
        with pytest.raises(PermissionError) as exc_info:
            await wait
        assert exc_info.value is error
        assert source.remove_calls == 1

    async def test_source_timeout_error_propagates_unchanged(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url"), source)
        error = TimeoutError("DEADLINE_EXCEEDED from server")
        source.fail(error)
        with pytest.raises(TimeoutError) as exc_info:
            await wait
        assert exc_info.value is error
        assert not isinstance(exc_info.value, OperationTimeoutException)
        assert source.remove_calls == 1

    async def test_source_timeout_error_within_deadline_propagates_unchanged(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url", timeout=5), source)
        error = TimeoutError("socket read timed out")
        source.fail(error)
        with pytest.raises(TimeoutError) as exc_info:
            await wait
        assert exc_info.value is error

    async def test_closed_stream_without_value(self):
        source = ScriptedSnapshotSource()
        stream = field_values(source, "url")
        wait = await waiting(wait_for_value(stream), source)
        source.emit(upload(None))
        stream.close()
        with pytest.raises(ListenerClosedException) as exc_info:
            await wait
        assert exc_info.value.code == "FIELD_WAIT_CLOSED"

    async def test_value_from_foreign_thread(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url"), source)
        threading.Timer(0.01, source.emit, args=(upload("https://cdn/x"),)).start()
        assert await wait == "https://cdn/x"

    async def test_nested_field(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "result.url"), source)
        source.emit(MemoryDocumentSnapshot("job", {"result": {"url": "u"}}))
        assert await wait == "u"


class TestNullableWait:
    async def test_first_value_even_if_none(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(on_field_updated_or_null(source, "url"), source)
        source.emit(upload(None))
        source.emit(upload("later"))
        assert await wait is None
        assert source.remove_calls == 1

    async def test_error_resolves_to_none(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url", nullable=True), source)
        source.fail(ConnectionError("offline"))
        assert await wait is None
        assert source.remove_calls == 1

    async def test_source_timeout_error_resolves_to_none(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url", nullable=True, timeout=5), source)
        source.fail(TimeoutError("socket read timed out"))
        assert await wait is None

    async def test_closure_resolves_to_none(self):
        source = ScriptedSnapshotSource()
        stream = field_values(source, "url")
        wait = await waiting(wait_for_value(stream, nullable=True), source)
        stream.close()
        assert await wait is None


class TestTimeout:
    async def test_timeout_raises_and_removes_listener(self):
        source = ScriptedSnapshotSource()
        with pytest.raises(OperationTimeoutException) as exc_info:
            await wait_for_field(source, "url", timeout=0.05)
        assert exc_info.value.code == "FIELD_WAIT_TIMEOUT"
        assert source.remove_calls == 1
        assert source.active_listeners == 0

    async def test_nullable_timeout_still_raises(self):
        source = ScriptedSnapshotSource()
        with pytest.raises(OperationTimeoutException):
            await on_field_updated_or_null(source, "url", timeout=timedelta(milliseconds=50))
        assert source.remove_calls == 1

    async def test_value_before_timeout(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url", timeout=5), source)
        source.emit(upload("fast"))
        assert await wait == "fast"

    async def test_timeout_from_properties(self):
        source = ScriptedSnapshotSource()
        with pytest.raises(OperationTimeoutException):
            await wait_for_field(source, "url", properties=FieldWaitProperties(timeout=0.05))

    async def test_explicit_timeout_overrides_properties(self):
        source = ScriptedSnapshotSource()
        properties = FieldWaitProperties(timeout=0.01)
        wait = await waiting(wait_for_field(source, "url", timeout=5, properties=properties), source)
        await asyncio.sleep(0.05)
        source.emit(upload("still waiting"))
        assert await wait == "still waiting"


class TestCancellation:
    async def test_cancelled_wait_removes_listener(self):
        source = ScriptedSnapshotSource()
        wait = await waiting(wait_for_field(source, "url", timeout=5), source)
        wait.cancel()
        with pytest.raises(asyncio.CancelledError):
            await wait
        assert source.remove_calls == 1
        assert source.active_listeners == 0


class TestWithDocumentStore:
    async def test_waits_for_field_written_later(self):
        store = InMemoryDocumentStore()
        reference = store.document("uploads/u1")
        reference.set({"status": "pending"})

        wait = asyncio.create_task(on_field_updated(reference, "url", timeout=5))
        await until(lambda: store.active_listeners() > 0)
        reference.update({"status": "done", "url": "https://cdn/u1"})

        assert await wait == "https://cdn/u1"
        assert store.active_listeners() == 0

    async def test_existing_value_returned_immediately(self):
        store = InMemoryDocumentStore()
        reference = store.document("uploads/u1")
        reference.set({"url": "https://cdn/u1"})
        assert await on_field_updated(reference, "url") == "https://cdn/u1"
        assert store.active_listeners() == 0
