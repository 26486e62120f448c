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
"""Tests for document snapshot streams — document_snapshots and document_values."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from snapbridge.snapshots.adapters.memory import (
    InMemoryDocumentStore,
    MemoryDocumentSnapshot,
    MemoryMetadata,
    ScriptedSnapshotSource,
)
from snapbridge.snapshots.flows import document_snapshots, document_values
from snapbridge.snapshots.stream import SnapshotStream
from snapbridge.snapshots.types import Empty, NoPendingWrites, ResultDocument, SingleDocument


def to_name(raw: dict[str, Any], document_id: str) -> str:
    return f"{document_id}:{raw['name']}"


async def pulling(stream: SnapshotStream[Any], count: int) -> asyncio.Task[list[Any]]:
    async def take() -> list[Any]:
        return [await stream.__anext__() for _ in range(count)]

    task = asyncio.create_task(take())
    await asyncio.sleep(0)
    return task


class TestDocumentSnapshots:
    async def test_existing_and_missing_document(self):
        source = ScriptedSnapshotSource()
        stream = document_snapshots(source, mapping=to_name)
        events = await pulling(stream, 4)

        source.emit(MemoryDocumentSnapshot("u1", {"name": "ada"}))
        source.emit(MemoryDocumentSnapshot("u1"))

        single, trailer, empty, _ = await events
        assert single == SingleDocument(ResultDocument("u1:ada", has_pending_writes=False, is_from_cache=False))
        assert trailer == NoPendingWrites()
        assert empty == Empty()
        stream.close()

    async def test_pending_write_has_no_trailer(self):
        source = ScriptedSnapshotSource()
        stream = document_snapshots(source, mapping=to_name)
        events = await pulling(stream, 3)

        source.emit(MemoryDocumentSnapshot("u1", {"name": "ada"}, MemoryMetadata(has_pending_writes=True)))
        source.emit(MemoryDocumentSnapshot("u1", {"name": "ada"}))

        local, confirmed, trailer = await events
        assert local.document.has_pending_writes is True
        assert confirmed.document.has_pending_writes is False
        assert trailer == NoPendingWrites()
        stream.close()

    async def test_without_metadata(self):
        source = ScriptedSnapshotSource()
        stream = document_snapshots(source, mapping=to_name, include_metadata=False)
        events = await pulling(stream, 2)
        assert source.include_metadata_changes == [False]

        source.emit(MemoryDocumentSnapshot("u1", {"name": "ada"}))
        source.emit(MemoryDocumentSnapshot("u1", {"name": "grace"}))

        first, second = await events
        assert first.document.model == "u1:ada"
        assert second.document.model == "u1:grace"
        stream.close()


class TestDocumentValues:
    async def test_yields_models_of_existing_documents(self):
        source = ScriptedSnapshotSource()
        stream = document_values(source, mapping=to_name)
        events = await pulling(stream, 2)

        source.emit(MemoryDocumentSnapshot("u1", {"name": "ada"}))
        source.emit(MemoryDocumentSnapshot("u1"))
        source.emit(MemoryDocumentSnapshot("u1", {"name": "grace"}))

        assert await events == ["u1:ada", "u1:grace"]
        stream.close()

    async def test_error_closes_by_default(self):
        source = ScriptedSnapshotSource()
        stream = document_values(source, mapping=to_name)
        events = await pulling(stream, 1)
        source.fail(ConnectionError("offline"))
        with pytest.raises(ConnectionError):
            await events
        assert source.remove_calls == 1

    async def test_errors_logged_when_not_closing(self, caplog: pytest.LogCaptureFixture):
        source = ScriptedSnapshotSource()
        stream = document_values(source, mapping=to_name, close_on_error=False)
        events = await pulling(stream, 1)

        with caplog.at_level(logging.WARNING, logger="snapbridge.snapshots.flows"):
            source.fail(ConnectionError("flaky"))
        source.emit(MemoryDocumentSnapshot("u1", {"name": "ada"}))

        assert await events == ["u1:ada"]
        assert "snapshot_listener_error_ignored" in caplog.text
        assert source.remove_calls == 0
        stream.close()
        assert source.remove_calls == 1


class TestDocumentStoreIntegration:
    async def test_values_follow_writes(self):
        store = InMemoryDocumentStore()
        reference = store.document("users/u1")
        reference.set({"name": "ada"})

        async with document_values(reference, mapping=to_name) as stream:
            first = await stream.__anext__()
            reference.update({"name": "grace"})
            second = await stream.__anext__()

        assert [first, second] == ["u1:ada", "u1:grace"]
        assert store.active_listeners() == 0
