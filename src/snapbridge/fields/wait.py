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
"""Waiting for the first value of a document field.

A wait is a :class:`~snapbridge.snapshots.stream.SnapshotStream` over the
field, consumed until the first acceptable value. Whatever ends the wait
(value, error, timeout or cancellation of the caller), the stream is closed
and its listener removed before the wait returns or raises.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any

from snapbridge.config.properties.fields import FieldWaitProperties
from snapbridge.kernel.exceptions import ListenerClosedException, OperationTimeoutException
from snapbridge.snapshots.ports.outbound import DocumentSnapshot, SnapshotSource
from snapbridge.snapshots.registration import subscriber
from snapbridge.snapshots.stream import PendingEvent, SnapshotStream

logger = logging.getLogger(__name__)

Timeout = float | timedelta | None


def field_values(document: SnapshotSource, field_name: str) -> SnapshotStream[Any]:
    """Stream the raw value of *field_name* for every snapshot of *document*.

    A missing document or an absent field yields ``None``.
    """

    def translate(snapshot: DocumentSnapshot) -> list[PendingEvent[Any]]:
        value = snapshot.get(field_name) if snapshot.exists else None
        return [PendingEvent(object, lambda: value)]

    return SnapshotStream(subscriber(document), translate, name=f"field_values[{field_name}]")


def _seconds(timeout: Timeout) -> float | None:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return timeout


async def _first_value(stream: SnapshotStream[Any], nullable: bool) -> Any:
    try:
        async for value in stream:
            if nullable or value is not None:
                return value
    except Exception as exc:
        if not nullable:
            raise
        logger.debug("field_wait_error_as_none", extra={"stream": stream.name, "error": type(exc).__name__})
        return None

    if nullable:
        return None
    raise ListenerClosedException(
        f"Stream '{stream.name}' closed before delivering a value",
        code="FIELD_WAIT_CLOSED",
        context={"stream": stream.name},
    )


async def wait_for_value(
    stream: SnapshotStream[Any],
    *,
    nullable: bool = False,
    timeout: Timeout = None,
) -> Any:
    """Consume *stream* until its first acceptable value, then close it.

    Args:
        stream: A fresh stream of raw values.
        nullable: Accept ``None`` as a value; errors and closure also
            resolve to ``None``.
        timeout: Seconds (or a ``timedelta``) before giving up, ``None``
            to wait indefinitely.

    Raises:
        OperationTimeoutException: The timeout expired first.
        ListenerClosedException: Non-nullable wait and the stream closed
            without a value.
    """
    seconds = _seconds(timeout)
    deadline = asyncio.timeout(seconds)
    try:
        async with deadline:
            return await _first_value(stream, nullable)
    except TimeoutError as exc:
        # A TimeoutError delivered by the data source is a source failure.
        if not deadline.expired():
            raise
        raise OperationTimeoutException(
            f"No value on '{stream.name}' within {seconds}s",
            code="FIELD_WAIT_TIMEOUT",
            context={"stream": stream.name, "timeout": seconds},
        ) from exc
    finally:
        stream.close()


async def wait_for_field(
    document: SnapshotSource,
    field_name: str,
    *,
    nullable: bool = False,
    timeout: Timeout = None,
    properties: FieldWaitProperties | None = None,
) -> Any:
    """Wait for *field_name* of *document* to hold a value.

    Non-nullable waits skip snapshots where the field is ``None`` and
    propagate upstream errors unchanged. Nullable waits return the first
    value, ``None`` included, and turn errors into ``None``. A ``timeout``
    left as ``None`` falls back to ``properties.timeout``.
    """
    if timeout is None and properties is not None:
        timeout = properties.timeout
    logger.debug(
        "field_wait_started",
        extra={"field": field_name, "nullable": nullable, "timeout": _seconds(timeout)},
    )
    return await wait_for_value(field_values(document, field_name), nullable=nullable, timeout=timeout)


async def on_field_updated(
    document: SnapshotSource,
    field_name: str,
    timeout: Timeout = None,
    *,
    properties: FieldWaitProperties | None = None,
) -> Any:
    """First non-``None`` value of *field_name*."""
    return await wait_for_field(document, field_name, nullable=False, timeout=timeout, properties=properties)


async def on_field_updated_or_null(
    document: SnapshotSource,
    field_name: str,
    timeout: Timeout = None,
    *,
    properties: FieldWaitProperties | None = None,
) -> Any | None:
    """First value of *field_name*, ``None`` included."""
    return await wait_for_field(document, field_name, nullable=True, timeout=timeout, properties=properties)
