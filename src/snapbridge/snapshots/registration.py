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
"""Uniform ``register(on_event, on_error) -> registration`` shape over snapshot sources."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from snapbridge.snapshots.ports.outbound import ListenerRegistration, SnapshotSource

logger = logging.getLogger(__name__)

EventCallback = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]
Subscriber = Callable[[EventCallback, ErrorCallback], ListenerRegistration]


def register(
    source: SnapshotSource,
    on_event: EventCallback,
    on_error: ErrorCallback,
    *,
    include_metadata_changes: bool = False,
) -> ListenerRegistration:
    """Attach a listener to *source*, splitting its single callback in two."""

    def listener(snapshot: Any | None, error: BaseException | None) -> None:
        if error is not None:
            on_error(error)
        elif snapshot is not None:
            on_event(snapshot)

    registration = source.add_snapshot_listener(listener, include_metadata_changes=include_metadata_changes)
    logger.debug(
        "snapshot_listener_registered",
        extra={"source": repr(source), "include_metadata_changes": include_metadata_changes},
    )
    return registration


def subscriber(source: SnapshotSource, *, include_metadata_changes: bool = False) -> Subscriber:
    """Defer :func:`register` until a stream calls the returned function."""

    def subscribe(on_event: EventCallback, on_error: ErrorCallback) -> ListenerRegistration:
        return register(source, on_event, on_error, include_metadata_changes=include_metadata_changes)

    return subscribe
