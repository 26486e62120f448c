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
"""Outbound port for single-shot operation handles produced by the data source."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)

CompletionListener = Callable[[Any], None]


@runtime_checkable
class OperationHandle(Protocol[T_co]):
    """A pending or completed single result.

    ``result`` is only meaningful once the handle succeeded and ``exception``
    once it failed. ``add_on_complete_listener`` must call the listener
    exactly once with the handle itself, on whatever thread completes it, or
    immediately when the handle is already complete.
    """

    @property
    def is_complete(self) -> bool: ...

    @property
    def is_canceled(self) -> bool: ...

    @property
    def result(self) -> T_co | None: ...

    @property
    def exception(self) -> BaseException | None: ...

    def add_on_complete_listener(self, listener: CompletionListener) -> Any: ...


@runtime_checkable
class CancellableHandle(OperationHandle[T_co], Protocol[T_co]):
    """An operation handle whose producer accepts cancellation requests."""

    def cancel(self) -> bool: ...
