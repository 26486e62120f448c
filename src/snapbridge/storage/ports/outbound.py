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
"""Outbound port protocols for object storage references."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from snapbridge.tasks.ports.outbound import OperationHandle


@dataclass(frozen=True)
class StorageMetadata:
    """Object metadata. In an update, ``None`` fields are left unchanged."""

    content_type: str | None = None
    cache_control: str | None = None
    content_disposition: str | None = None
    content_encoding: str | None = None
    content_language: str | None = None
    custom_metadata: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class StorageReference(Protocol):
    @property
    def path(self) -> str: ...

    def update_metadata(self, metadata: StorageMetadata) -> OperationHandle[StorageMetadata]:
        """Completes with the full metadata after the update."""
        ...

    def delete(self) -> OperationHandle[None]: ...
