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
"""In-memory storage reference for testing and local development."""

from __future__ import annotations

from dataclasses import fields, replace

from snapbridge.kernel.exceptions import ResourceNotFoundException
from snapbridge.storage.ports.outbound import StorageMetadata
from snapbridge.tasks.adapters.completion_source import CompletionSource


class InMemoryStorageReference:
    def __init__(self, path: str, metadata: StorageMetadata | None = None, exists: bool = True) -> None:
        self._path = path
        self.metadata = metadata or StorageMetadata()
        self.exists = exists

    def __repr__(self) -> str:
        return f"<InMemoryStorageReference {self._path}>"

    @property
    def path(self) -> str:
        return self._path

    def _not_found(self) -> ResourceNotFoundException:
        return ResourceNotFoundException(
            f"Object does not exist: {self._path}",
            code="OBJECT_NOT_FOUND",
            context={"path": self._path},
        )

    def update_metadata(self, metadata: StorageMetadata) -> CompletionSource[StorageMetadata]:
        if not self.exists:
            return CompletionSource.failed(self._not_found())
        changes = {
            f.name: getattr(metadata, f.name)
            for f in fields(metadata)
            if f.name != "custom_metadata" and getattr(metadata, f.name) is not None
        }
        custom = {**self.metadata.custom_metadata, **metadata.custom_metadata}
        self.metadata = replace(self.metadata, custom_metadata=custom, **changes)
        return CompletionSource.completed(self.metadata)

    def delete(self) -> CompletionSource[None]:
        if not self.exists:
            return CompletionSource.failed(self._not_found())
        self.exists = False
        return CompletionSource.completed(None)
