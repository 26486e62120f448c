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
"""Awaitable storage object operations."""

from __future__ import annotations

import logging
from typing import Any

from snapbridge.storage.ports.outbound import StorageMetadata, StorageReference
from snapbridge.tasks.bridge import await_handle

logger = logging.getLogger(__name__)


async def update_metadata(reference: StorageReference, **changes: Any) -> StorageMetadata:
    """Update the metadata of the object at *reference* and return the result."""
    metadata = await await_handle(reference.update_metadata(StorageMetadata(**changes)))
    logger.debug("storage_metadata_updated", extra={"path": reference.path, "fields": sorted(changes)})
    return metadata


async def delete_object(reference: StorageReference) -> None:
    await await_handle(reference.delete())
    logger.debug("storage_object_deleted", extra={"path": reference.path})
