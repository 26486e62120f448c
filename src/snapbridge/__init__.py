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
"""SnapBridge — asyncio adapters over push-based document data sources.

Subpackages:

* :mod:`snapbridge.tasks` -- await callback-completed operation handles.
* :mod:`snapbridge.snapshots` -- snapshot listeners as async streams.
* :mod:`snapbridge.fields` -- wait for the first value of a document field.
* :mod:`snapbridge.documents`, :mod:`snapbridge.auth`, :mod:`snapbridge.storage`
  -- awaitable one-shot operations of the respective clients.
"""

from snapbridge.core.config import Config
from snapbridge.fields.wait import on_field_updated, on_field_updated_or_null, wait_for_field
from snapbridge.kernel.exceptions import SnapBridgeException
from snapbridge.kernel.types import OverflowPolicy
from snapbridge.snapshots.flows import document_snapshots, document_values, snapshot_changes, snapshot_models
from snapbridge.snapshots.stream import SnapshotStream
from snapbridge.tasks.bridge import as_future, as_handle, await_handle

__version__ = "0.1.0"

__all__ = [
    "Config",
    "OverflowPolicy",
    "SnapBridgeException",
    "SnapshotStream",
    "as_future",
    "as_handle",
    "await_handle",
    "document_snapshots",
    "document_values",
    "on_field_updated",
    "on_field_updated_or_null",
    "snapshot_changes",
    "snapshot_models",
    "wait_for_field",
]
