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
"""SnapBridge Tasks — awaiting single-shot operation handles.

Usage::

    from snapbridge.tasks import await_handle

    snapshot = await await_handle(document.get())
"""

from snapbridge.tasks.adapters.completion_source import CompletionSource, HandleState
from snapbridge.tasks.bridge import as_future, as_handle, await_handle
from snapbridge.tasks.ports.outbound import CancellableHandle, OperationHandle

__all__ = [
    "CancellableHandle",
    "CompletionSource",
    "HandleState",
    "OperationHandle",
    "as_future",
    "as_handle",
    "await_handle",
]
