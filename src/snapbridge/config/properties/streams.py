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
"""Snapshot stream configuration properties."""

from __future__ import annotations

from pydantic import BaseModel, Field

from snapbridge.core.config import config_properties
from snapbridge.kernel.types import OverflowPolicy


@config_properties(prefix="snapbridge.streams")
class StreamProperties(BaseModel):
    """Defaults for snapshot streams (snapbridge.streams.*).

    capacity bounds the number of undelivered events per stream; 0 means
    unbounded. The one-snapshot cache coalescing buffer is not counted.
    """

    capacity: int = Field(default=0, ge=0)
    overflow: OverflowPolicy = OverflowPolicy.FAIL
    skip_first_cache_hit: bool = False
    include_metadata_changes: bool = True
