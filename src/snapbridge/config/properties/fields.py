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
"""Field-wait configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from snapbridge.core.config import config_properties


@config_properties(prefix="snapbridge.fields")
@dataclass
class FieldWaitProperties:
    """Configuration for field waits (snapbridge.fields.*).

    timeout is in seconds; None waits until a value, an error or
    cancellation.
    """

    timeout: float | None = None
