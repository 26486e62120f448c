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
"""Shared enums used by configuration and by the stream machinery."""

from __future__ import annotations

from enum import Enum


class OverflowPolicy(Enum):
    """What a bounded stream does when a new event finds its buffer full.

    * ``DROP_OLDEST`` -- evict the oldest undelivered event (conflation).
    * ``DROP_NEWEST`` -- discard the incoming event.
    * ``FAIL`` -- terminate the stream with ``BufferOverflowException``.
    """

    DROP_OLDEST = "drop_oldest"
    DROP_NEWEST = "drop_newest"
    FAIL = "fail"
