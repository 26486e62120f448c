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
"""SnapBridge Kernel — exceptions and shared types, with zero external dependencies."""

from snapbridge.kernel.exceptions import (
    BufferOverflowException,
    BusinessException,
    EmptyResultException,
    InfrastructureException,
    ListenerClosedException,
    MappingException,
    NotAuthenticatedException,
    OperationTimeoutException,
    ResourceNotFoundException,
    SecurityException,
    SnapBridgeException,
    StreamStateException,
)
from snapbridge.kernel.types import OverflowPolicy

__all__ = [
    # Base
    "SnapBridgeException",
    # Business
    "BusinessException",
    "ResourceNotFoundException",
    "EmptyResultException",
    "MappingException",
    "StreamStateException",
    # Security
    "SecurityException",
    "NotAuthenticatedException",
    # Infrastructure
    "InfrastructureException",
    "OperationTimeoutException",
    "ListenerClosedException",
    "BufferOverflowException",
    # Types
    "OverflowPolicy",
]
