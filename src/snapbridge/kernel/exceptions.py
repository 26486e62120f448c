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
"""Exception hierarchy for SnapBridge.

Errors reported by the upstream data source are never wrapped: the original
exception object reaches the consumer. Cancellation always surfaces as
:class:`asyncio.CancelledError`. Everything raised by the library itself
inherits from :class:`SnapBridgeException`.

Categories:
- BusinessException: local contract violations (missing documents, bad mappings)
- SecurityException: operations that need a signed-in user
- InfrastructureException: timeouts, closed listeners, overflowing buffers
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SnapBridgeException(Exception):
    """Base exception for all SnapBridge errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "FIELD_WAIT_TIMEOUT").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(SnapBridgeException):
    """Local contract violations."""


class ResourceNotFoundException(BusinessException):
    """Requested resource does not exist."""


class EmptyResultException(ResourceNotFoundException):
    """A non-null model was demanded but the document does not exist."""


class MappingException(BusinessException):
    """A raw document could not be turned into an application model."""


class StreamStateException(BusinessException):
    """A stream was used in a way its lifecycle does not allow (e.g. iterated twice)."""


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(SnapBridgeException):
    """Authentication and authorization errors."""


class NotAuthenticatedException(SecurityException):
    """The operation needs a signed-in user and there is none."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(SnapBridgeException):
    """Failures of the listening and waiting machinery."""


class OperationTimeoutException(InfrastructureException):
    """Operation exceeded its allowed time limit."""


class ListenerClosedException(InfrastructureException):
    """A listener stream closed before delivering the awaited value."""


class BufferOverflowException(InfrastructureException):
    """A stream's delivery buffer was full and its overflow policy is FAIL."""
