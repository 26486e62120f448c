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
"""Outbound port protocols for the authentication client."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from snapbridge.tasks.ports.outbound import OperationHandle


@dataclass(frozen=True)
class ProfileChanges:
    """Profile fields to change; ``None`` leaves a field untouched."""

    display_name: str | None = None
    photo_url: str | None = None


@runtime_checkable
class User(Protocol):
    @property
    def uid(self) -> str: ...

    @property
    def display_name(self) -> str | None: ...

    @property
    def photo_url(self) -> str | None: ...

    def update_profile(self, changes: ProfileChanges) -> OperationHandle[None]: ...

    def reload(self) -> OperationHandle[None]:
        """Refresh the locally cached user from the server."""
        ...


AuthListener = Callable[["Auth"], None]


@runtime_checkable
class Auth(Protocol):
    """Authentication client. Listeners receive the client itself."""

    @property
    def current_user(self) -> User | None: ...

    def add_auth_state_listener(self, listener: AuthListener) -> None: ...

    def remove_auth_state_listener(self, listener: AuthListener) -> None: ...

    def add_id_token_listener(self, listener: AuthListener) -> None: ...

    def remove_id_token_listener(self, listener: AuthListener) -> None: ...
