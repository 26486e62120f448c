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
"""In-memory authentication client for testing and local development."""

from __future__ import annotations

from snapbridge.auth.ports.outbound import AuthListener, ProfileChanges
from snapbridge.tasks.adapters.completion_source import CompletionSource


class InMemoryUser:
    def __init__(self, uid: str, display_name: str | None = None, photo_url: str | None = None) -> None:
        self._uid = uid
        self._display_name = display_name
        self._photo_url = photo_url
        self.reload_count = 0
        self.failure: BaseException | None = None

    def __repr__(self) -> str:
        return f"<InMemoryUser {self._uid}>"

    @property
    def uid(self) -> str:
        return self._uid

    @property
    def display_name(self) -> str | None:
        return self._display_name

    @property
    def photo_url(self) -> str | None:
        return self._photo_url

    def update_profile(self, changes: ProfileChanges) -> CompletionSource[None]:
        if self.failure is not None:
            return CompletionSource.failed(self.failure)
        if changes.display_name is not None:
            self._display_name = changes.display_name
        if changes.photo_url is not None:
            self._photo_url = changes.photo_url
        return CompletionSource.completed(None)

    def reload(self) -> CompletionSource[None]:
        self.reload_count += 1
        return CompletionSource.completed(None)


class InMemoryAuth:
    """Auth client whose state changes are driven by :meth:`sign_in`/:meth:`sign_out`.

    Like real clients, listeners are invoked once right after being added.
    """

    def __init__(self, current_user: InMemoryUser | None = None) -> None:
        self._current_user = current_user
        self._state_listeners: list[AuthListener] = []
        self._token_listeners: list[AuthListener] = []
        self.removed_listeners = 0

    @property
    def current_user(self) -> InMemoryUser | None:
        return self._current_user

    @property
    def active_listeners(self) -> int:
        return len(self._state_listeners) + len(self._token_listeners)

    def sign_in(self, user: InMemoryUser) -> None:
        self._current_user = user
        self._notify(self._state_listeners)
        self._notify(self._token_listeners)

    def sign_out(self) -> None:
        self._current_user = None
        self._notify(self._state_listeners)
        self._notify(self._token_listeners)

    def refresh_token(self) -> None:
        self._notify(self._token_listeners)

    def add_auth_state_listener(self, listener: AuthListener) -> None:
        self._state_listeners.append(listener)
        listener(self)

    def remove_auth_state_listener(self, listener: AuthListener) -> None:
        self._remove(self._state_listeners, listener)

    def add_id_token_listener(self, listener: AuthListener) -> None:
        self._token_listeners.append(listener)
        listener(self)

    def remove_id_token_listener(self, listener: AuthListener) -> None:
        self._remove(self._token_listeners, listener)

    def _remove(self, listeners: list[AuthListener], listener: AuthListener) -> None:
        if listener in listeners:
            listeners.remove(listener)
            self.removed_listeners += 1

    def _notify(self, listeners: list[AuthListener]) -> None:
        for listener in list(listeners):
            listener(self)
