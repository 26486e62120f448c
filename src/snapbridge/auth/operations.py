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
"""Auth state streams and profile updates."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from snapbridge.auth.ports.outbound import Auth, AuthListener, ProfileChanges, User
from snapbridge.kernel.exceptions import NotAuthenticatedException
from snapbridge.kernel.types import OverflowPolicy
from snapbridge.snapshots.registration import ErrorCallback, EventCallback, Subscriber
from snapbridge.snapshots.stream import PendingEvent, SnapshotStream
from snapbridge.tasks.bridge import await_handle

logger = logging.getLogger(__name__)


class _AuthListenerRegistration:
    def __init__(self, remove: Callable[[], None]) -> None:
        self._remove = remove

    def remove(self) -> None:
        self._remove()


def _auth_subscriber(
    add: Callable[[AuthListener], None],
    remove: Callable[[AuthListener], None],
) -> Subscriber:
    def subscribe(on_event: EventCallback, on_error: ErrorCallback) -> _AuthListenerRegistration:
        def listener(auth: Auth) -> None:
            on_event(auth.current_user)

        add(listener)
        return _AuthListenerRegistration(lambda: remove(listener))

    return subscribe


def _current_user(user: User | None) -> list[PendingEvent[User | None]]:
    return [PendingEvent(object, lambda: user)]


def _conflated(subscribe: Subscriber, name: str) -> SnapshotStream[User | None]:
    return SnapshotStream(subscribe, _current_user, capacity=1, overflow=OverflowPolicy.DROP_OLDEST, name=name)


def auth_state_changes(auth: Auth) -> SnapshotStream[User | None]:
    """Stream the signed-in user (``None`` when signed out) on every auth state change.

    Only the latest state is kept for a slow consumer.
    """
    subscribe = _auth_subscriber(auth.add_auth_state_listener, auth.remove_auth_state_listener)
    return _conflated(subscribe, "auth_state_changes")


def id_token_changes(auth: Auth) -> SnapshotStream[User | None]:
    """Stream the signed-in user whenever the ID token changes, conflated like :func:`auth_state_changes`."""
    subscribe = _auth_subscriber(auth.add_id_token_listener, auth.remove_id_token_listener)
    return _conflated(subscribe, "id_token_changes")


async def update_profile(user: User, refresh_user: bool = True, **changes: Any) -> User:
    """Apply *changes* (``display_name``, ``photo_url``) to *user*.

    With ``refresh_user`` the user is reloaded afterwards so its properties
    reflect the update.
    """
    await await_handle(user.update_profile(ProfileChanges(**changes)))
    if refresh_user:
        await await_handle(user.reload())
    logger.debug("user_profile_updated", extra={"uid": user.uid, "fields": sorted(changes)})
    return user


async def update_current_user_profile(auth: Auth, refresh_user: bool = True, **changes: Any) -> User:
    """Like :func:`update_profile` for the signed-in user.

    Raises:
        NotAuthenticatedException: Nobody is signed in.
    """
    user = auth.current_user
    if user is None:
        raise NotAuthenticatedException("No user is signed in", code="NOT_AUTHENTICATED")
    return await update_profile(user, refresh_user, **changes)
