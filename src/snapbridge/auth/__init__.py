"""SnapBridge Auth — auth state streams and profile updates.

Usage::

    from snapbridge.auth import auth_state_changes

    async with auth_state_changes(auth) as users:
        async for user in users:
            ...
"""

from snapbridge.auth.adapters.memory import InMemoryAuth, InMemoryUser
from snapbridge.auth.operations import (
    auth_state_changes,
    id_token_changes,
    update_current_user_profile,
    update_profile,
)
from snapbridge.auth.ports.outbound import Auth, ProfileChanges, User

__all__ = [
    "Auth",
    "InMemoryAuth",
    "InMemoryUser",
    "ProfileChanges",
    "User",
    "auth_state_changes",
    "id_token_changes",
    "update_current_user_profile",
    "update_profile",
]
