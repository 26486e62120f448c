"""Auth ports — the authentication client contract."""

from snapbridge.auth.ports.outbound import Auth, AuthListener, ProfileChanges, User

__all__ = ["Auth", "AuthListener", "ProfileChanges", "User"]
