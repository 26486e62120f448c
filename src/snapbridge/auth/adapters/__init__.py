"""Auth adapters — in-memory authentication client."""

from snapbridge.auth.adapters.memory import InMemoryAuth, InMemoryUser

__all__ = ["InMemoryAuth", "InMemoryUser"]
