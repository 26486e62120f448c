"""Tasks adapters — concrete operation handles."""

from snapbridge.tasks.adapters.completion_source import CompletionSource, HandleState

__all__ = ["CompletionSource", "HandleState"]
