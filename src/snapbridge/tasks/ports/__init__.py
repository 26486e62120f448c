"""Tasks ports — the operation handle contract of the data source."""

from snapbridge.tasks.ports.outbound import CancellableHandle, OperationHandle

__all__ = ["CancellableHandle", "OperationHandle"]
