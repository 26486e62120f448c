"""SnapBridge Logging — hexagonal logging port and structlog adapter."""

from snapbridge.logging.port import LoggingPort
from snapbridge.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
