"""SnapBridge configuration property classes."""
