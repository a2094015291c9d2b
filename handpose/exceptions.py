"""Exception hierarchy for frame ingestion and configuration errors."""


class HandPoseError(Exception):
    """Base exception for handpose errors."""


class FrameDecodeError(HandPoseError):
    """Raised when a frame payload does not have the hand/joint list shape."""


class ConfigError(HandPoseError):
    """Raised when configuration values are invalid."""
