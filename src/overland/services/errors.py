"""Service-layer exceptions."""

from overland.domain.share_code import ShareCodeError


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class SessionError(Exception):
    """Raised when a session action is not allowed in the current run state."""


__all__ = ["SaveLoadError", "SessionError", "ShareCodeError"]
