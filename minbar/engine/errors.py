class MinbarError(Exception):
    """Base class for live delivery errors."""


class InvalidSession(MinbarError):
    """Raised when a session is built from an empty or malformed script."""


class OutOfRange(MinbarError, IndexError):
    """Raised when a segment index falls outside the session's script."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"Segment index {index} out of range (0..{count - 1})")
        self.index = index
        self.count = count


class SessionAlreadyActive(MinbarError):
    """Raised when a host is asked to start a second live session."""
