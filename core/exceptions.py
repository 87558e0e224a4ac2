from __future__ import annotations


class JoinError(Exception):
    pass


class FirebaseError(JoinError):
    """HTTP or transport failure talking to the realtime database."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(JoinError):
    """User input rejected before any write. The message is shown as-is."""
    pass
