"""
Errors raised when talking to the remote directory service.

Every failure of a directory round trip (connection problems, non-2xx
responses, unreadable JSON, records of the wrong shape) surfaces as a
DirectoryServiceError so callers only ever handle one kind of failure.
"""
from typing import Optional


class DirectoryServiceError(Exception):
    """A directory round trip failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordFormatError(DirectoryServiceError):
    """The directory returned data that is not a user record or a list of them."""
