"""
Error taxonomy shared by the repository, service and HTTP layers.

Every error raised by the core carries an ErrorKind. The HTTP layer maps kinds
to status codes (see memos.api.errors); the core never deals in status codes.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFound"
    STORAGE = "DatabaseError"
    INTERNAL = "InternalError"


class MemoError(Exception):
    """Base class for all errors raised by the memos core."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MemoError):
    """Malformed or out-of-range input, detected before touching the store."""

    kind = ErrorKind.VALIDATION


class NotFoundError(MemoError):
    """The referenced memo does not exist."""

    kind = ErrorKind.NOT_FOUND


class StorageError(MemoError):
    """The store failed: connectivity, constraint violation, unexpected fault."""

    kind = ErrorKind.STORAGE


class RecordNotFound(StorageError):
    """Raised by the repository when a row targeted by an update does not exist."""


class InternalError(MemoError):
    kind = ErrorKind.INTERNAL
