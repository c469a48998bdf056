"""
Service exceptions.

Each AuthError carries the client-facing error code, the HTTP status the
API layer should answer with, and the key of its localized message.
"""
from enum import IntEnum


class ErrorCode(IntEnum):
    SYSTEM_ERROR = 1
    INVALID_PARAMETER = 2
    UNAUTHORIZED = 3
    EMAIL_EXIST = 4
    INVALID_USERNAME_OR_PASSWORD = 5
    OLD_PASSWORD_NOT_CORRECT = 6
    NOT_FOUND = 7


class AuthError(Exception):
    """Base class for errors the caller can act on."""

    code = ErrorCode.SYSTEM_ERROR
    status = 500
    message_key = "common.systemError"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message_key)


class EmailExists(AuthError):
    code = ErrorCode.EMAIL_EXIST
    status = 409
    message_key = "auth.emailExist"


class InvalidCredentials(AuthError):
    code = ErrorCode.INVALID_USERNAME_OR_PASSWORD
    status = 401
    message_key = "auth.wrongEmailOrPassword"


class Unauthorized(AuthError):
    code = ErrorCode.UNAUTHORIZED
    status = 401
    message_key = "auth.unauthorized"


class OldPasswordIncorrect(AuthError):
    code = ErrorCode.OLD_PASSWORD_NOT_CORRECT
    status = 400
    message_key = "auth.oldPasswordIsNotCorrect"


class UserNotFound(AuthError):
    code = ErrorCode.NOT_FOUND
    status = 404
    message_key = "user.notFound"


class SigningError(RuntimeError):
    """Signing secret missing or unusable. Misconfiguration, never retried."""


class TokenError(Exception):
    """Access token failed verification."""
