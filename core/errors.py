"""
Structured application errors.

Every error the services raise carries the HTTP status the boundary should
answer with and a stable machine-readable code. The exception handlers in
main.py turn them into JSON responses.
"""

from typing import Optional
from starlette import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# Request / credential errors

class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    message = "validation error"


class InvalidCredentialsError(AppError):
    # Unknown email and wrong password share this error on purpose
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    message = "Invalid email or password"


class DuplicateEmailError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "email_taken"
    message = "Email has been taken"


class UserNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "user_not_found"
    message = "Account not found"


# Hashing

class HashError(AppError):
    code = "hash_failed"
    message = "Failed to hash password"


class PasswordMismatchError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "password_mismatch"
    message = "Password does not match"


# Tokens

class TokenIssuanceError(AppError):
    code = "token_issuance_failed"
    message = "Failed to issue access token"


class SigningError(TokenIssuanceError):
    code = "token_signing_failed"
    message = "Failed to sign access token"


class InvalidTokenError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_token"
    message = "Could not validate credentials."


class ExpiredTokenError(InvalidTokenError):
    code = "token_expired"
    message = "Token expired"


class InvalidSignatureError(InvalidTokenError):
    code = "invalid_signature"
    message = "Invalid token signature"


class MalformedTokenError(InvalidTokenError):
    code = "malformed_token"
    message = "Malformed token"


# Session store

class StoreUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_unavailable"
    message = "Session store unavailable"


class SessionCreateError(AppError):
    code = "session_create_failed"
    message = "Failed to create session"


class SessionNotFoundError(AppError):
    # eviction right after an insert found nothing: a store fault, not a client error
    code = "session_not_found"
    message = "Session not found"


class CommitError(AppError):
    code = "commit_failed"
    message = "Failed to commit transaction"


class RollbackError(AppError):
    """
    Raised when a rollback fails.

    Keeps both sides of the failure: `cause` is the error that triggered the
    rollback (None when the rollback was requested directly) and
    `rollback_error` is what the driver raised while rolling back.
    """
    code = "rollback_failed"
    message = "Failed to rollback transaction"

    def __init__(self, cause: Optional[BaseException] = None,
                 rollback_error: Optional[BaseException] = None):
        self.cause = cause
        self.rollback_error = rollback_error

        message = self.message
        if cause is not None:
            message = f"{message} after: {cause}"
        if rollback_error is not None:
            message = f"{message} ({rollback_error})"

        super().__init__(message)


# Listings

class LocalNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "local_not_found"
    message = "Local business not found"


class AttractionNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "attraction_not_found"
    message = "Tourist attraction not found"
