"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNCONFIRMED = "UNCONFIRMED"
    RATE_LIMITED = "RATE_LIMITED"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_EMAIL = "INVALID_EMAIL"
    AUTH_UNKNOWN = "AUTH_UNKNOWN"

    # Authorization errors (401/403)
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"

    # Not found errors (404)
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    EVALUATION_NOT_FOUND = "EVALUATION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    CONSISTENCY_CONFLICT = "CONSISTENCY_CONFLICT"
    USERNAME_TAKEN = "USERNAME_TAKEN"

    # Backend errors (503)
    TRANSIENT_FETCH_ERROR = "TRANSIENT_FETCH_ERROR"
    SESSION_CLOSED = "SESSION_CLOSED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthErrorCode(StrEnum):
    """Reasons a login or signup can be rejected."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNCONFIRMED = "UNCONFIRMED"
    RATE_LIMITED = "RATE_LIMITED"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_EMAIL = "INVALID_EMAIL"
    UNKNOWN = "UNKNOWN"


# User-facing messages, in the language of the app.
_AUTH_MESSAGES: dict[AuthErrorCode, str] = {
    AuthErrorCode.INVALID_CREDENTIALS: "Email ou senha incorretos",
    AuthErrorCode.UNCONFIRMED: "Por favor, confirme seu email antes de fazer login",
    AuthErrorCode.RATE_LIMITED: "Muitas tentativas. Tente novamente em alguns minutos",
    AuthErrorCode.ALREADY_REGISTERED: "Este email já está cadastrado",
    AuthErrorCode.WEAK_PASSWORD: "Senha deve ter pelo menos 6 caracteres",
    AuthErrorCode.INVALID_EMAIL: "Email inválido",
    AuthErrorCode.UNKNOWN: "Ocorreu um erro inesperado. Tente novamente.",
}

_AUTH_STATUS: dict[AuthErrorCode, int] = {
    AuthErrorCode.INVALID_CREDENTIALS: 401,
    AuthErrorCode.UNCONFIRMED: 403,
    AuthErrorCode.RATE_LIMITED: 429,
    AuthErrorCode.ALREADY_REGISTERED: 409,
    AuthErrorCode.WEAK_PASSWORD: 400,
    AuthErrorCode.INVALID_EMAIL: 400,
    AuthErrorCode.UNKNOWN: 502,
}

_AUTH_TO_ERROR_CODE: dict[AuthErrorCode, ErrorCode] = {
    AuthErrorCode.INVALID_CREDENTIALS: ErrorCode.INVALID_CREDENTIALS,
    AuthErrorCode.UNCONFIRMED: ErrorCode.UNCONFIRMED,
    AuthErrorCode.RATE_LIMITED: ErrorCode.RATE_LIMITED,
    AuthErrorCode.ALREADY_REGISTERED: ErrorCode.ALREADY_REGISTERED,
    AuthErrorCode.WEAK_PASSWORD: ErrorCode.WEAK_PASSWORD,
    AuthErrorCode.INVALID_EMAIL: ErrorCode.INVALID_EMAIL,
    AuthErrorCode.UNKNOWN: ErrorCode.AUTH_UNKNOWN,
}


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthError(AppException):
    """Login or signup rejected by the auth service."""

    def __init__(self, code: AuthErrorCode, reason: str | None = None) -> None:
        self.code = code
        super().__init__(
            error_code=_AUTH_TO_ERROR_CODE[code],
            message=_AUTH_MESSAGES[code],
            status_code=_AUTH_STATUS[code],
            details={"reason": reason} if reason else None,
        )


class AuthorizationError(AppException):
    """Base class for missing identity or missing role."""


class NotAuthenticatedError(AuthorizationError):
    """No user is logged in."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            error_code=ErrorCode.NOT_AUTHENTICATED,
            message=message,
            status_code=401,
        )


class InsufficientRoleError(AuthorizationError):
    """The logged in user lacks the role the operation requires."""

    def __init__(self, required_role: str = "admin") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_ROLE,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class ConsistencyConflictError(AppException):
    """A concurrent write to the same list membership won the race."""

    def __init__(self, user_id: str, game_id: int, kind: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONSISTENCY_CONFLICT,
            message="List changed concurrently, re-fetch its state",
            status_code=409,
            details={"user_id": user_id, "game_id": game_id, "kind": kind},
        )


class TransientFetchError(AppException):
    """The backend could not be read right now."""

    def __init__(self, resource: str, reason: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.TRANSIENT_FETCH_ERROR,
            message=f"Could not load {resource}",
            status_code=503,
            details={"resource": resource, "reason": reason},
        )


class SessionClosedError(AppException):
    """The session manager was closed before the command was applied."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.SESSION_CLOSED,
            message="Session manager is shutting down",
            status_code=503,
        )


class GameNotFoundError(AppException):
    """Game not found."""

    def __init__(self, game_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.GAME_NOT_FOUND,
            message=f"Game not found: {game_id}",
            status_code=404,
            details={"game_id": game_id},
        )


class EvaluationNotFoundError(AppException):
    """Evaluation not found."""

    def __init__(self, evaluation_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.EVALUATION_NOT_FOUND,
            message=f"Evaluation not found: {evaluation_id}",
            status_code=404,
            details={"evaluation_id": evaluation_id},
        )


class UsernameTakenError(AppException):
    """Username is already used by another profile."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_TAKEN,
            message=f"Username already taken: {username}",
            status_code=409,
            details={"username": username},
        )


class ValidationError(AppException):
    """Input rejected by a domain rule."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )
