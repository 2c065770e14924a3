"""Application exceptions.

Every error the API reports on purpose derives from AppError and carries the
HTTP status it maps to. The app-level handler in create_app() turns them into
the standard failure envelope; anything else becomes a generic 500.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for MorFit operations."""

    status_code: int = 500

    def __init__(
        self,
        message: str = "Internal server error",
        status_code: int | None = None,
        is_operational: bool = True,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational


class ValidationError(AppError):
    """Raised when a request body fails validation."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.errors = errors or []


class MissingCredentialError(AppError):
    """No token was presented on a route that requires one."""

    status_code = 401

    def __init__(self, message: str = "Access token required"):
        super().__init__(message)


class InvalidCredentialError(AppError):
    """A token was presented but its signature or expiry does not check out."""

    status_code = 403

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InsufficientAuthorizationError(AppError):
    """Authenticated, but the role or permission check failed."""

    status_code = 403

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class ConflictError(AppError):
    status_code = 409

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


class ConfigurationError(AppError):
    """Missing or invalid setting. Fatal, never defaulted in production."""

    def __init__(self, setting: str):
        super().__init__(
            f"Missing or invalid configuration: {setting}",
            status_code=500,
            is_operational=False,
        )
        self.setting = setting


class CryptoError(AppError):
    """Base exception for encryption and decryption failures."""

    pass


class PayloadFormatError(CryptoError):
    """Encrypted payload is not three hex parts joined by ':'."""

    pass


class CryptoIntegrityError(CryptoError):
    """Authentication tag did not verify. No plaintext is returned."""

    pass
