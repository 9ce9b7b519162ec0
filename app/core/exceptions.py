from typing import Optional, Any


class StorefrontError(Exception):
    """
    Base exception for the storefront application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """
    Raised when an entity or request fails validation.
    `field` names the first failing field.
    """
    def __init__(self, message: str = "Validation error", field: Optional[str] = None, details: Optional[Any] = None):
        self.field = field
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)


class AuthenticationError(StorefrontError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", code: str = "AUTHENTICATION_FAILED", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=401, details=details)


class MissingTokenError(AuthenticationError):
    def __init__(self, message: str = "Authentication token is missing"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidSignatureError(AuthenticationError):
    def __init__(self, message: str = "Token signature is invalid"):
        super().__init__(message, code="INVALID_SIGNATURE")


class TokenExpiredError(AuthenticationError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MalformedTokenError(AuthenticationError):
    def __init__(self, message: str = "Token is malformed"):
        super().__init__(message, code="MALFORMED_TOKEN")


class TokenRevokedError(AuthenticationError):
    def __init__(self, message: str = "Token has been revoked"):
        super().__init__(message, code="TOKEN_REVOKED")


class ForbiddenError(StorefrontError):
    """
    Raised when the caller's role does not allow the operation.
    """
    def __init__(self, message: str = "Insufficient permissions", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)


class ResourceNotFoundError(StorefrontError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class ConflictError(StorefrontError):
    """
    Raised on duplicates (username, email) and illegal state changes.
    """
    def __init__(self, message: str = "Resource conflict", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)


class StorageError(StorefrontError):
    """
    Raised when the database fails. The message is never shown to clients.
    """
    def __init__(self, message: str = "Storage failure", details: Optional[Any] = None):
        super().__init__(message, code="INTERNAL_ERROR", status_code=500, details=details)
