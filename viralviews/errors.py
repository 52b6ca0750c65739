"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_dict(self):
        """Return the JSON error envelope for this error."""
        return {"error": self.message}


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Invalid input", details=None):
        """Initialize the error."""
        super().__init__(message, 400)
        self.details = details or []

    def to_dict(self):
        """Include the field-level issues."""
        return {"error": self.message, "details": self.details}


class AuthenticationError(AppError):
    """Raised when a request carries no valid identity."""

    def __init__(self, message="Unauthorized"):
        """Initialize the error."""
        super().__init__(message, 401)


class PermissionDeniedError(AppError):
    """Raised when an access rule rejects a read or write."""

    def __init__(self, message="Permission denied."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class BattleStateError(AppError):
    """Raised when a battle is not in a state that allows the operation."""

    def __init__(self, message="Battle is not accepting this action."):
        """Initialize the error."""
        super().__init__(message, 409)


class TooManyAttemptsError(AppError):
    """Raised when the identity provider throttles the caller."""

    def __init__(self, message="Too many failed attempts. Please try again later."):
        """Initialize the error."""
        super().__init__(message, 429)


class ExternalServiceError(AppError):
    """Raised when a hosted service (identity, storage, model) fails."""

    def __init__(self, message="An external service failed."):
        """Initialize the error."""
        super().__init__(message, 500)
