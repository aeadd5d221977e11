"""Custom exceptions for the wedding-hooks application."""


class WeddingHooksException(Exception):
    """Base exception for all wedding-hooks errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize exception with message and optional details.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageException(WeddingHooksException):
    """Exceptions related to storage operations."""

    pass


class DatabaseException(StorageException):
    """Database operation failed."""

    pass


class ConfigurationException(WeddingHooksException):
    """Configuration error."""

    pass


class WebhookDeliveryException(WeddingHooksException):
    """A webhook delivery attempt could not be completed."""

    def __init__(self, message: str, url: str, details: dict | None = None) -> None:
        """Initialize delivery exception.

        Args:
            message: Error message
            url: Target endpoint URL
            details: Additional error details
        """
        super().__init__(message, details)
        self.url = url


class APIException(WeddingHooksException):
    """API-related exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            message: Error message
            status_code: HTTP status code
            details: Additional error details
        """
        super().__init__(message, details)
        self.status_code = status_code


class ValidationException(APIException):
    """Data validation failed or an operation was called with invalid arguments."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        """Initialize with 422 status code."""
        super().__init__(message, status_code=422, details=details)


class NotFoundException(APIException):
    """Resource not found."""

    def __init__(self, message: str = "Resource not found", details: dict | None = None) -> None:
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404, details=details)


class ConflictException(APIException):
    """Resource already exists."""

    def __init__(self, message: str = "Resource already exists", details: dict | None = None) -> None:
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409, details=details)
