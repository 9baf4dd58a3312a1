"""Service-level exceptions shared by API and web routes."""


class ValidationError(ValueError):
    """Raised when user input fails a business rule; message is user-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PermissionDenied(Exception):
    """Raised when the acting user may not perform an operation on a row."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)
        self.message = message
