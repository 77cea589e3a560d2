from typing import Optional, Any

from utils.constants import MSG_ACCOUNT_INACTIVE, MSG_INVALID_CREDENTIALS


class PdfDeskError(Exception):
    """
    Base exception for PDFDesk application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(PdfDeskError):
    """
    Raised when a requested resource is absent or not owned by the caller.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(PdfDeskError):
    """
    Raised when a bearer token is missing, invalid or expired.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login credentials do not match. Same message for unknown email and wrong password.
    """
    def __init__(self, message: str = MSG_INVALID_CREDENTIALS, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "INVALID_CREDENTIALS"

class AccountInactiveError(PdfDeskError):
    """
    Raised when a suspended or deleted account tries to log in.
    """
    def __init__(self, message: str = MSG_ACCOUNT_INACTIVE, details: Optional[Any] = None):
        super().__init__(message, code="ACCOUNT_INACTIVE", status_code=403, details=details)

class ValidationError(PdfDeskError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class ConflictError(PdfDeskError):
    """
    Raised when a unique resource already exists (e.g. registered email).
    """
    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="ALREADY_EXISTS", status_code=400, details=details)

class PdfProcessingError(PdfDeskError):
    """
    Raised when reading, mutating or writing a PDF fails.
    """
    def __init__(self, message: str = "Error processing PDF", details: Optional[Any] = None):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500, details=details)
