from typing import Optional, Any

class QuickChatError(Exception):
    """
    Base exception for QuickChat application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(QuickChatError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(QuickChatError):
    """
    Raised when credentials or a session token are rejected.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ValidationError(QuickChatError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class ConflictError(QuickChatError):
    """
    Raised when a resource already exists (e.g. duplicate account).
    """
    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)

class ExternalServiceError(QuickChatError):
    """
    Raised when an external service fails.
    """
    def __init__(self, message: str = "External service error", code: str = "EXTERNAL_SERVICE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=502, details=details)

class UploadError(ExternalServiceError):
    """
    Raised when the image host rejects or fails an upload.
    """
    def __init__(self, message: str = "Image upload failed", details: Optional[Any] = None):
        super().__init__(message, code="UPLOAD_FAILED", details=details)
