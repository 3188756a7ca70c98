from typing import Optional, Any

class JobBotError(Exception):
    """
    Base exception for JobBot application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class AuthenticationError(JobBotError):
    """
    Raised when a webhook call does not carry the expected secret.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class StorageError(JobBotError):
    """
    Raised when a record or job document cannot be read or written.
    """
    def __init__(self, message: str = "Storage error", details: Optional[Any] = None):
        super().__init__(message, code="STORAGE_ERROR", status_code=503, details=details)

class ExternalServiceError(JobBotError):
    """
    Raised when an external service (e.g., the Telegram Bot API) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)

class TransportError(ExternalServiceError):
    """
    Raised when the chat transport rejects or fails a request.
    """
    def __init__(self, message: str = "Transport error", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "TRANSPORT_ERROR"

class InvalidTransitionError(JobBotError):
    """
    Raised when the dialogue would move between two states that are not connected.
    """
    def __init__(self, message: str = "Invalid state transition", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_TRANSITION", status_code=500, details=details)

class StorageTimeoutError(StorageError):
    """
    Raised when a storage operation does not finish within its time budget.
    """
    def __init__(self, message: str = "Storage operation timed out", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "STORAGE_TIMEOUT"

class ServiceNotReadyError(JobBotError):
    """
    Raised when a request arrives before startup has wired the dispatcher.
    """
    def __init__(self, message: str = "Service not ready", details: Optional[Any] = None):
        super().__init__(message, code="NOT_READY", status_code=503, details=details)
