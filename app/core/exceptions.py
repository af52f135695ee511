from typing import Optional, Any


class FleetLedgerError(Exception):
    """
    Base exception for FleetLedger domain failures.
    Every subclass is a recoverable, structured error reported to the caller.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(FleetLedgerError):
    """
    Raised when required input is missing or malformed.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class DuplicateUserError(FleetLedgerError):
    """
    Raised when a phone number or email already belongs to a user.
    """
    def __init__(self, message: str = "User already exists", details: Optional[Any] = None):
        super().__init__(message, code="DUPLICATE_USER", status_code=409, details=details)


class NotFoundError(FleetLedgerError):
    """
    Raised when a phone, pending signup, vehicle or record is unknown.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class ExpiredError(FleetLedgerError):
    """
    Raised when a one-time code is used after its validity window.
    """
    def __init__(self, message: str = "OTP expired", details: Optional[Any] = None):
        super().__init__(message, code="OTP_EXPIRED", status_code=400, details=details)


class InvalidCodeError(FleetLedgerError):
    """
    Raised when a submitted one-time code does not match.
    """
    def __init__(self, message: str = "Invalid OTP", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_OTP", status_code=400, details=details)


class InvalidCredentialsError(FleetLedgerError):
    """
    Raised when login fails. The message is the same whether the phone is
    unknown or the password is wrong.
    """
    def __init__(self, message: str = "Invalid credentials", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_CREDENTIALS", status_code=401, details=details)


class UnauthenticatedError(FleetLedgerError):
    """
    Raised when a session token is missing, invalid or expired.
    """
    def __init__(self, message: str = "Authentication required", details: Optional[Any] = None):
        super().__init__(message, code="UNAUTHENTICATED", status_code=401, details=details)


class UnauthorizedError(FleetLedgerError):
    """
    Raised when a valid session touches a resource owned by another user.
    """
    def __init__(self, message: str = "Not allowed to access this resource", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)


class ExternalServiceError(FleetLedgerError):
    """
    Raised when an external collaborator (SMS provider) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)
