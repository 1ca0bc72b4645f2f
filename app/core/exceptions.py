from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self, 
        message: str, 
        status_code: int = 400, 
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class ValidationError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details
        )

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: Any = None):
        super().__init__(
            message=f"{entity} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity.lower(), "id": entity_id}
        )

class RankMoveError(AppException):
    """Raised when a manual move would push a resume past either end of the ranking."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="RANK_MOVE_REJECTED",
            details=details
        )

class CapacityError(AppException):
    def __init__(self, message: str, status_code: int = 413, error_code: str = "FILE_TOO_LARGE"):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code
        )

class UnsupportedFileTypeError(CapacityError):
    def __init__(self, message: str = "Only PDF files are allowed"):
        super().__init__(
            message=message,
            status_code=415,
            error_code="UNSUPPORTED_FILE_TYPE"
        )

class ConsistencyError(AppException):
    """
    A multi-record rank or score update could not be applied as a whole.
    The transaction has been rolled back; details carry what was attempted.
    """
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="RANK_CONSISTENCY_ERROR",
            details=details
        )

class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not identify the caller"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )
