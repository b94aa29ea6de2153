class HRAccessException(Exception):
    """Base exception for the access control service"""

    pass


class UnauthorizedException(HRAccessException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(HRAccessException):
    """Raised when resource not found"""

    pass


class ForbiddenException(HRAccessException):
    """Raised when the principal may not perform a management operation"""

    pass


class AccessDeniedException(ForbiddenException):
    """Raised by enforcement when an access decision denies the request"""

    def __init__(self, message: str, denial_reason: str | None):
        super().__init__(message)
        self.denial_reason = denial_reason


class ConflictException(HRAccessException):
    """Raised when a mutation was rejected without being applied"""

    pass


class ValidationException(HRAccessException):
    """Raised for business logic validation errors"""

    pass
