class CRMAccessException(Exception):
    """Base exception for the CRM access engine"""

    pass


class UnauthorizedException(CRMAccessException):
    """Raised when there is no authenticated user behind a request"""

    pass


class NotFoundException(CRMAccessException):
    """Raised when resource not found (or not visible to the requester)"""

    pass


class ForbiddenException(CRMAccessException):
    """
    Raised when the requester is not permitted to perform an action.

    The message is deliberately generic. It must never carry ownership
    details of the target entity.
    """

    def __init__(self, action: str | None = None):
        self.action = action
        message = f"Not permitted to {action}" if action else "Not permitted"
        super().__init__(message)


class CreationLimitException(ForbiddenException):
    """Raised when an admin has used up its employee creation limit"""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__("create more employees")


class ValidationException(CRMAccessException):
    """Raised for malformed inputs and business rule violations"""

    pass
