class FleetRbacException(Exception):
    """Base exception for the role and permission engine"""

    pass


class UnauthorizedException(FleetRbacException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(FleetRbacException):
    """Raised when resource not found"""

    pass


class ForbiddenException(FleetRbacException):
    """Raised when user tries to act outside their tenant or role"""

    pass


class PermissionDeniedException(ForbiddenException):
    """Raised when the acting user lacks a required permission"""

    def __init__(self, required: list[str] | tuple[str, ...], message: str | None = None):
        self.required = list(required)
        super().__init__(
            message
            or f"You don't have permission to perform this action. Required: {' OR '.join(self.required)}"
        )


class ValidationException(FleetRbacException):
    """Raised for business logic validation errors"""

    pass


class InvalidPermissionException(ValidationException):
    """Raised when a permission identifier is not in the catalog"""

    def __init__(self, identifiers: list[str] | tuple[str, ...]):
        self.identifiers = list(identifiers)
        super().__init__(f"Unknown permission(s): {', '.join(self.identifiers)}")


class ConflictException(FleetRbacException):
    """Raised when a create would violate a uniqueness rule"""

    pass


class ProtectedRoleViolation(FleetRbacException):
    """Raised on any attempt to touch the reserved owner role"""

    pass


class CannotModifyProtectedRoleException(ProtectedRoleViolation):
    pass


class CannotDeleteProtectedRoleException(ProtectedRoleViolation):
    pass


class CannotCreateReservedRoleException(ProtectedRoleViolation):
    pass
