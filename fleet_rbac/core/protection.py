"""Guards for the reserved owner role."""

import logging

from fleet_rbac.core.exceptions import (
    CannotCreateReservedRoleException,
    CannotDeleteProtectedRoleException,
    CannotModifyProtectedRoleException,
)

logger = logging.getLogger(__name__)

PROTECTED_ROLES = frozenset({"owner"})

ROLE_PROTECTION_MESSAGES = {
    "cannot_modify": "The Owner role cannot be modified to prevent accidental loss of system access",
    "cannot_delete": "The Owner role cannot be deleted to prevent accidental loss of system access",
    "cannot_create": 'Cannot create a role with the reserved name "owner"',
}


def is_protected_role(role_name: str | None) -> bool:
    """Check if a role name is reserved (case-insensitive, ignoring surrounding whitespace)"""
    return bool(role_name) and role_name.strip().lower() in PROTECTED_ROLES


def assert_modifiable(role_name: str | None) -> None:
    """
    Validate that a role's permissions can be changed.

    Raises:
        CannotModifyProtectedRoleException: If the role is protected
    """
    if is_protected_role(role_name):
        logger.warning("Protected role violation", extra={"role_name": role_name, "check": "cannot_modify"})
        raise CannotModifyProtectedRoleException(ROLE_PROTECTION_MESSAGES["cannot_modify"])


def assert_deletable(role_name: str | None) -> None:
    """
    Validate that a role can be deleted.

    Raises:
        CannotDeleteProtectedRoleException: If the role is protected
    """
    if is_protected_role(role_name):
        logger.warning("Protected role violation", extra={"role_name": role_name, "check": "cannot_delete"})
        raise CannotDeleteProtectedRoleException(ROLE_PROTECTION_MESSAGES["cannot_delete"])


def assert_creatable(role_name: str | None) -> None:
    """
    Validate that a new role may use this name.

    Raises:
        CannotCreateReservedRoleException: If the name is reserved
    """
    if is_protected_role(role_name):
        logger.warning("Protected role violation", extra={"role_name": role_name, "check": "cannot_create"})
        raise CannotCreateReservedRoleException(ROLE_PROTECTION_MESSAGES["cannot_create"])
