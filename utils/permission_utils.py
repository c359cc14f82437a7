"""
Centralized permission utilities for user authorization.

Permissions are an explicit enum (enums.permission.Permission); every check
in the services goes through has_any() so the rule lives in one place.
"""

from typing import Iterable

from enums.permission import Permission
from exceptions import ForbiddenException
from models.user import UserDTO


def has_any(permissions: Iterable[Permission | str] | None, required: Iterable[Permission]) -> bool:
    """
    Check whether a permission set contains at least one of the required permissions.

    Args:
        permissions: Permissions held by the user (enum members or raw strings)
        required: Permissions that would each be sufficient

    Returns:
        True if there is any overlap, False otherwise

    Example:
        >>> has_any([Permission.USER, Permission.ITEMDELETE], [Permission.ADMIN, Permission.ITEMDELETE])
        True
        >>> has_any([Permission.USER], [Permission.ADMIN])
        False
    """
    if not permissions:
        return False
    held = {Permission(permission) for permission in permissions}
    return any(permission in held for permission in required)


def require_any(user: UserDTO, required: list[Permission]) -> None:
    """
    Raise ForbiddenException unless the user holds one of the required permissions.
    """
    if not has_any(user.permissions, required):
        raise ForbiddenException(user_id=user.id, required=[permission.value for permission in required])


def owns_or_has_any(user: UserDTO, owner_id: int, required: list[Permission]) -> bool:
    """
    Ownership-or-permission gate used for item updates and deletes.
    """
    return owner_id == user.id or has_any(user.permissions, required)
