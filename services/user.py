import logging

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit
from enums.permission import Permission
from exceptions import UnauthenticatedException, UserNotFoundException
from models.user import UserDTO
from repositories.user import UserRepository
from utils.permission_utils import require_any

PERMISSION_UPDATE_PERMISSIONS = [Permission.ADMIN, Permission.PERMISSIONUPDATE]


class UserService:

    @staticmethod
    async def get_signed_in_user(user_id: int | None, session: AsyncSession, action: str | None = None) -> UserDTO:
        """Load the caller, treating a session for a deleted account as signed out."""
        if not user_id:
            raise UnauthenticatedException(action)
        user = await UserRepository.get_by_id(user_id, session)
        if user is None:
            raise UnauthenticatedException(action)
        return user

    @staticmethod
    async def get_current_user(user_id: int | None, session: AsyncSession) -> UserDTO | None:
        if not user_id:
            return None
        return await UserRepository.get_by_id(user_id, session)

    @staticmethod
    async def update_permissions(user_id: int | None, target_user_id: int, permissions: list[Permission],
                                 session: AsyncSession) -> UserDTO:
        """
        Replace the permission set of any user.

        The caller needs ADMIN or PERMISSIONUPDATE; the target is usually a
        different user than the caller.
        """
        current_user = await UserService.get_signed_in_user(user_id, session, "update permissions")
        require_any(current_user, PERMISSION_UPDATE_PERMISSIONS)

        target_user = await UserRepository.get_by_id(target_user_id, session)
        if target_user is None:
            raise UserNotFoundException(user_id=target_user_id)

        # Keep the order stable while dropping duplicates
        unique_permissions = list(dict.fromkeys(Permission(permission) for permission in permissions))
        await UserRepository.set_permissions(target_user_id, unique_permissions, session)
        await session_commit(session)
        logging.info(
            f"User {current_user.id} set permissions of user {target_user_id} to "
            f"{[permission.value for permission in unique_permissions]}"
        )
        return await UserRepository.get_by_id(target_user_id, session)
