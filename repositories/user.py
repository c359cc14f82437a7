from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.permission import Permission
from models.user import UserDTO, User


class UserRepository:
    @staticmethod
    async def get_by_id(user_id: int, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.id == user_id)
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def get_by_email(email: str, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.email == email)
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def get_by_valid_reset_token(reset_token: str, now: datetime, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.reset_token == reset_token,
                                  User.reset_token_expiry >= now)
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is None:
            return user
        return UserDTO.model_validate(user, from_attributes=True)

    @staticmethod
    async def create(user_dto: UserDTO, session: AsyncSession) -> int:
        user = User(**user_dto.model_dump(exclude_none=True))
        session.add(user)
        await session_flush(session)
        return user.id

    @staticmethod
    async def set_reset_token(user_id: int, reset_token: str | None, reset_token_expiry: datetime | None,
                              session: AsyncSession) -> None:
        stmt = (update(User)
                .where(User.id == user_id)
                .values(reset_token=reset_token, reset_token_expiry=reset_token_expiry))
        await session_execute(stmt, session)

    @staticmethod
    async def set_password(user_id: int, password_hash: str, session: AsyncSession) -> None:
        # Clearing the token makes it single-use
        stmt = (update(User)
                .where(User.id == user_id)
                .values(password=password_hash, reset_token=None, reset_token_expiry=None))
        await session_execute(stmt, session)

    @staticmethod
    async def set_permissions(user_id: int, permissions: list[Permission], session: AsyncSession) -> None:
        stmt = (update(User)
                .where(User.id == user_id)
                .values(permissions=[permission.value for permission in permissions]))
        await session_execute(stmt, session)
