import asyncio
import logging
import secrets
from datetime import datetime, timedelta

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import session_commit, session_rollback
from enums.permission import Permission
from enums.rate_limit_operation import RateLimitOperation
from exceptions import (
    ValidationException,
    EmailAlreadyRegisteredException,
    InvalidCredentialsException,
    PasswordMismatchException,
    InvalidResetTokenException,
    UserNotFoundException,
)
from middleware.rate_limit import RateLimiter
from models.user import UserDTO, SignupRequestDTO
from repositories.user import UserRepository
from services.mail import MailService
from utils.password_hasher import PasswordHasher

RESET_TOKEN_BYTES = 20


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Account creation, sign in and password reset.

    Cookie handling lives in the GraphQL layer; these methods only return the
    user that should be signed in.
    """

    @staticmethod
    async def signup(email: str, name: str, password: str, session: AsyncSession) -> UserDTO:
        try:
            signup_request = SignupRequestDTO(email=normalize_email(email), name=name, password=password)
        except ValidationError as e:
            fields = ", ".join(str(error["loc"][0]) for error in e.errors())
            raise ValidationException(f"Invalid signup data: {fields}", details={'fields': fields}) from e

        if await UserRepository.get_by_email(signup_request.email, session) is not None:
            raise EmailAlreadyRegisteredException(signup_request.email)

        # PBKDF2 is CPU bound, keep it off the event loop
        password_hash = await asyncio.to_thread(PasswordHasher.hash, signup_request.password)
        user_dto = UserDTO(
            name=signup_request.name,
            email=signup_request.email,
            password=password_hash,
            permissions=[Permission.USER]
        )
        try:
            user_id = await UserRepository.create(user_dto, session)
            await session_commit(session)
        except IntegrityError as e:
            # Lost the race against a concurrent signup with the same email
            await session_rollback(session)
            raise EmailAlreadyRegisteredException(signup_request.email) from e

        logging.info(f"User {user_id} signed up")
        return await UserRepository.get_by_id(user_id, session)

    @staticmethod
    async def signin(email: str, password: str, session: AsyncSession) -> UserDTO:
        user = await UserRepository.get_by_email(normalize_email(email), session)
        # Same error for unknown email and wrong password
        if user is None:
            raise InvalidCredentialsException()
        if not await asyncio.to_thread(PasswordHasher.verify, password, user.password):
            logging.info(f"Failed sign in for user {user.id}")
            raise InvalidCredentialsException()
        return user

    @staticmethod
    async def request_reset(email: str, session: AsyncSession, mail_service: MailService,
                            rate_limiter: RateLimiter | None = None) -> str:
        """
        Generate a reset token for the account and mail it as a link.

        The token is never part of the response. It is valid for
        RESET_TOKEN_TTL_MINUTES and can be used once.

        Raises:
            RateLimitExceededException: Too many requests for this address
            UserNotFoundException: No account for this email
            MailDeliveryException: The mail server did not take the message
        """
        email = normalize_email(email)
        if rate_limiter is not None:
            await rate_limiter.enforce(
                RateLimitOperation.PASSWORD_RESET_REQUEST,
                email,
                max_count=config.MAX_RESET_REQUESTS_PER_HOUR,
                window_seconds=3600
            )

        user = await UserRepository.get_by_email(email, session)
        if user is None:
            raise UserNotFoundException(email=email)

        reset_token = secrets.token_hex(RESET_TOKEN_BYTES)
        reset_token_expiry = datetime.now() + timedelta(minutes=config.RESET_TOKEN_TTL_MINUTES)
        await UserRepository.set_reset_token(user.id, reset_token, reset_token_expiry, session)
        await session_commit(session)

        await mail_service.send_reset_token(user.email, reset_token)
        logging.info(f"Password reset requested for user {user.id}")
        return "reset token successfully generated"

    @staticmethod
    async def reset_password(reset_token: str, password: str, confirm_password: str,
                             session: AsyncSession) -> UserDTO:
        if password != confirm_password:
            raise PasswordMismatchException()
        if not password:
            raise ValidationException("Password cannot be empty")

        user = await UserRepository.get_by_valid_reset_token(reset_token, datetime.now(), session)
        if user is None:
            raise InvalidResetTokenException()

        password_hash = await asyncio.to_thread(PasswordHasher.hash, password)
        await UserRepository.set_password(user.id, password_hash, session)
        await session_commit(session)
        logging.info(f"Password reset completed for user {user.id}")
        return await UserRepository.get_by_id(user.id, session)
