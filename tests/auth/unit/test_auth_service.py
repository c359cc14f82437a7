"""
Tests for services/auth.py

Tests cover:
- Sign up (normalization, hashing, default permissions, duplicates)
- Sign in (generic credential errors)
- Password reset request (token, expiry, mail, rate limit)
- Password reset (confirmation, expiry, single use)
"""

import re
from datetime import datetime, timedelta

import pytest

from enums.permission import Permission
from exceptions import (
    ValidationException,
    EmailAlreadyRegisteredException,
    InvalidCredentialsException,
    PasswordMismatchException,
    InvalidResetTokenException,
    UserNotFoundException,
    MailDeliveryException,
    RateLimitExceededException,
)
from middleware.rate_limit import RateLimiter
from repositories.user import UserRepository
from services.auth import AuthService
from utils.password_hasher import PasswordHasher
from conftest import FakeMailService


class TestSignup:
    """Test AuthService.signup()."""

    @pytest.mark.asyncio
    async def test_creates_user_with_lowercase_email_and_user_permission(self, test_session):
        user = await AuthService.signup("Wes@Example.COM", "Wes", "dogs4life", test_session)

        assert user.id is not None
        assert user.email == "wes@example.com"
        assert user.name == "Wes"
        assert user.permissions == [Permission.USER]

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, test_session):
        user = await AuthService.signup("wes@example.com", "Wes", "dogs4life", test_session)

        assert user.password != "dogs4life"
        assert user.password.startswith("pbkdf2_sha256$")
        assert PasswordHasher.verify("dogs4life", user.password)

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected_case_insensitively(self, test_session):
        await AuthService.signup("wes@example.com", "Wes", "dogs4life", test_session)

        with pytest.raises(EmailAlreadyRegisteredException):
            await AuthService.signup("WES@example.com", "Other Wes", "cats4life", test_session)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,name,password", [
        ("not-an-email", "Wes", "dogs4life"),
        ("wes@example.com", "", "dogs4life"),
        ("wes@example.com", "Wes", ""),
    ])
    async def test_invalid_input(self, test_session, email, name, password):
        with pytest.raises(ValidationException):
            await AuthService.signup(email, name, password, test_session)


class TestSignin:
    """Test AuthService.signin()."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self, test_session, make_user):
        created = await make_user(email="wes@example.com", password="dogs4life")

        user = await AuthService.signin("Wes@Example.com", "dogs4life", test_session)

        assert user.id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, test_session, make_user):
        await make_user(email="wes@example.com", password="dogs4life")

        with pytest.raises(InvalidCredentialsException) as wrong_password:
            await AuthService.signin("wes@example.com", "cats4life", test_session)
        with pytest.raises(InvalidCredentialsException) as unknown_email:
            await AuthService.signin("nobody@example.com", "dogs4life", test_session)

        assert wrong_password.value.message == unknown_email.value.message


class TestRequestReset:
    """Test AuthService.request_reset()."""

    @pytest.mark.asyncio
    async def test_stores_token_with_one_hour_expiry(self, test_session, make_user, mail_service):
        user = await make_user(email="wes@example.com")
        before = datetime.now()

        message = await AuthService.request_reset("wes@example.com", test_session, mail_service)

        stored = await UserRepository.get_by_id(user.id, test_session)
        assert re.fullmatch(r"[0-9a-f]{40}", stored.reset_token)
        assert before + timedelta(minutes=59) < stored.reset_token_expiry <= datetime.now() + timedelta(hours=1)
        # The token only travels by mail
        assert stored.reset_token not in message

    @pytest.mark.asyncio
    async def test_mails_reset_link(self, test_session, make_user, mail_service):
        user = await make_user(email="wes@example.com")

        await AuthService.request_reset("wes@example.com", test_session, mail_service)

        stored = await UserRepository.get_by_id(user.id, test_session)
        assert len(mail_service.sent) == 1
        mail = mail_service.sent[0]
        assert mail["to"] == "wes@example.com"
        assert f"http://localhost:7777/reset?resetToken={stored.reset_token}" in mail["html"]

    @pytest.mark.asyncio
    async def test_unknown_email(self, test_session, mail_service):
        with pytest.raises(UserNotFoundException):
            await AuthService.request_reset("nobody@example.com", test_session, mail_service)

        assert mail_service.sent == []

    @pytest.mark.asyncio
    async def test_mail_failure_is_surfaced(self, test_session, make_user):
        await make_user(email="wes@example.com")

        with pytest.raises(MailDeliveryException):
            await AuthService.request_reset("wes@example.com", test_session, FakeMailService(fail=True))

    @pytest.mark.asyncio
    async def test_rate_limited_per_email(self, test_session, make_user, mail_service, redis_client):
        await make_user(email="wes@example.com")
        limiter = RateLimiter(redis_client)

        for _ in range(3):
            await AuthService.request_reset("wes@example.com", test_session, mail_service, limiter)
        with pytest.raises(RateLimitExceededException):
            await AuthService.request_reset("WES@example.com", test_session, mail_service, limiter)

        assert len(mail_service.sent) == 3


class TestResetPassword:
    """Test AuthService.reset_password()."""

    @pytest.mark.asyncio
    async def test_mismatched_confirmation(self, test_session):
        with pytest.raises(PasswordMismatchException):
            await AuthService.reset_password("whatever", "new-pass", "other-pass", test_session)

    @pytest.mark.asyncio
    async def test_unknown_token(self, test_session):
        with pytest.raises(InvalidResetTokenException):
            await AuthService.reset_password("f" * 40, "new-pass", "new-pass", test_session)

    @pytest.mark.asyncio
    async def test_expired_token(self, test_session, make_user):
        user = await make_user()
        await UserRepository.set_reset_token(user.id, "a" * 40, datetime.now() - timedelta(seconds=1), test_session)
        await test_session.commit()

        with pytest.raises(InvalidResetTokenException):
            await AuthService.reset_password("a" * 40, "new-pass", "new-pass", test_session)

    @pytest.mark.asyncio
    async def test_sets_new_password_and_token_is_single_use(self, test_session, make_user, mail_service):
        user = await make_user(email="wes@example.com", password="old-pass")
        await AuthService.request_reset("wes@example.com", test_session, mail_service)
        token = (await UserRepository.get_by_id(user.id, test_session)).reset_token

        reset_user = await AuthService.reset_password(token, "new-pass", "new-pass", test_session)

        assert reset_user.id == user.id
        assert reset_user.reset_token is None
        assert reset_user.reset_token_expiry is None
        assert (await AuthService.signin("wes@example.com", "new-pass", test_session)).id == user.id
        with pytest.raises(InvalidCredentialsException):
            await AuthService.signin("wes@example.com", "old-pass", test_session)
        with pytest.raises(InvalidResetTokenException):
            await AuthService.reset_password(token, "third-pass", "third-pass", test_session)
