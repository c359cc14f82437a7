"""
Password hashing with PBKDF2-HMAC-SHA256.

Hashes are stored as a single self-describing string:

    pbkdf2_sha256$<iterations>$<salt (urlsafe b64)>$<hash (urlsafe b64)>

so the iteration count can be raised later without breaking stored hashes.

Usage:
    stored = PasswordHasher.hash("correct horse battery staple")
    PasswordHasher.verify("correct horse battery staple", stored)  # True
"""

import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

import config

ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16
KEY_LENGTH = 32


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


class PasswordHasher:

    @staticmethod
    def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=iterations,
        )

    @staticmethod
    def hash(password: str, iterations: int | None = None) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            password: Plaintext password
            iterations: PBKDF2 rounds (defaults to config.PASSWORD_HASH_ITERATIONS)

        Returns:
            Encoded hash string safe to store in the users table
        """
        if not password:
            raise ValueError("Password cannot be empty")
        iterations = iterations or config.PASSWORD_HASH_ITERATIONS
        salt = os.urandom(SALT_BYTES)
        derived = PasswordHasher._kdf(salt, iterations).derive(password.encode("utf-8"))
        return f"{ALGORITHM}${iterations}${_b64encode(salt)}${_b64encode(derived)}"

    @staticmethod
    def verify(password: str, encoded: str) -> bool:
        """
        Check a plaintext password against a stored hash (constant time).

        Returns False for malformed hashes instead of raising.
        """
        try:
            algorithm, iterations, salt, expected = encoded.split("$")
            if algorithm != ALGORITHM:
                return False
            kdf = PasswordHasher._kdf(_b64decode(salt), int(iterations))
            kdf.verify(password.encode("utf-8"), _b64decode(expected))
            return True
        except (ValueError, AttributeError):
            return False
        except InvalidKey:
            return False
