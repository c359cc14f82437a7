"""
Tests for utils/password_hasher.py
"""

import pytest

from utils.password_hasher import PasswordHasher


class TestPasswordHasher:
    """Test PasswordHasher hash/verify."""

    def test_hash_format(self):
        encoded = PasswordHasher.hash("dogs4life", iterations=1000)

        algorithm, iterations, salt, digest = encoded.split("$")
        assert algorithm == "pbkdf2_sha256"
        assert iterations == "1000"
        assert salt and digest

    def test_verify_correct_and_wrong_password(self):
        encoded = PasswordHasher.hash("dogs4life")

        assert PasswordHasher.verify("dogs4life", encoded) is True
        assert PasswordHasher.verify("cats4life", encoded) is False

    def test_salt_makes_hashes_unique(self):
        assert PasswordHasher.hash("dogs4life") != PasswordHasher.hash("dogs4life")

    def test_stored_iteration_count_is_used(self):
        encoded = PasswordHasher.hash("dogs4life", iterations=1500)

        assert PasswordHasher.verify("dogs4life", encoded) is True

    @pytest.mark.parametrize("encoded", ["", "plaintext", "md5$1$abc$def", "pbkdf2_sha256$x$abc$def"])
    def test_malformed_hash_never_verifies(self, encoded):
        assert PasswordHasher.verify("dogs4life", encoded) is False

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            PasswordHasher.hash("")
