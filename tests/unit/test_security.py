"""
Tests for bcrypt password hashing helpers.
"""

from chatdb.core.security import get_password_hash, verify_password


class TestPasswordHashing:
    """Tests for get_password_hash / verify_password."""

    def test_hash_is_salted_and_verifies(self):
        # Act
        first = get_password_hash("secret123", rounds=4)
        second = get_password_hash("secret123", rounds=4)

        # Assert
        assert first != "secret123"
        assert first != second  # different salts
        assert verify_password("secret123", first)
        assert verify_password("secret123", second)
        assert not verify_password("wrong", first)

    def test_work_factor_is_encoded_in_hash(self):
        hashed = get_password_hash("pw", rounds=5)

        assert hashed.startswith("$2b$05$")

    def test_default_work_factor(self):
        hashed = get_password_hash("pw")

        assert hashed.startswith("$2b$10$")

    def test_verify_accepts_bytes_hash(self):
        hashed = get_password_hash("pw", rounds=4)

        assert verify_password("pw", hashed.encode("utf-8"))

    def test_long_passwords_truncated_to_72_bytes(self):
        """
        Arrange: Two passwords sharing the first 72 bytes
        Act: Hash one, verify the other
        Assert: bcrypt treats them as equal
        """
        # Arrange
        base = "x" * 72
        hashed = get_password_hash(base + "tail-one", rounds=4)

        # Act & Assert
        assert verify_password(base + "tail-two", hashed)
        assert not verify_password("x" * 71, hashed)
