"""
Password hashing utilities.

Wraps bcrypt for salted one-way hashing of user passwords before they are
stored, and for comparing a plaintext candidate against a stored hash.
"""

from typing import Union

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

DEFAULT_ROUNDS = 10


def _password_bytes(password: str) -> bytes:
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        password_bytes = password_bytes[:BCRYPT_MAX_BYTES]
    return password_bytes


def verify_password(plain_password: str, hashed_password: Union[str, bytes]) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if isinstance(hashed_password, str):
        hashed_bytes = hashed_password.encode('utf-8')
    else:
        hashed_bytes = hashed_password

    return bcrypt.checkpw(_password_bytes(plain_password), hashed_bytes)


def get_password_hash(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash
        rounds: bcrypt work factor

    Returns:
        Hashed password string

    Note:
        Bcrypt has a 72-byte password limit. Passwords are automatically
        truncated if necessary (unlikely for typical passwords).
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)

    # Return as string for storage
    return hashed.decode('utf-8')
