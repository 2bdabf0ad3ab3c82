"""
Security Utilities
==================

JWT token generation/validation and password hashing.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Dict, Any

from jose import jwt, JWTError
from passlib.context import CryptContext

from config import get_settings
from exceptions import ConfigurationError, InvalidTokenError


@lru_cache()
def _get_pwd_context(rounds: int) -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds
    )


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: The JWT token string

    Returns:
        dict: The decoded token payload

    Raises:
        InvalidTokenError: If the token is malformed, expired or badly signed
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    return payload


def get_account_id(payload: Dict[str, Any]) -> str:
    """
    Extract the account id from a decoded `{"user": {"id": ...}}` payload.

    Raises:
        InvalidTokenError: If the payload does not carry an account id
    """
    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        raise InvalidTokenError("payload has no user id")
    return str(user["id"])


def create_access_token(
    account_id: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed token identifying an account.

    Args:
        account_id: Identifier embedded as `user.id`
        expires_delta: Optional custom expiration time

    Returns:
        str: The encoded JWT token
    """
    settings = get_settings()

    if not settings.jwt_secret_key:
        raise ConfigurationError("jwt_secret_key", "must not be empty")

    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(days=settings.jwt_expire_days)

    to_encode = {
        "user": {"id": account_id},
        "iat": now,
        "exp": expire,
    }

    encoded_jwt = jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )

    return encoded_jwt


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt with a random salt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password (salt and cost are embedded in the hash)
    """
    settings = get_settings()
    return _get_pwd_context(settings.bcrypt_rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches
    """
    settings = get_settings()
    return _get_pwd_context(settings.bcrypt_rounds).verify(
        plain_password, hashed_password
    )


@lru_cache()
def _dummy_hash(rounds: int) -> str:
    return _get_pwd_context(rounds).hash("dummy-password-for-timing")


def dummy_password_hash() -> str:
    """
    A valid bcrypt hash at the configured cost, not tied to any account.

    Verifying against it when an email is unknown makes that login take
    as long as a wrong-password login.
    """
    settings = get_settings()
    return _dummy_hash(settings.bcrypt_rounds)
