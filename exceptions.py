"""
Custom Exceptions for the Account Service
=========================================

This module defines a hierarchy of custom exceptions that:

1. **Categorize Errors**: Different exception types for different problems
2. **Carry Context**: Include relevant information for debugging
3. **Support APIs**: Map cleanly to HTTP status codes (see error_handler)

Exception Hierarchy:
    AccountServiceError (base)
    ├── AccountExistsError
    ├── InvalidCredentialsError
    ├── AuthenticationRequiredError
    ├── InvalidTokenError
    ├── AccountNotFoundError
    ├── DatabaseUnavailableError
    └── ConfigurationError
"""

from typing import Optional


class AccountServiceError(Exception):
    """
    Base exception for all account service errors.

    All custom exceptions inherit from this, allowing code to catch
    every service error with a single except clause:

        try:
            await service.login(email, password)
        except AccountServiceError as e:
            logger.error(f"Login failed: {e}")

    Attributes:
        message: Human-readable error description
        details: Additional context (not sent to clients)
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """
        Convert to a single entry of the `errors` list in API responses.
        """
        return {
            "msg": self.message,
            "error_type": self.__class__.__name__,
        }


# =============================================================================
# Account Errors
# =============================================================================

class AccountExistsError(AccountServiceError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            message="User already exists",
            details={"email": email}
        )


class InvalidCredentialsError(AccountServiceError):
    """
    Raised when login fails.

    The same message is used for an unknown email and a wrong password
    so callers cannot tell which one happened.
    """

    def __init__(self):
        super().__init__(message="Invalid Credentials")


class AccountNotFoundError(AccountServiceError):
    """Raised when a token refers to an account that does not exist."""

    def __init__(self, account_id: str):
        super().__init__(
            message="User not found",
            details={"account_id": account_id}
        )


# =============================================================================
# Token Errors
# =============================================================================

class AuthenticationRequiredError(AccountServiceError):
    """Raised when a protected route is called without a token."""

    def __init__(self):
        super().__init__(message="No token, authorization denied")


class InvalidTokenError(AccountServiceError):
    """Raised when a token is malformed, expired, or badly signed."""

    def __init__(self, reason: str = ""):
        super().__init__(
            message="Token is not valid",
            details={"reason": reason}
        )


# =============================================================================
# Infrastructure Errors
# =============================================================================

class DatabaseUnavailableError(AccountServiceError):
    """Raised when MongoDB cannot be reached."""

    def __init__(self, url: str, original_error: str):
        super().__init__(
            message=f"Cannot connect to MongoDB: {original_error}",
            details={
                "mongodb_url": url,
                "original_error": original_error
            }
        )


class ConfigurationError(AccountServiceError):
    """Raised when there's a configuration problem."""

    def __init__(self, setting_name: str, issue: str):
        super().__init__(
            message=f"Configuration error for '{setting_name}': {issue}",
            details={
                "setting_name": setting_name,
                "issue": issue
            }
        )
