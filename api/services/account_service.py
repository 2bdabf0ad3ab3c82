"""
Account Service
===============

Registration, login and profile lookup on top of an AccountRepository.

The service knows nothing about HTTP: it raises AccountServiceError
subclasses and the error handler middleware turns them into responses.
"""

import logging

from starlette.concurrency import run_in_threadpool

from api.models.user import AccountPublic
from api.services.account_repository import AccountRepository
from api.utils.security import (
    create_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from exceptions import AccountExistsError, AccountNotFoundError, InvalidCredentialsError


logger = logging.getLogger(__name__)


class AccountService:
    """
    Business operations for user accounts.

    Inputs are expected to be validated and normalized already
    (see api.models.user): emails lower-cased, names stripped.
    """

    def __init__(self, repository: AccountRepository):
        self.repository = repository

    async def register(self, name: str, email: str, password: str) -> str:
        """
        Create an account and return a token for it.

        Raises:
            AccountExistsError: If an account with this email exists
        """
        if await self.repository.find_by_email(email) is not None:
            logger.info(f"Registration rejected, email already in use: {email}")
            raise AccountExistsError(email)

        # bcrypt is CPU-bound, keep it off the event loop
        password_hash = await run_in_threadpool(hash_password, password)
        account = await self.repository.create(name, email, password_hash)

        account_id = str(account["_id"])
        logger.info(f"Registered account {account_id}")
        return create_access_token(account_id)

    async def login(self, email: str, password: str) -> str:
        """
        Check credentials and return a token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password (indistinguishable)
        """
        account = await self.repository.find_by_email(email)
        if account is None:
            # Same bcrypt cost as a wrong password, so timing doesn't reveal the email exists
            await run_in_threadpool(verify_password, password, dummy_password_hash())
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        is_match = await run_in_threadpool(verify_password, password, account["password"])
        if not is_match:
            logger.info(f"Login failed: wrong password for account {account['_id']}")
            raise InvalidCredentialsError()

        return create_access_token(str(account["_id"]))

    async def get_profile(self, account_id: str) -> AccountPublic:
        """
        Return the account without its password hash.

        Raises:
            AccountNotFoundError: If no account has this id
        """
        account = await self.repository.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return AccountPublic.from_document(account)
