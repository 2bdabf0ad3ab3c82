from unittest.mock import patch

import pytest

from api.services.account_service import AccountService
from api.utils.security import dummy_password_hash, get_account_id, verify_password, verify_token
from exceptions import AccountExistsError, AccountNotFoundError, InvalidCredentialsError


@pytest.fixture
def service(repository):
    return AccountService(repository)


@pytest.mark.asyncio
async def test_register_creates_account_and_returns_token(service, repository):
    token = await service.register("Jane", "jane@example.com", "secret123")

    account_id = get_account_id(verify_token(token))
    stored = await repository.find_by_id(account_id)
    assert stored["name"] == "Jane"
    assert stored["email"] == "jane@example.com"


@pytest.mark.asyncio
async def test_register_duplicate_does_not_write(service, repository):
    await service.register("Jane", "jane@example.com", "secret123")

    with pytest.raises(AccountExistsError) as exc_info:
        await service.register("Jane Again", "jane@example.com", "other-pass")

    assert exc_info.value.message == "User already exists"
    assert repository.create_calls == 1
    assert len(repository.documents) == 1


@pytest.mark.asyncio
async def test_login_errors_do_not_reveal_cause(service):
    await service.register("Jane", "jane@example.com", "secret123")

    with pytest.raises(InvalidCredentialsError) as unknown:
        await service.login("who@example.com", "secret123")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await service.login("jane@example.com", "not-it!")

    assert unknown.value.message == wrong.value.message == "Invalid Credentials"


@pytest.mark.asyncio
async def test_login_token_resolves_to_registered_account(service):
    register_token = await service.register("Jane", "jane@example.com", "secret123")
    login_token = await service.login("jane@example.com", "secret123")

    assert get_account_id(verify_token(login_token)) == get_account_id(verify_token(register_token))


@pytest.mark.asyncio
async def test_get_profile_omits_password(service):
    token = await service.register("Jane", "jane@example.com", "secret123")
    account_id = get_account_id(verify_token(token))

    profile = await service.get_profile(account_id)

    assert profile.id == account_id
    assert "password" not in profile.model_dump(by_alias=True)


@pytest.mark.asyncio
async def test_get_profile_unknown_account(service):
    with pytest.raises(AccountNotFoundError):
        await service.get_profile("64b7f0c2a1b2c3d4e5f60718")


@pytest.mark.asyncio
async def test_login_unknown_email_still_verifies_a_hash(service):
    with patch(
        "api.services.account_service.verify_password", wraps=verify_password
    ) as verify:
        with pytest.raises(InvalidCredentialsError):
            await service.login("who@example.com", "secret123")

    verify.assert_called_once()
    assert verify.call_args.args[1] == dummy_password_hash()
