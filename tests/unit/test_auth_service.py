from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.auth.models import EMAIL_KEY, MOBILE_KEY, TOKEN_KEY, USER_ID_KEY, Identity, coerce_user_id
from storefront.auth.service import SessionState, is_admin_email
from storefront.errors import ApiError, NETWORK_ERROR_MESSAGE, NetworkError
from tests.helpers import make_token

@pytest.fixture
def repo():
    return MagicMock(sign_in=AsyncMock(), sign_up=AsyncMock())

def test_rehydrates_identity_from_storage():
    token = make_token({"id": 9})
    state = SessionState({TOKEN_KEY: token, EMAIL_KEY: "a@b.co", MOBILE_KEY: "0123456789"})
    assert state.is_authenticated
    assert state.identity == Identity(email="a@b.co", id=9, mobile_number="0123456789")

def test_rehydrate_keeps_stored_user_id_zero():
    token = make_token({"id": 9})
    state = SessionState({TOKEN_KEY: token, EMAIL_KEY: "a@b.co", USER_ID_KEY: 0})
    assert state.identity.id == 0
    assert state.resolve_user_id() == 0

def test_no_identity_without_both_token_and_email():
    assert not SessionState({TOKEN_KEY: "t"}).is_authenticated
    assert not SessionState({EMAIL_KEY: "a@b.co"}).is_authenticated

def test_persisted_user_id_wins_over_token():
    state = SessionState({TOKEN_KEY: make_token({"id": 1}), EMAIL_KEY: "a@b.co", USER_ID_KEY: "77"})
    assert state.identity.id == 77

@pytest.mark.asyncio
async def test_login_success_persists_keys(repo):
    token = make_token({"userId": 5})
    repo.sign_in.return_value = token
    storage = {}
    state = SessionState(storage, repo)
    result = await state.login(" a@b.co ", "pw")
    assert result.success
    assert result.user == {"email": "a@b.co", "id": 5, "mobileNumber": None}
    assert storage[TOKEN_KEY] == token
    assert storage[EMAIL_KEY] == "a@b.co"
    assert storage[USER_ID_KEY] == "5"
    assert SessionState(storage).identity.id == 5

@pytest.mark.asyncio
async def test_login_failure_returns_collaborator_message(repo):
    repo.sign_in.side_effect = ApiError("Invalid credentials", upstream_status=401, upstream_message="Invalid credentials")
    storage = {}
    result = await SessionState(storage, repo).login("a@b.co", "bad")
    assert not result.success
    assert result.message == "Invalid credentials"
    assert storage == {}

@pytest.mark.asyncio
async def test_login_failure_without_message_uses_fallback(repo):
    repo.sign_in.side_effect = ApiError("HTTP 500: Internal Server Error", upstream_status=500)
    result = await SessionState({}, repo).login("a@b.co", "bad")
    assert result.message == "Wrong Password or Wrong Email"

@pytest.mark.asyncio
async def test_login_network_failure(repo):
    repo.sign_in.side_effect = NetworkError()
    result = await SessionState({}, repo).login("a@b.co", "pw")
    assert result.message == NETWORK_ERROR_MESSAGE

@pytest.mark.asyncio
async def test_login_with_opaque_token_keeps_identity_without_id(repo):
    repo.sign_in.return_value = "opaque-token"
    state = SessionState({}, repo)
    result = await state.login("a@b.co", "pw")
    assert result.success
    assert state.identity.id is None
    assert state.resolve_user_id() is None

@pytest.mark.asyncio
async def test_register_does_not_open_session(repo):
    repo.sign_up.return_value = {"success": True, "message": "User created"}
    storage = {}
    result = await SessionState(storage, repo).register("a@b.co", "pw1234", "0123456789")
    assert result.success and result.message == "User created"
    repo.sign_up.assert_awaited_once_with("a@b.co", "pw1234", "0123456789")
    assert TOKEN_KEY not in storage

def test_logout_clears_persisted_keys():
    storage = {TOKEN_KEY: "t", EMAIL_KEY: "a@b.co", MOBILE_KEY: "1", USER_ID_KEY: "2", "cartId": "c"}
    state = SessionState(storage)
    state.logout()
    assert not state.is_authenticated
    assert storage == {"cartId": "c"}

class _BrokenStorage(dict):
    def __setitem__(self, key, value):
        raise OSError("quota exceeded")

@pytest.mark.asyncio
async def test_persistence_failure_is_logged_not_raised(repo, caplog):
    repo.sign_in.return_value = make_token({"id": 1})
    state = SessionState(_BrokenStorage(), repo)
    result = await state.login("a@b.co", "pw")
    assert result.success
    assert state.is_authenticated
    assert "auth.persist failed" in caplog.text

def test_admin_email_check():
    assert is_admin_email("Admin@Example.com")
    assert not is_admin_email("john@example.com")
    assert not is_admin_email(None)

@pytest.mark.parametrize("raw,expected", [("42", 42), (7, 7), ("abc-uuid", "abc-uuid"), ("", None), (None, None), (True, None)])
def test_coerce_user_id(raw, expected):
    assert coerce_user_id(raw) == expected
