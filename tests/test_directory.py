"""Unit tests for auth/directory.py and auth/policy.py.

Covers:
- register_user() hashes the password and issues a token for the new id
- duplicate email -> Conflict on register and on update
- login_user(): unknown email -> NotFound; wrong password accepted by default,
  rejected with check_password=True
- update_user(): partial updates, password re-hash only when supplied
- delete_user(): NotFound for missing users
- require_owner(): only raises when ownership is enforced
"""

import pytest

from auth import directory
from auth.models import User
from auth.policy import require_owner
from auth.store import UserStore
from auth.tokens import TokenService, verify_password
from core.errors import BadCredentials, Conflict, Forbidden, NotFound

SECRET = "directory-test-signing-key-0123456789abcdef"


@pytest.fixture
def store():
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture
def tokens():
    return TokenService(SECRET)


def _register(store, tokens, email="a@b.com", password="pw"):
    return directory.register_user(store, tokens, "A", "B", email, password, rounds=4)


def test_register_hashes_password_and_issues_token(store, tokens):
    user, token = _register(store, tokens)
    assert user.id
    assert user.password_hash != "pw"
    assert verify_password("pw", user.password_hash)
    assert tokens.verify(token) == user.id
    assert store.get_by_id(tokens.verify(token)).email == "a@b.com"


def test_register_duplicate_email_is_conflict(store, tokens):
    _register(store, tokens)
    with pytest.raises(Conflict):
        _register(store, tokens)


def test_login_unknown_email_is_not_found(store, tokens):
    with pytest.raises(NotFound):
        directory.login_user(store, tokens, "nobody@b.com", "pw")


def test_login_ignores_password_by_default(store, tokens):
    user, _ = _register(store, tokens)
    logged_in, token = directory.login_user(store, tokens, "a@b.com", "definitely-wrong")
    assert logged_in.id == user.id
    assert tokens.verify(token) == user.id


def test_login_checks_password_when_enabled(store, tokens):
    user, _ = _register(store, tokens)
    with pytest.raises(BadCredentials):
        directory.login_user(store, tokens, "a@b.com", "definitely-wrong", check_password=True)
    logged_in, _ = directory.login_user(store, tokens, "a@b.com", "pw", check_password=True)
    assert logged_in.id == user.id


def test_update_keeps_hash_without_new_password(store, tokens):
    user, _ = _register(store, tokens)
    updated = directory.update_user(store, user.id, first_name="Grace")
    assert updated.first_name == "Grace"
    assert updated.last_name == "B"
    assert updated.password_hash == user.password_hash


def test_update_rehashes_new_password(store, tokens):
    user, _ = _register(store, tokens)
    updated = directory.update_user(store, user.id, password="new-pw", rounds=4)
    assert updated.password_hash != user.password_hash
    assert verify_password("new-pw", updated.password_hash)


def test_update_email_to_taken_one_is_conflict(store, tokens):
    _register(store, tokens, email="first@b.com")
    second, _ = _register(store, tokens, email="second@b.com")
    with pytest.raises(Conflict):
        directory.update_user(store, second.id, email="first@b.com")


def test_update_missing_user_is_not_found(store):
    with pytest.raises(NotFound):
        directory.update_user(store, "0" * 32, first_name="X")


def test_get_and_delete(store, tokens):
    user, _ = _register(store, tokens)
    assert directory.get_user(store, user.id).email == "a@b.com"
    directory.delete_user(store, user.id)
    with pytest.raises(NotFound):
        directory.get_user(store, user.id)
    with pytest.raises(NotFound):
        directory.delete_user(store, user.id)


def test_list_users(store, tokens):
    _register(store, tokens, email="x@b.com")
    _register(store, tokens, email="y@b.com")
    assert len(directory.list_users(store)) == 2


# ---------------------------------------------------------------------------
# Ownership policy
# ---------------------------------------------------------------------------


def _actor(user_id: str) -> User:
    return User(first_name="A", last_name="B", email="a@b.com", password_hash="h", id=user_id)


def test_require_owner_allows_owner():
    require_owner(_actor("u1"), "u1", enforce=True)


def test_require_owner_not_enforced_allows_anyone():
    require_owner(_actor("u1"), "u2", enforce=False)


def test_require_owner_enforced_rejects_others():
    with pytest.raises(Forbidden):
        require_owner(_actor("u1"), "u2", enforce=True)
