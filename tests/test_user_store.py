"""Unit tests for auth/store.py -- UserStore persistence.

Covers:
- create_user() assigns opaque string ids
- email uniqueness holds on insert and on update (IntegrityError)
- get_by_email() is case-sensitive
- update_user() rejects unknown fields and reports missing users
- get_many() skips ids that do not exist
"""

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore


def _user(email: str, first: str = "Ada") -> User:
    return User(first_name=first, last_name="Lovelace", email=email, password_hash="$2b$04$fakehash")


@pytest.fixture
def store():
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


def test_create_and_fetch(store):
    user_id = store.create_user(_user("a@b.com"))
    assert isinstance(user_id, str) and len(user_id) == 32

    by_id = store.get_by_id(user_id)
    by_email = store.get_by_email("a@b.com")
    assert by_id == by_email
    assert by_id.first_name == "Ada"
    assert by_id.password_hash == "$2b$04$fakehash"


def test_duplicate_email_rejected_on_create(store):
    store.create_user(_user("dup@b.com"))
    with pytest.raises(IntegrityError):
        store.create_user(_user("dup@b.com", first="Other"))


def test_duplicate_email_rejected_on_update(store):
    store.create_user(_user("one@b.com"))
    second = store.create_user(_user("two@b.com"))
    with pytest.raises(IntegrityError):
        store.update_user(second, email="one@b.com")


def test_email_lookup_is_case_sensitive(store):
    store.create_user(_user("Case@b.com"))
    assert store.get_by_email("case@b.com") is None
    assert store.get_by_email("Case@b.com") is not None


def test_update_user_partial(store):
    user_id = store.create_user(_user("upd@b.com"))
    assert store.update_user(user_id, last_name="Byron") is True
    user = store.get_by_id(user_id)
    assert user.last_name == "Byron"
    assert user.first_name == "Ada"
    assert user.password_hash == "$2b$04$fakehash"


def test_update_missing_user_returns_false(store):
    assert store.update_user("0" * 32, first_name="X") is False
    assert store.update_user("0" * 32) is False


def test_update_unknown_field_raises(store):
    user_id = store.create_user(_user("bad@b.com"))
    with pytest.raises(ValueError):
        store.update_user(user_id, id="hijack")


def test_delete_user(store):
    user_id = store.create_user(_user("del@b.com"))
    assert store.delete_user(user_id) is True
    assert store.get_by_id(user_id) is None
    assert store.delete_user(user_id) is False


def test_get_many_skips_missing(store):
    a = store.create_user(_user("m1@b.com"))
    b = store.create_user(_user("m2@b.com"))
    found = store.get_many([a, b, "f" * 32, a])
    assert set(found) == {a, b}
    assert store.get_many([]) == {}


def test_list_users_returns_everyone(store):
    store.create_user(_user("l1@b.com"))
    store.create_user(_user("l2@b.com"))
    emails = [u.email for u in store.list_users()]
    assert emails == ["l1@b.com", "l2@b.com"]
