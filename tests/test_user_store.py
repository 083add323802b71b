"""
tests/test_user_store.py -- UserStore persistence and the email UNIQUE constraint.

The concurrency test uses a temporary on-disk SQLite file so two threads
get genuinely independent connections racing on the same table.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import hash_password
from core.database import build_engine


def _user(email: str = "alice@example.com", name: str = "Alice") -> User:
    return User(name=name, email=email, hashed_password=hash_password("pw123456"))


def test_create_and_fetch_by_email(stores):
    user_store, _ = stores
    uid = user_store.create_user(_user())
    user = user_store.get_by_email("alice@example.com")
    assert user is not None
    assert user.id == uid
    assert user.name == "Alice"
    assert user.created_at


def test_get_by_id(stores):
    user_store, _ = stores
    uid = user_store.create_user(_user())
    assert user_store.get_by_id(uid).email == "alice@example.com"
    assert user_store.get_by_id(uid + 100) is None


def test_unknown_email_returns_none(stores):
    user_store, _ = stores
    assert user_store.get_by_email("nobody@example.com") is None


def test_duplicate_email_raises_integrity_error(stores):
    user_store, _ = stores
    user_store.create_user(_user())
    with pytest.raises(IntegrityError):
        user_store.create_user(_user(name="Alice Again"))
    assert user_store.count_users() == 1


def test_password_is_stored_hashed(stores):
    user_store, _ = stores
    user_store.create_user(_user())
    stored = user_store.get_by_email("alice@example.com").hashed_password
    assert stored != "pw123456"
    assert stored.startswith("$2")


def test_concurrent_signups_for_one_email_create_one_account(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    store = UserStore(engine)
    barrier = threading.Barrier(2)
    users = [_user(name="First"), _user(name="Second")]

    def attempt(user: User) -> str:
        barrier.wait()
        try:
            store.create_user(user)
        except IntegrityError:
            return "conflict"
        return "created"

    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = sorted(pool.map(attempt, users))
        assert outcomes == ["conflict", "created"]
        assert store.count_users() == 1
    finally:
        engine.dispose()
